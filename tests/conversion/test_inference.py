"""Tests for frontmatter inference heuristics."""

import pytest

from vdk_publish.constants import PLATFORM_CLAUDE, PLATFORM_CURSOR, PLATFORM_WINDSURF
from vdk_publish.conversion.inference import (
    CURSOR_DEFAULT_GLOBS,
    PlatformProfile,
    extract_tags,
    extract_title,
    infer_category,
    infer_complexity,
    platform_config,
)
from vdk_publish.models import ProjectContext


GENERIC = ProjectContext(name="tool", framework="generic", language="python")


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("intro\n# Main Title\nMore Words", "Main Title"),
        ("lowercase line\nCapitalized Line\n", "Capitalized Line"),
        ("lowercase\ntitle: from yaml\n", "from yaml"),
        ('{"title": "Json Title", "x": 1}', "Json Title"),
        ("nothing useful here 123", None),
    ],
)
def test_extract_title_priority(content: str, expected) -> None:
    assert extract_title(content) == expected


def test_heading_beats_capitalized_line() -> None:
    assert extract_title("Capitalized First\n# Heading Second\n") == "Heading Second"


def test_extract_tags_context_first_then_keywords(project_context: ProjectContext) -> None:
    tags = extract_tags("Use React with Docker on AWS.", project_context)
    assert tags[:4] == ["react", "typescript", "nodejs", "docker"]
    assert "aws" in tags
    assert tags.count("react") == 1


def test_extract_tags_limit() -> None:
    content = " ".join(["react vue angular nodejs python typescript docker kubernetes aws testing api"])
    assert len(extract_tags(content, GENERIC)) == 10


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("Write unit tests first.", "task"),
        ("Our spec files live next to code.", "task"),
        ("Prefer Vue single file components.", "technology"),
        ("Full stack conventions.", "stack"),
        ("Name things well.", "core"),
    ],
)
def test_infer_category_generic_project(content: str, expected: str) -> None:
    assert infer_category(content, GENERIC) == expected


def test_named_framework_means_technology(project_context: ProjectContext) -> None:
    assert infer_category("Write unit tests first.", project_context) == "technology"


def test_infer_complexity_thresholds() -> None:
    assert infer_complexity("short") == "simple"
    assert infer_complexity("x" * 1500) == "medium"
    headings = "".join(f"# H{i}\n" for i in range(6))
    blocks = "```\na\n```\n" * 4
    assert infer_complexity("x" * 3500 + headings + blocks) == "complex"


def test_platform_profiles() -> None:
    universal = platform_config()
    assert set(universal) >= {PLATFORM_CLAUDE, PLATFORM_CURSOR, PLATFORM_WINDSURF}

    claude = platform_config(PlatformProfile.CLAUDE)[PLATFORM_CLAUDE]
    assert claude["priority"] == 9 and claude["command"] is True

    cursor = platform_config(PlatformProfile.CURSOR)[PLATFORM_CURSOR]
    assert cursor["globs"] == list(CURSOR_DEFAULT_GLOBS)

    windsurf = platform_config(PlatformProfile.WINDSURF)[PLATFORM_WINDSURF]
    assert windsurf["characterLimit"] == 6000
    assert windsurf["mode"] == "workspace"


def test_platform_config_returns_fresh_copies() -> None:
    first = platform_config()
    first[PLATFORM_CLAUDE]["priority"] = 1
    assert platform_config()[PLATFORM_CLAUDE]["priority"] == 5
