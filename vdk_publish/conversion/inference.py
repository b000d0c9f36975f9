"""Heuristics used to synthesize blueprint frontmatter from free-form rules."""

from __future__ import annotations

import re
from copy import deepcopy
from enum import Enum
from typing import Any

from vdk_publish.constants import (
    GENERIC_FRAMEWORK,
    MAX_CONTENT_TAGS,
    PLATFORM_CLAUDE,
    PLATFORM_COPILOT,
    PLATFORM_CURSOR,
    PLATFORM_WINDSURF,
)
from vdk_publish.models import ProjectContext

# Most specific first: markdown H1, capitalized line, YAML title, JSON title.
TITLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^#\s+(.+)$", re.MULTILINE),
    re.compile(r"^([A-Z][A-Za-z \t]+?)[ \t]*$", re.MULTILINE),
    re.compile(r"title:\s*(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r'"title"\s*:\s*"([^"]+)"', re.IGNORECASE),
)

TECH_KEYWORDS: tuple[str, ...] = (
    "react",
    "vue",
    "angular",
    "nodejs",
    "python",
    "typescript",
    "javascript",
    "docker",
    "kubernetes",
    "aws",
    "testing",
    "api",
    "database",
    "frontend",
    "backend",
    "fullstack",
    "mobile",
    "web",
    "cli",
    "framework",
)

FRAMEWORK_KEYWORDS: tuple[str, ...] = ("react", "vue", "angular")

CURSOR_DEFAULT_GLOBS: tuple[str, ...] = ("**/*.js", "**/*.ts", "**/*.jsx", "**/*.tsx")


class Category(str, Enum):
    CORE = "core"
    TECHNOLOGY = "technology"
    TASK = "task"
    STACK = "stack"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class PlatformProfile(str, Enum):
    UNIVERSAL = "universal"
    CLAUDE = "claude-code-cli-optimized"
    CURSOR = "cursor-optimized"
    WINDSURF = "windsurf-optimized"
    COPILOT = "copilot-optimized"


def extract_title(content: str) -> str | None:
    for pattern in TITLE_PATTERNS:
        match = pattern.search(content)
        if match:
            title = match.group(1).strip()
            if title:
                return title
    return None


def extract_tags(content: str, context: ProjectContext) -> list[str]:
    tags: list[str] = []

    def _add(tag: str) -> None:
        if tag and tag not in tags:
            tags.append(tag)

    if context.framework:
        _add(context.framework.lower())
    if context.language:
        _add(context.language.lower())
    for tech in context.technologies:
        _add(tech.lower())

    lowered = content.lower()
    for keyword in TECH_KEYWORDS:
        if keyword in lowered:
            _add(keyword)

    return tags[:MAX_CONTENT_TAGS]


def infer_category(content: str, context: ProjectContext) -> str:
    lowered = content.lower()
    if context.framework and context.framework != GENERIC_FRAMEWORK:
        return Category.TECHNOLOGY.value
    if "test" in lowered or "spec" in lowered:
        return Category.TASK.value
    if any(keyword in lowered for keyword in FRAMEWORK_KEYWORDS):
        return Category.TECHNOLOGY.value
    if "full stack" in lowered or "fullstack" in lowered:
        return Category.STACK.value
    return Category.CORE.value


def complexity_score(content: str) -> int:
    code_blocks = content.count("```") / 2
    headings = len(re.findall(r"^#+\s", content, re.MULTILINE))
    score = 0
    if len(content) > 1000:
        score += 1
    if len(content) > 3000:
        score += 1
    if code_blocks > 3:
        score += 1
    if headings > 5:
        score += 1
    return score


def infer_complexity(content: str) -> str:
    score = complexity_score(content)
    if score >= 3:
        return Complexity.COMPLEX.value
    if score >= 1:
        return Complexity.MEDIUM.value
    return Complexity.SIMPLE.value


_BASE_PLATFORMS: dict[str, dict[str, Any]] = {
    PLATFORM_CLAUDE: {"compatible": True, "memory": True, "priority": 5},
    PLATFORM_CURSOR: {"compatible": True, "activation": "auto-attached", "priority": "medium"},
    PLATFORM_WINDSURF: {"compatible": True, "mode": "workspace", "priority": 7},
    PLATFORM_COPILOT: {"compatible": True, "priority": 8},
}


def platform_config(profile: PlatformProfile = PlatformProfile.UNIVERSAL) -> dict[str, dict[str, Any]]:
    platforms = deepcopy(_BASE_PLATFORMS)
    if profile == PlatformProfile.CLAUDE:
        platforms[PLATFORM_CLAUDE].update(priority=9, command=True)
    elif profile == PlatformProfile.CURSOR:
        platforms[PLATFORM_CURSOR].update(priority="high", globs=list(CURSOR_DEFAULT_GLOBS))
    elif profile == PlatformProfile.WINDSURF:
        platforms[PLATFORM_WINDSURF].update(priority=9, characterLimit=6000)
    elif profile == PlatformProfile.COPILOT:
        platforms[PLATFORM_COPILOT].update(priority=9, maxGuidelines=10)
    return platforms
