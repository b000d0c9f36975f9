"""Classify a rule file's authoring convention from its name and content."""

from __future__ import annotations

import re
from pathlib import Path

from vdk_publish.models import FormatKind

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


def has_frontmatter(content: str) -> bool:
    return FRONTMATTER_RE.match(content) is not None


def detect_format(file_path: str | Path, content: str) -> FormatKind:
    """Return the most specific FormatKind for the file.

    Checks run most-specific first because conventions overlap, e.g. a ``.md``
    file may also carry YAML frontmatter. Never raises; anything unrecognized is
    ``FormatKind.TEXT``.
    """
    filename = Path(file_path).name.lower()

    if filename.endswith(".mdc") or has_frontmatter(content):
        return FormatKind.VDK_BLUEPRINT

    if "claude" in filename or "memory" in filename:
        return FormatKind.CLAUDE_MEMORY

    if filename == ".cursorrules" or "cursor" in filename:
        return FormatKind.CURSOR_RULES

    if "copilot" in filename and (
        filename.endswith(".json") or content.strip().startswith("{")
    ):
        return FormatKind.COPILOT_CONFIG

    if "windsurf" in filename or "<windsurf" in content or filename.endswith(".xml"):
        return FormatKind.WINDSURF_RULES

    if filename.endswith(".md"):
        return FormatKind.MARKDOWN

    return FormatKind.TEXT
