"""Turn a source rule body into the blueprint's markdown body."""

from __future__ import annotations

import json
import re
from typing import Any, Callable

from vdk_publish.errors import ConversionError
from vdk_publish.models import ProjectContext
from vdk_publish.validation.detector import FRONTMATTER_RE

Renderer = Callable[[str, ProjectContext], str]

_ALL_CAPS_LINE_RE = re.compile(r"^([A-Z][A-Z ]+)$", re.MULTILINE)
_LABEL_LINE_RE = re.compile(r"^([A-Za-z][^:\n]*):(?=\s|$)", re.MULTILINE)
_WINDSURF_OPEN_RE = re.compile(r"<windsurf[^>]*>")
_WINDSURF_CLOSE_RE = re.compile(r"</windsurf[^>]*>")
_TAG_RE = re.compile(r"<([^>]+)>")


def text_to_markdown(text: str) -> str:
    markdown = _ALL_CAPS_LINE_RE.sub(r"## \1", text)
    return _LABEL_LINE_RE.sub(r"### \1", markdown)


def _project_information(context: ProjectContext) -> str:
    return (
        "## Project Information\n"
        f"- **Name**: {context.name}\n"
        f"- **Framework**: {context.framework}\n"
        f"- **Language**: {context.language}\n\n"
    )


def _framework_line(context: ProjectContext) -> str:
    return f"**Framework**: {context.framework} | **Language**: {context.language}\n\n"


def render_passthrough(content: str, context: ProjectContext) -> str:
    match = FRONTMATTER_RE.match(content)
    return content[match.end() :] if match else content


def render_claude_memory(content: str, context: ProjectContext) -> str:
    if "## Project Context" in content:
        return content.strip()
    section = (
        "\n## Project Context\n\n"
        f"- **Project**: {context.name}\n"
        f"- **Framework**: {context.framework}\n"
        f"- **Language**: {context.language}\n"
        f"- **Technologies**: {', '.join(context.technologies)}\n\n"
    )
    return (section + content).strip()


def render_cursor_rules(content: str, context: ProjectContext) -> str:
    rendered = f"# {context.name} Development Rules\n\n"
    rendered += f"## Project: {context.name}\n" + _framework_line(context)
    rendered += text_to_markdown(content)
    return rendered.strip()


def load_copilot_config(content: str) -> dict[str, Any]:
    try:
        config = json.loads(content)
    except ValueError as exc:
        raise ConversionError(f"Invalid JSON in Copilot configuration: {exc}") from exc
    if not isinstance(config, dict):
        raise ConversionError("Copilot configuration must be a JSON object")
    return config


def render_copilot_config(content: str, context: ProjectContext) -> str:
    config = load_copilot_config(content)
    rendered = f"# {context.name} - GitHub Copilot Guidelines\n\n"
    rendered += _project_information(context)

    guidelines = config.get("guidelines")
    if isinstance(guidelines, list):
        rendered += "## Guidelines\n\n"
        for index, guideline in enumerate(guidelines, start=1):
            if not isinstance(guideline, dict):
                rendered += f"### Guideline {index}\n\n{guideline}\n\n"
                continue
            title = guideline.get("title") or f"Guideline {index}"
            body = guideline.get("content") or guideline.get("description") or ""
            rendered += f"### {title}\n\n{body}\n\n"

    preferences = config.get("preferences")
    if isinstance(preferences, dict) and preferences:
        rendered += "## Preferences\n\n"
        for key, value in preferences.items():
            rendered += f"- **{key}**: {value}\n"
        rendered += "\n"

    return rendered.strip()


def _tag_to_heading(match: re.Match[str]) -> str:
    tag = match.group(1)
    if tag.startswith("/"):
        return ""
    return f"\n### {tag}\n"


def render_windsurf_rules(content: str, context: ProjectContext) -> str:
    rendered = f"# {context.name} - Windsurf IDE Rules\n\n"
    rendered += _project_information(context)
    cleaned = _WINDSURF_OPEN_RE.sub("", content)
    cleaned = _WINDSURF_CLOSE_RE.sub("", cleaned)
    cleaned = _TAG_RE.sub(_tag_to_heading, cleaned)
    rendered += text_to_markdown(cleaned)
    return rendered.strip()


def render_markdown(content: str, context: ProjectContext) -> str:
    if context.name in content:
        return content.strip()
    header = f"# {context.name} - AI Assistant Rules\n\n" + _framework_line(context)
    return (header + content).strip()


def render_text(content: str, context: ProjectContext) -> str:
    rendered = f"# {context.name} - AI Assistant Rules\n\n" + _framework_line(context)
    rendered += text_to_markdown(content)
    return rendered.strip()
