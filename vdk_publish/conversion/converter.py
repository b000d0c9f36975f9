"""Convert any supported rule format into a canonical blueprint.

Each ``FormatKind`` maps to a ``FormatHandler`` holding a frontmatter builder
and a body renderer. Only the ``vdk-blueprint`` handler keeps existing values;
every other handler synthesizes frontmatter from the content and the project
context.

Schema problems in the generated frontmatter are logged and attached to the
returned ``Blueprint`` rather than raised, so callers always get an artifact
to preview or publish.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import yaml

from vdk_publish.constants import DEFAULT_AUTHOR, DEFAULT_BLUEPRINT_VERSION
from vdk_publish.conversion.frontmatter import parse_frontmatter
from vdk_publish.conversion.inference import (
    PlatformProfile,
    extract_tags,
    extract_title,
    infer_category,
    infer_complexity,
    platform_config,
)
from vdk_publish.conversion.renderers import (
    Renderer,
    load_copilot_config,
    render_claude_memory,
    render_copilot_config,
    render_cursor_rules,
    render_markdown,
    render_passthrough,
    render_text,
    render_windsurf_rules,
)
from vdk_publish.errors import ConversionError
from vdk_publish.models import Blueprint, FormatKind, ProjectContext
from vdk_publish.schema.validator import ISchemaValidator, JsonSchemaBlueprintValidator
from vdk_publish.utils import generate_id, now_millis, today_stamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionClock:
    millis: Callable[[], int] = now_millis
    today: Callable[[], str] = today_stamp

    def new_id(self, title: Any) -> str:
        text = None if title is None else str(title)
        return generate_id(text, millis=self.millis())


FrontmatterBuilder = Callable[[str, ProjectContext, ConversionClock], dict[str, Any]]


@dataclass(frozen=True)
class FormatHandler:
    kind: FormatKind
    build_frontmatter: FrontmatterBuilder
    render: Renderer
    preserves_existing: bool = False


def synthesize_frontmatter(
    content: str,
    context: ProjectContext,
    clock: ConversionClock,
    *,
    source_format: FormatKind,
    title_label: str,
    description: str,
    profile: PlatformProfile,
    title: str | None = None,
    inference_text: str | None = None,
) -> dict[str, Any]:
    resolved_title = title or extract_title(content) or f"{context.name} {title_label}"
    text = content if inference_text is None else inference_text
    today = clock.today()
    return {
        "id": clock.new_id(resolved_title),
        "title": resolved_title,
        "description": description,
        "version": DEFAULT_BLUEPRINT_VERSION,
        "category": infer_category(text, context),
        "created": today,
        "lastUpdated": today,
        "author": DEFAULT_AUTHOR,
        "tags": extract_tags(text, context),
        "complexity": infer_complexity(content),
        "scope": "project",
        "audience": "developer",
        "maturity": "stable",
        "platforms": platform_config(profile),
        "originalFormat": source_format.value,
    }


def _synthesizer(
    source_format: FormatKind,
    title_label: str,
    description: str,
    profile: PlatformProfile,
) -> FrontmatterBuilder:
    def _build(
        content: str, context: ProjectContext, clock: ConversionClock
    ) -> dict[str, Any]:
        return synthesize_frontmatter(
            content,
            context,
            clock,
            source_format=source_format,
            title_label=title_label,
            description=description.format(name=context.name),
            profile=profile,
        )

    return _build


def build_blueprint_frontmatter(
    content: str, context: ProjectContext, clock: ConversionClock
) -> dict[str, Any]:
    try:
        existing, _ = parse_frontmatter(content)
    except (yaml.YAMLError, ValueError) as exc:
        raise ConversionError(f"Invalid VDK Blueprint format: {exc}") from exc

    frontmatter = dict(existing)
    if not frontmatter.get("id"):
        frontmatter["id"] = clock.new_id(frontmatter.get("title") or "untitled")
    if not frontmatter.get("version"):
        frontmatter["version"] = DEFAULT_BLUEPRINT_VERSION
    if not frontmatter.get("platforms"):
        frontmatter["platforms"] = platform_config(PlatformProfile.UNIVERSAL)
    today = clock.today()
    for key in ("created", "lastUpdated"):
        if not frontmatter.get(key):
            frontmatter[key] = today
    return frontmatter


def build_copilot_frontmatter(
    content: str, context: ProjectContext, clock: ConversionClock
) -> dict[str, Any]:
    config = load_copilot_config(content)
    frontmatter = synthesize_frontmatter(
        content,
        context,
        clock,
        source_format=FormatKind.COPILOT_CONFIG,
        title_label="Copilot Guidelines",
        description=(
            config.get("description")
            or f"GitHub Copilot guidelines for {context.name} project"
        ),
        profile=PlatformProfile.COPILOT,
        title=config.get("title") or None,
        inference_text=json.dumps(config),
    )
    return frontmatter


FORMAT_HANDLERS: dict[FormatKind, FormatHandler] = {
    FormatKind.VDK_BLUEPRINT: FormatHandler(
        kind=FormatKind.VDK_BLUEPRINT,
        build_frontmatter=build_blueprint_frontmatter,
        render=render_passthrough,
        preserves_existing=True,
    ),
    FormatKind.CLAUDE_MEMORY: FormatHandler(
        kind=FormatKind.CLAUDE_MEMORY,
        build_frontmatter=_synthesizer(
            FormatKind.CLAUDE_MEMORY,
            "Claude Memory",
            "Claude Code CLI memory rules for {name} project",
            PlatformProfile.CLAUDE,
        ),
        render=render_claude_memory,
    ),
    FormatKind.CURSOR_RULES: FormatHandler(
        kind=FormatKind.CURSOR_RULES,
        build_frontmatter=_synthesizer(
            FormatKind.CURSOR_RULES,
            "Cursor Rules",
            "Cursor IDE rules for {name} project",
            PlatformProfile.CURSOR,
        ),
        render=render_cursor_rules,
    ),
    FormatKind.COPILOT_CONFIG: FormatHandler(
        kind=FormatKind.COPILOT_CONFIG,
        build_frontmatter=build_copilot_frontmatter,
        render=render_copilot_config,
    ),
    FormatKind.WINDSURF_RULES: FormatHandler(
        kind=FormatKind.WINDSURF_RULES,
        build_frontmatter=_synthesizer(
            FormatKind.WINDSURF_RULES,
            "Windsurf Rules",
            "Windsurf IDE rules for {name} project",
            PlatformProfile.WINDSURF,
        ),
        render=render_windsurf_rules,
    ),
    FormatKind.MARKDOWN: FormatHandler(
        kind=FormatKind.MARKDOWN,
        build_frontmatter=_synthesizer(
            FormatKind.MARKDOWN,
            "AI Rules",
            "AI assistant rules for {name} project",
            PlatformProfile.UNIVERSAL,
        ),
        render=render_markdown,
    ),
    FormatKind.TEXT: FormatHandler(
        kind=FormatKind.TEXT,
        build_frontmatter=_synthesizer(
            FormatKind.TEXT,
            "AI Rules",
            "AI assistant rules for {name} project",
            PlatformProfile.UNIVERSAL,
        ),
        render=render_text,
    ),
}


def handler_for(source_format: FormatKind) -> FormatHandler:
    handler = FORMAT_HANDLERS.get(source_format)
    if handler is None:
        raise ConversionError(f"Unsupported format: {source_format}")
    return handler


def enhance_with_project_context(
    frontmatter: dict[str, Any],
    context: ProjectContext,
    preserve_existing: bool = False,
) -> dict[str, Any]:
    enhanced = dict(frontmatter)
    context_tags = [
        tag for tag in (context.framework, context.language, *context.technologies) if tag
    ]

    if preserve_existing:
        if "tags" not in enhanced:
            enhanced["tags"] = list(dict.fromkeys(context_tags))
        enhanced.setdefault("projectContext", context.as_dict())
        return enhanced

    existing_tags = enhanced.get("tags")
    if not isinstance(existing_tags, list):
        existing_tags = []
    enhanced["tags"] = list(dict.fromkeys([*existing_tags, *context_tags]))

    description = str(enhanced.get("description") or "")
    if context.name not in description:
        enhanced["description"] = (
            f"{description} - Adapted for {context.name} ({context.framework})"
        )

    enhanced["projectContext"] = context.as_dict()
    return enhanced


class UniversalConverter:
    def __init__(
        self,
        schema_validator: ISchemaValidator | None = None,
        clock: ConversionClock | None = None,
    ) -> None:
        self._schema_validator = schema_validator or JsonSchemaBlueprintValidator()
        self._clock = clock or ConversionClock()

    def convert_to_universal(
        self,
        content: str,
        source_format: FormatKind,
        project_context: ProjectContext,
        original_file: str | None = None,
    ) -> Blueprint:
        handler = handler_for(source_format)
        frontmatter = handler.build_frontmatter(content, project_context, self._clock)
        body = handler.render(content, project_context)
        frontmatter = enhance_with_project_context(
            frontmatter, project_context, preserve_existing=handler.preserves_existing
        )

        schema_check = self._schema_validator.validate(frontmatter)
        if not schema_check.valid:
            logger.warning(
                "Generated blueprint %s has schema issues: %s",
                frontmatter.get("id"),
                "; ".join(schema_check.errors),
            )

        return Blueprint(
            frontmatter=frontmatter,
            content=body,
            original_format=source_format,
            schema_check=schema_check,
            source_file=original_file,
        )

    def preview_conversion(
        self,
        content: str,
        source_format: FormatKind,
        project_context: ProjectContext,
    ) -> dict[str, Any]:
        try:
            handler = handler_for(source_format)
            frontmatter = handler.build_frontmatter(content, project_context, self._clock)
            body = handler.render(content, project_context)
        except ConversionError as exc:
            return {"supported": False, "error": str(exc)}

        platforms = frontmatter.get("platforms")
        return {
            "supported": True,
            "title": frontmatter.get("title"),
            "description": frontmatter.get("description"),
            "category": frontmatter.get("category"),
            "tags": frontmatter.get("tags", []),
            "platforms": list(platforms) if isinstance(platforms, dict) else [],
            "content_length": len(body),
        }
