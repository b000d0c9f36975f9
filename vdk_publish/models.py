from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class FormatKind(str, Enum):
    VDK_BLUEPRINT = "vdk-blueprint"
    CLAUDE_MEMORY = "claude-memory"
    CURSOR_RULES = "cursor-rules"
    COPILOT_CONFIG = "copilot-config"
    WINDSURF_RULES = "windsurf-rules"
    MARKDOWN = "markdown"
    TEXT = "text"


class PublishChannel(str, Enum):
    HUB = "hub"
    GITHUB = "github"


class PublishState(str, Enum):
    PUBLISHED = "published"
    REJECTED = "rejected"
    FAILED = "failed"


class HubShareStatus(str, Enum):
    PRIVATE = "private"
    PENDING_CONFIRMATION = "pending_confirmation"


@dataclass(frozen=True)
class RawRuleFile:
    path: Path
    content: str
    detected_format: FormatKind


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    quality_score: int
    detected_format: FormatKind
    content: str

    @classmethod
    def build(
        cls,
        errors: list[str],
        warnings: list[str],
        quality_score: int,
        detected_format: FormatKind,
        content: str,
    ) -> "ValidationResult":
        return cls(
            valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
            quality_score=quality_score,
            detected_format=detected_format,
            content=content,
        )


@dataclass(frozen=True)
class ProjectContext:
    name: str
    framework: str
    language: str
    technologies: tuple[str, ...] = ()
    structure_summary: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "framework": self.framework,
            "language": self.language,
            "technologies": list(self.technologies),
        }


@dataclass(frozen=True)
class SchemaCheck:
    valid: bool
    errors: tuple[str, ...] = ()


@dataclass
class Blueprint:
    frontmatter: dict[str, Any]
    content: str
    original_format: FormatKind
    schema_check: SchemaCheck = field(default_factory=lambda: SchemaCheck(valid=True))
    source_file: Optional[str] = None

    @property
    def id(self) -> str:
        return str(self.frontmatter.get("id", ""))

    @property
    def title(self) -> str:
        return str(self.frontmatter.get("title", ""))

    @property
    def category(self) -> str:
        return str(self.frontmatter.get("category", "core"))

    @property
    def platforms(self) -> dict[str, dict[str, Any]]:
        platforms = self.frontmatter.get("platforms")
        return platforms if isinstance(platforms, dict) else {}


@dataclass(frozen=True)
class PublishOptions:
    github: bool = False
    private: bool = False
    name: Optional[str] = None


@dataclass(frozen=True)
class PublishResult:
    success: bool
    platform: PublishChannel
    quality_score: int
    identifiers: dict[str, Any] = field(default_factory=dict)

    @property
    def blueprint_id(self) -> str:
        return str(self.identifiers.get("blueprint_id", ""))


@dataclass(frozen=True)
class PublishReport:
    state: PublishState
    validation: Optional[ValidationResult] = None
    result: Optional[PublishResult] = None
    error: Optional[str] = None
    hint: Optional[str] = None
    warnings: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.state == PublishState.PUBLISHED


@dataclass(frozen=True)
class PublishPreview:
    summary: str
    validation: ValidationResult
    project_context: ProjectContext
    universal_format: dict[str, Any]
    recommendations: tuple[str, ...]
    blueprint: Optional[Blueprint] = None
