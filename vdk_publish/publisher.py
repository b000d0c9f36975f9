"""Top-level publish flow: validate, convert, then hand off to one channel.

Validation always runs before any channel is touched, and a rejected rule
never reaches the network. Preview stops after conversion and only reads the
local filesystem.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

from vdk_publish.channels.interfaces import IGitHubChannel, IHubChannel
from vdk_publish.constants import GENERIC_FRAMEWORK, HUB_SHARE_TTL_HOURS
from vdk_publish.conversion.converter import UniversalConverter
from vdk_publish.errors import (
    ChannelError,
    ConversionError,
    HubAuthError,
    PublishAppError,
)
from vdk_publish.models import (
    Blueprint,
    HubShareStatus,
    ProjectContext,
    PublishChannel,
    PublishOptions,
    PublishPreview,
    PublishReport,
    PublishResult,
    PublishState,
    ValidationResult,
)
from vdk_publish.project.scanner import ProjectContextExtractor
from vdk_publish.validation.validator import RuleValidator

logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "Rule validation failed"
HUB_ALTERNATIVE_HINT = (
    "Publish through a GitHub pull request instead with --github "
    "(requires GITHUB_TOKEN)."
)


class IPublishInteraction(ABC):
    """Caller-side decisions the flow cannot make on its own."""

    @abstractmethod
    def confirm_hub_auth(self, auth_url: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def request_hub_token(self, auth_url: str) -> Optional[str]:
        raise NotImplementedError


class DeclineInteraction(IPublishInteraction):
    def confirm_hub_auth(self, auth_url: str) -> bool:
        return False

    def request_hub_token(self, auth_url: str) -> Optional[str]:
        return None


def publishing_recommendations(
    validation: ValidationResult, project_context: ProjectContext
) -> tuple[str, ...]:
    recommendations: list[str] = []
    if validation.quality_score < 6:
        recommendations.append("Consider adding more examples and documentation")
    if len(validation.content) < 500:
        recommendations.append(
            "Rule content is quite brief - consider adding more detail"
        )
    if project_context.framework == GENERIC_FRAMEWORK:
        recommendations.append(
            "Consider adding technology-specific context for better adaptation"
        )
    return tuple(recommendations)


def preview_summary(validation: ValidationResult, project_context: ProjectContext) -> str:
    return (
        f"Will publish {validation.detected_format.value} rule "
        f"({len(validation.content)} chars, Quality: {validation.quality_score}/10) "
        f"for {project_context.framework} project"
    )


def _schema_warnings(blueprint: Blueprint) -> tuple[str, ...]:
    return tuple(f"Blueprint schema: {error}" for error in blueprint.schema_check.errors)


class PublishingOrchestrator:
    def __init__(
        self,
        hub: IHubChannel | None = None,
        github: IGitHubChannel | None = None,
        validator: RuleValidator | None = None,
        converter: UniversalConverter | None = None,
        context_extractor: ProjectContextExtractor | None = None,
        project_path: Path | None = None,
        interaction: IPublishInteraction | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.hub = hub
        self.github = github
        self.validator = validator or RuleValidator()
        self.converter = converter or UniversalConverter()
        self.context_extractor = context_extractor or ProjectContextExtractor()
        self.project_path = project_path or Path.cwd()
        self.interaction = interaction or DeclineInteraction()
        self._now = now or (lambda: datetime.now(timezone.utc))

    def validate(self, rule_path: Path) -> ValidationResult:
        return self.validator.validate_for_publishing(rule_path)

    def project_context(self) -> ProjectContext:
        return self.context_extractor.extract(self.project_path)

    def preview(self, rule_path: Path) -> PublishPreview:
        validation = self.validate(rule_path)
        context = self.project_context()

        blueprint: Blueprint | None = None
        universal_format: dict = {}
        if validation.valid:
            universal_format = self.converter.preview_conversion(
                validation.content, validation.detected_format, context
            )
            try:
                blueprint = self.converter.convert_to_universal(
                    validation.content,
                    validation.detected_format,
                    context,
                    original_file=str(rule_path),
                )
            except ConversionError as exc:
                logger.debug("Preview conversion failed: %s", exc)

        return PublishPreview(
            summary=preview_summary(validation, context),
            validation=validation,
            project_context=context,
            universal_format=universal_format,
            recommendations=publishing_recommendations(validation, context)
            if validation.valid
            else (),
            blueprint=blueprint,
        )

    def publish(self, rule_path: Path, options: PublishOptions) -> PublishReport:
        try:
            validation = self.validate(rule_path)
        except PublishAppError as exc:
            return PublishReport(state=PublishState.FAILED, error=str(exc), hint=exc.hint)

        if not validation.valid:
            return PublishReport(
                state=PublishState.REJECTED,
                validation=validation,
                error=REJECTED_MESSAGE,
                warnings=validation.warnings,
            )

        warnings = validation.warnings
        try:
            context = self.project_context()
            blueprint = self.converter.convert_to_universal(
                validation.content,
                validation.detected_format,
                context,
                original_file=str(rule_path),
            )
            warnings = warnings + _schema_warnings(blueprint)
            if options.github:
                result = self._publish_to_github(
                    blueprint, rule_path, context, validation, options
                )
            else:
                result = self._publish_to_hub(blueprint, context, validation, options)
        except PublishAppError as exc:
            return PublishReport(
                state=PublishState.FAILED,
                validation=validation,
                error=str(exc),
                hint=exc.hint,
                warnings=warnings,
            )
        except Exception as exc:
            logger.exception("Unexpected error while publishing %s", rule_path)
            return PublishReport(
                state=PublishState.FAILED,
                validation=validation,
                error=f"Unexpected error: {exc}",
                warnings=warnings,
            )

        return PublishReport(
            state=PublishState.PUBLISHED,
            validation=validation,
            result=result,
            warnings=warnings,
        )

    def _publish_to_github(
        self,
        blueprint: Blueprint,
        rule_path: Path,
        context: ProjectContext,
        validation: ValidationResult,
        options: PublishOptions,
    ) -> PublishResult:
        if self.github is None:
            raise ChannelError("github", "GitHub channel is not configured")
        pr = self.github.create_community_blueprint_pr(
            blueprint=blueprint,
            original_path=str(rule_path),
            project_context=context,
            quality_score=validation.quality_score,
            custom_name=options.name,
        )
        return PublishResult(
            success=True,
            platform=PublishChannel.GITHUB,
            quality_score=validation.quality_score,
            identifiers=pr.as_dict(),
        )

    def _ensure_hub_auth(self) -> None:
        if self.hub is None:
            raise ChannelError("hub", "VDK Hub channel is not configured")
        if self.hub.check_auth().authenticated:
            return

        auth_url = self.hub.auth_url()
        if not self.interaction.confirm_hub_auth(auth_url):
            raise HubAuthError(
                "VDK Hub authentication required", remediation=HUB_ALTERNATIVE_HINT
            )
        token = self.interaction.request_hub_token(auth_url)
        if not token:
            raise HubAuthError(
                "No VDK Hub token provided", remediation=HUB_ALTERNATIVE_HINT
            )
        self.hub.save_auth_token(token)
        if not self.hub.check_auth().authenticated:
            raise HubAuthError(
                "VDK Hub rejected the provided token", remediation=HUB_ALTERNATIVE_HINT
            )

    def _publish_to_hub(
        self,
        blueprint: Blueprint,
        context: ProjectContext,
        validation: ValidationResult,
        options: PublishOptions,
    ) -> PublishResult:
        self._ensure_hub_auth()

        status = (
            HubShareStatus.PRIVATE
            if options.private
            else HubShareStatus.PENDING_CONFIRMATION
        )
        expires_at = self._now() + timedelta(hours=HUB_SHARE_TTL_HOURS)
        upload = self.hub.upload_blueprint(
            blueprint,
            status=status,
            expires_at=expires_at,
            metadata={
                "qualityScore": validation.quality_score,
                "originalFormat": validation.detected_format.value,
                "projectContext": context.as_dict(),
                "originalFile": Path(blueprint.source_file or "").name or None,
            },
        )
        return PublishResult(
            success=True,
            platform=PublishChannel.HUB,
            quality_score=validation.quality_score,
            identifiers={
                "blueprint_id": upload.blueprint_id,
                "temp_url": upload.temp_url,
                "expires_at": upload.expires_at,
                "status": status.value,
                "confirmation_required": upload.confirmation_required,
            },
        )
