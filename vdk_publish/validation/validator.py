from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from vdk_publish.constants import MAX_CONTENT_LENGTH, MIN_CONTENT_LENGTH
from vdk_publish.conversion.frontmatter import parse_frontmatter
from vdk_publish.models import FormatKind, RawRuleFile, ValidationResult
from vdk_publish.schema.validator import ISchemaValidator, JsonSchemaBlueprintValidator
from vdk_publish.utils import read_text
from vdk_publish.validation.detector import detect_format
from vdk_publish.validation.quality import QualityScorer, collect_metrics
from vdk_publish.validation.security import SecurityScanner

logger = logging.getLogger(__name__)

TOO_SHORT_MESSAGE = f"Rule content too short (minimum {MIN_CONTENT_LENGTH} characters)"
TOO_LARGE_MESSAGE = "Rule content very large (>50KB), consider splitting"
INVALID_COPILOT_JSON_MESSAGE = "Invalid JSON format for Copilot configuration"
WINDSURF_TAGS_MESSAGE = "Windsurf rules typically use XML tags for better structure"


class RuleValidator:
    """Quality and safety gate run before anything is converted or sent."""

    def __init__(
        self,
        schema_validator: ISchemaValidator | None = None,
        security_scanner: SecurityScanner | None = None,
        quality_scorer: QualityScorer | None = None,
    ) -> None:
        self._schema_validator = schema_validator or JsonSchemaBlueprintValidator()
        self._security_scanner = security_scanner or SecurityScanner()
        self._quality_scorer = quality_scorer or QualityScorer()

    def read_rule_file(self, file_path: Path) -> RawRuleFile:
        content = read_text(file_path)
        return RawRuleFile(
            path=file_path,
            content=content,
            detected_format=detect_format(file_path, content),
        )

    def validate_for_publishing(self, file_path: Path) -> ValidationResult:
        return self.validate_rule(self.read_rule_file(file_path))

    def validate_rule(self, rule: RawRuleFile) -> ValidationResult:
        content = rule.content
        errors: list[str] = []
        warnings: list[str] = []

        if len(content) < MIN_CONTENT_LENGTH:
            errors.append(TOO_SHORT_MESSAGE)
        if len(content) > MAX_CONTENT_LENGTH:
            warnings.append(TOO_LARGE_MESSAGE)

        try:
            self._check_format(content, rule.detected_format, errors, warnings)
        except Exception as exc:
            errors.append(f"Format validation failed: {exc}")

        try:
            scan = self._security_scanner.scan(content)
        except Exception as exc:
            warnings.append(f"Security scan failed: {exc}")
        else:
            errors.extend(f"Security: {message}" for message in scan.messages())

        score = self._quality_scorer.score(collect_metrics(content, rule.detected_format))
        logger.debug(
            "validated %s as %s (score %d/10, %d errors, %d warnings)",
            rule.path,
            rule.detected_format.value,
            score,
            len(errors),
            len(warnings),
        )
        return ValidationResult.build(
            errors=errors,
            warnings=warnings,
            quality_score=score,
            detected_format=rule.detected_format,
            content=content,
        )

    def _check_format(
        self,
        content: str,
        detected_format: FormatKind,
        errors: list[str],
        warnings: list[str],
    ) -> None:
        if detected_format == FormatKind.VDK_BLUEPRINT:
            try:
                frontmatter, _ = parse_frontmatter(content)
            except (yaml.YAMLError, ValueError) as exc:
                errors.append(f"VDK Blueprint parsing failed: {exc}")
                return
            check = self._schema_validator.validate(frontmatter)
            errors.extend(f"Blueprint: {message}" for message in check.errors)
            return

        if detected_format == FormatKind.COPILOT_CONFIG:
            try:
                json.loads(content)
            except ValueError:
                errors.append(INVALID_COPILOT_JSON_MESSAGE)
            return

        if detected_format == FormatKind.WINDSURF_RULES:
            if "<" not in content and ">" not in content:
                warnings.append(WINDSURF_TAGS_MESSAGE)
