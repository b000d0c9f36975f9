"""Tests for the rich console rendering of publish results."""

from __future__ import annotations

import logging

from rich.console import Console

from vdk_publish.logging_config import LOGGER_NAME, configure_logging
from vdk_publish.models import (
    FormatKind,
    PublishChannel,
    PublishReport,
    PublishResult,
    PublishState,
    ValidationResult,
)
from vdk_publish.tui import PublishConsoleUI


def _ui() -> tuple[PublishConsoleUI, Console]:
    console = Console(record=True, width=120, color_system=None)
    return PublishConsoleUI(console), console


def _validation(valid: bool = True, errors: tuple[str, ...] = ()) -> ValidationResult:
    return ValidationResult(
        valid=valid,
        errors=errors,
        warnings=("Low quality score (3/10) - consider improving documentation",),
        quality_score=3,
        detected_format=FormatKind.MARKDOWN,
        content="x" * 120,
    )


def test_render_validation_lists_errors() -> None:
    ui, console = _ui()

    ui.render_validation(_validation(valid=False, errors=("Rule content too short",)), "rules.md")

    text = console.export_text()
    assert "invalid" in text
    assert "3/10" in text
    assert "Rule content too short" in text
    assert "Low quality score" in text


def test_render_report_published_github_shows_deploy_hint() -> None:
    ui, console = _ui()
    report = PublishReport(
        state=PublishState.PUBLISHED,
        validation=_validation(),
        result=PublishResult(
            success=True,
            platform=PublishChannel.GITHUB,
            quality_score=3,
            identifiers={
                "pr_url": "https://github.com/entro314-labs/VDK-Blueprints/pull/7",
                "pr_number": 7,
                "blueprint_id": "react-rules-dev-abc",
            },
        ),
        warnings=_validation().warnings + ("Blueprint schema: 'title' is a required property",),
    )

    ui.render_report(report, "rules.md")

    text = console.export_text()
    assert "pull/7" in text
    assert "vdk deploy react-rules-dev-abc" in text
    assert "Blueprint schema" in text
    assert text.count("Low quality score") == 1


def test_render_report_failed_shows_hint() -> None:
    ui, console = _ui()
    report = PublishReport(
        state=PublishState.FAILED,
        validation=_validation(),
        error="VDK Hub authentication required",
        hint="Publish through a GitHub pull request instead with --github",
    )

    ui.render_report(report, "rules.md")

    text = console.export_text()
    assert "failed" in text
    assert "VDK Hub authentication required" in text
    assert "--github" in text


def test_configure_logging_levels() -> None:
    console = Console(record=True, width=120)

    logger = configure_logging(verbose=False, console=console)
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1

    logger = configure_logging(verbose=True, console=console)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_configure_logging_routes_package_loggers() -> None:
    console = Console(record=True, width=120)
    configure_logging(verbose=False, console=console)

    logging.getLogger("vdk_publish.channels.github").warning("Branch %s may already exist", "b")

    assert "Branch b may already exist" in console.export_text()
