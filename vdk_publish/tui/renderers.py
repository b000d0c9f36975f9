from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from vdk_publish.conversion.frontmatter import serialize_blueprint
from vdk_publish.models import (
    PublishChannel,
    PublishPreview,
    PublishReport,
    PublishState,
    ValidationResult,
)
from vdk_publish.tui.enums import PUBLISH_STATE_STYLE, UIStyle
from vdk_publish.tui.sections import UISection
from vdk_publish.tui.tables import PreviewTable, ResultTable, ValidationTable
from vdk_publish.utils import compact_home_path, compact_home_paths_in_text


class PublishConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _messages(self, title: str, items, style: str) -> None:
        if not items:
            return
        text = UISection.bullets(escape(compact_home_paths_in_text(item)) for item in items)
        self.console.print(UISection.note(title, text, style=style))

    def render_validation(self, validation: ValidationResult, path: str) -> None:
        self.console.print(
            UISection.wrap(
                "validation",
                ValidationTable.summary_block(validation, compact_home_path(path)),
                style=UIStyle.GREEN.value if validation.valid else UIStyle.RED.value,
            )
        )
        self._messages("errors", validation.errors, UIStyle.RED.value)
        self._messages("warnings", validation.warnings, UIStyle.YELLOW.value)

    def render_preview(self, preview: PublishPreview, path: str, verbose: bool = False) -> None:
        self.render_validation(preview.validation, path)
        self.console.print(
            UISection.note("preview", escape(preview.summary), style=UIStyle.BLUE.value)
        )
        self.console.print(
            UISection.wrap(
                "project context",
                PreviewTable.context_block(preview.project_context),
                style=UIStyle.CYAN.value,
            )
        )

        universal = preview.universal_format
        if universal.get("supported"):
            self.console.print(
                UISection.wrap(
                    "universal format",
                    PreviewTable.conversion_block(universal),
                    style=UIStyle.MAGENTA.value,
                )
            )
        elif universal:
            self.console.print(
                UISection.note(
                    "universal format",
                    f"Conversion not supported: {escape(str(universal.get('error', '')))}",
                    style=UIStyle.RED.value,
                )
            )

        if verbose and preview.blueprint is not None:
            artifact = serialize_blueprint(
                preview.blueprint.frontmatter, preview.blueprint.content
            )
            self.console.print(
                UISection.wrap(
                    "blueprint",
                    Syntax(artifact, "markdown", word_wrap=True),
                    style=UIStyle.DIM.value,
                )
            )

        self._messages("recommendations", preview.recommendations, UIStyle.YELLOW.value)
        if preview.validation.valid:
            self.console.print(
                UISection.note(
                    "next",
                    "Run without --preview to publish.\n"
                    "- vdk-publish publish <rule-file>\n"
                    "- vdk-publish publish <rule-file> --github",
                    style=UIStyle.DIM.value,
                )
            )

    def render_hub_auth_notice(self, auth_url: str) -> None:
        self.console.print(
            UISection.note(
                "vdk hub",
                "You are not signed in to VDK Hub.\n"
                f"Sign in at: {escape(auth_url)}\n"
                "Or publish through a GitHub pull request with --github.",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_report(self, report: PublishReport, path: str) -> None:
        if report.validation is not None:
            self.render_validation(report.validation, path)
            # validation warnings were already shown with the validation panel
            extra = report.warnings[len(report.validation.warnings) :]
        else:
            extra = report.warnings
        self._messages("warnings", extra, UIStyle.YELLOW.value)

        style = PUBLISH_STATE_STYLE.get(report.state, UIStyle.WHITE.value)
        if report.state == PublishState.PUBLISHED and report.result is not None:
            self.console.print(
                UISection.wrap(
                    "published",
                    ResultTable.identifiers_table(report.result),
                    style=style,
                )
            )
            self.render_next_steps(report)
            return

        body = escape(compact_home_paths_in_text(report.error or report.state.value))
        if report.hint:
            body += f"\n[dim]{escape(report.hint)}[/dim]"
        self.console.print(UISection.note(report.state.value, body, style=style))

    def render_next_steps(self, report: PublishReport) -> None:
        result = report.result
        if result is None:
            return
        if result.platform == PublishChannel.GITHUB:
            text = (
                "Your pull request is waiting for review.\n"
                f"- {result.identifiers.get('pr_url', '')}\n"
                f"- after merge: vdk deploy {result.blueprint_id}"
            )
        else:
            text = (
                "Your blueprint is shared on VDK Hub for 24 hours.\n"
                f"- {result.identifiers.get('temp_url', '')}\n"
                f"- expires: {result.identifiers.get('expires_at', '')}"
            )
        self.console.print(UISection.note("next", escape(text), style=UIStyle.DIM.value))
