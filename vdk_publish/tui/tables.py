from typing import Any

from rich.markup import escape
from rich.table import Column, Table

from vdk_publish.models import ProjectContext, PublishResult, ValidationResult
from vdk_publish.tui.enums import UIStyle, score_style


class ValidationTable:
    @staticmethod
    def summary_block(validation: ValidationResult, path: str) -> Table:
        style = UIStyle.GREEN.value if validation.valid else UIStyle.RED.value
        verdict = "valid" if validation.valid else "invalid"
        score = validation.quality_score
        score_color = score_style(score)

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("File", escape(path))
        table.add_row("Format", validation.detected_format.value)
        table.add_row("Length", f"{len(validation.content)} chars")
        table.add_row("Quality", f"[{score_color}]{score}/10[/{score_color}]")
        table.add_row("Result", f"[{style}]{verdict}[/{style}]")
        return table


class PreviewTable:
    @staticmethod
    def context_block(context: ProjectContext) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Project", escape(context.name))
        table.add_row("Framework", context.framework)
        table.add_row("Language", context.language)
        table.add_row("Technologies", ", ".join(context.technologies) or "none detected")
        return table

    @staticmethod
    def conversion_block(universal_format: dict[str, Any]) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column(overflow="fold")
        table.add_row("Title", escape(str(universal_format.get("title", ""))))
        table.add_row("Category", str(universal_format.get("category", "")))
        table.add_row(
            "Tags", escape(", ".join(str(tag) for tag in universal_format.get("tags", [])))
        )
        table.add_row("Platforms", ", ".join(universal_format.get("platforms", [])))
        table.add_row("Body", f"{universal_format.get('content_length', 0)} chars")
        return table


class ResultTable:
    @staticmethod
    def identifiers_table(result: PublishResult) -> Table:
        table = Table(
            Column(header="Field", width=22),
            Column(header="Value", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        table.add_row("platform", result.platform.value)
        table.add_row("quality", f"{result.quality_score}/10")
        for key, value in result.identifiers.items():
            table.add_row(key, escape(str(value)))
        return table
