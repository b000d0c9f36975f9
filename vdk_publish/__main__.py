from pathlib import Path
from typing import Any, Dict, Optional, Union

import click
from rich.console import Console

from vdk_publish.channels.github import GitHubChannel
from vdk_publish.channels.hub import HubChannel
from vdk_publish.channels.interfaces import IGitHubChannel, IHubChannel
from vdk_publish.errors import PublishAppError
from vdk_publish.logging_config import configure_logging
from vdk_publish.models import PublishOptions, PublishState
from vdk_publish.project.scanner import ProjectContextExtractor
from vdk_publish.publisher import IPublishInteraction, PublishingOrchestrator
from vdk_publish.tui import PublishConsoleUI


class ClickInteraction(IPublishInteraction):
    def __init__(self, ui: PublishConsoleUI, assume_yes: bool = False) -> None:
        self.ui = ui
        self.assume_yes = assume_yes

    def confirm_hub_auth(self, auth_url: str) -> bool:
        self.ui.render_hub_auth_notice(auth_url)
        if self.assume_yes:
            return True
        try:
            return click.confirm("Sign in to VDK Hub now?", default=False)
        except click.Abort:
            return False

    def request_hub_token(self, auth_url: str) -> Optional[str]:
        try:
            token = click.prompt(
                "Paste the token shown after signing in",
                hide_input=True,
                default="",
                show_default=False,
            )
        except click.Abort:
            return None
        return token.strip() or None


def _channel(obj: Dict[str, Any], use_github: bool) -> Union[IHubChannel, IGitHubChannel]:
    if use_github:
        return obj.get("github") or GitHubChannel()
    return obj.get("hub") or HubChannel()


def _orchestrator(
    obj: Dict[str, Any],
    ui: PublishConsoleUI,
    project: Optional[Path],
    channel: Union[IHubChannel, IGitHubChannel],
    assume_yes: bool = False,
) -> PublishingOrchestrator:
    return PublishingOrchestrator(
        hub=channel if isinstance(channel, IHubChannel) else None,
        github=channel if isinstance(channel, IGitHubChannel) else None,
        context_extractor=obj.get("context_extractor") or ProjectContextExtractor(),
        project_path=project,
        interaction=ClickInteraction(ui, assume_yes=assume_yes),
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Publish local AI assistant rules as VDK blueprints."""
    ctx.ensure_object(dict)


@cli.command(help="Validate a rule file, convert it and publish it.")
@click.argument("rule_file", type=click.Path(path_type=Path))
@click.option("--github", "use_github", is_flag=True, help="Open a pull request on GitHub instead of sharing on VDK Hub.")
@click.option("--private", is_flag=True, help="Share privately on VDK Hub.")
@click.option("--name", default=None, help="Custom blueprint name (GitHub only).")
@click.option("--preview", is_flag=True, help="Validate and convert only; no network calls.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging and the generated blueprint.")
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory used for context (defaults to the current directory).",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Answer yes to confirmation prompts.")
@click.pass_obj
def publish(
    obj: Dict[str, Any],
    rule_file: Path,
    use_github: bool,
    private: bool,
    name: Optional[str],
    preview: bool,
    verbose: bool,
    project: Optional[Path],
    assume_yes: bool,
) -> None:
    configure_logging(verbose)
    ui = PublishConsoleUI(Console())

    if preview:
        # Channels are never built in preview mode.
        orchestrator = PublishingOrchestrator(
            context_extractor=obj.get("context_extractor") or ProjectContextExtractor(),
            project_path=project,
        )
        try:
            result = orchestrator.preview(rule_file)
        except PublishAppError as exc:
            raise click.ClickException(str(exc))
        ui.render_preview(result, str(rule_file), verbose=verbose)
        if not result.validation.valid:
            raise click.exceptions.Exit(1)
        return

    channel = _channel(obj, use_github)
    try:
        orchestrator = _orchestrator(obj, ui, project, channel, assume_yes=assume_yes)
        report = orchestrator.publish(
            rule_file, PublishOptions(github=use_github, private=private, name=name)
        )
    finally:
        channel.close()
    ui.render_report(report, str(rule_file))
    if report.state != PublishState.PUBLISHED:
        raise click.exceptions.Exit(1)


@cli.command(help="Validate a rule file without converting or publishing it.")
@click.argument("rule_file", type=click.Path(path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def validate(rule_file: Path, verbose: bool) -> None:
    configure_logging(verbose)
    ui = PublishConsoleUI(Console())
    orchestrator = PublishingOrchestrator()
    try:
        result = orchestrator.validate(rule_file)
    except PublishAppError as exc:
        raise click.ClickException(str(exc))
    ui.render_validation(result, str(rule_file))
    if not result.valid:
        raise click.exceptions.Exit(1)


def main() -> int:
    try:
        # click returns the exit code instead of raising outside standalone mode
        code = cli(standalone_mode=False)
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
