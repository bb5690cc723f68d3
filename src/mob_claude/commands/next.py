"""Next command for mob-claude.

Records the rotation summary, uploads it to the dashboard, then runs
`mob next`.
"""

import click

from mob_claude.commands.output import echo_warnings, fail
from mob_claude.core.mob import MobError
from mob_claude.core.rotation import NoActiveSessionError
from mob_claude.core.state import PersistenceError
from mob_claude.core.workspace import open_workspace


@click.command("next", context_settings={"ignore_unknown_options": True})
@click.option("-m", "--message", "message", default="", help="Note for the next driver")
@click.option("--skip-summary", is_flag=True, help="Skip AI summary generation")
@click.argument("mob_args", nargs=-1, type=click.UNPROCESSED)
def next_cmd(message: str, skip_summary: bool, mob_args: tuple[str, ...]) -> None:
    """Hand off to the next driver.

    Generates a summary of this rotation, records it locally and on the
    dashboard, then runs 'mob next'. Use -- to pass flags through to mob.sh.

    Examples:

        mob-claude next -m "auth tests pass, login form next"

        mob-claude next -- --stay
    """
    with open_workspace() as workspace:
        echo_warnings(workspace.warnings)
        if not skip_summary and not workspace.config.skip_summary:
            click.echo("Generating rotation summary...")
        try:
            result = workspace.orchestrator.next(
                note=message, skip_summary=skip_summary, mob_args=mob_args
            )
        except (NoActiveSessionError, MobError, PersistenceError) as e:
            fail(e)

        echo_warnings(result.warnings)
        if result.summary is not None:
            click.echo(f"Summary: {result.summary.tldr}")
        click.echo("Handed off to next driver.")
