"""Done command for mob-claude.

Records the final rotation summary and runs `mob done`.
"""

import click

from mob_claude.commands.output import echo_warnings, fail
from mob_claude.core.mob import MobError
from mob_claude.core.state import PersistenceError
from mob_claude.core.workspace import open_workspace


@click.command(context_settings={"ignore_unknown_options": True})
@click.option("-m", "--message", "message", default="", help="Final note for the session")
@click.option("--skip-summary", is_flag=True, help="Skip AI summary generation")
@click.argument("mob_args", nargs=-1, type=click.UNPROCESSED)
def done(message: str, skip_summary: bool, mob_args: tuple[str, ...]) -> None:
    """Complete the mob session.

    Generates a final summary (when a session is active) and runs 'mob done'.
    Use -- to pass flags through to mob.sh.

    Examples:

        mob-claude done -- --no-squash
    """
    with open_workspace() as workspace:
        echo_warnings(workspace.warnings)
        try:
            result = workspace.orchestrator.done(
                note=message, skip_summary=skip_summary, mob_args=mob_args
            )
        except (MobError, PersistenceError) as e:
            fail(e)

        echo_warnings(result.warnings)
        if result.summary is not None:
            click.echo(f"Final summary: {result.summary.tldr}")
        click.echo("Mob session completed.")
