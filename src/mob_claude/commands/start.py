"""Start command for mob-claude.

Wraps `mob start`, reconciles the branch's plan with the dashboard and
records the new session.
"""

import click

from mob_claude.commands.output import echo_warnings, fail
from mob_claude.core.mob import MobError
from mob_claude.core.reconcile import PlanAction
from mob_claude.core.state import PersistenceError
from mob_claude.core.workspace import open_workspace

PLAN_MESSAGES = {
    PlanAction.CREATE_DEFAULT: "Plan created at: {path}",
    PlanAction.ADOPT_REMOTE: "Synced plan from dashboard: {path}",
    PlanAction.OVERWRITE_LOCAL: "Synced plan from dashboard: {path}",
    PlanAction.KEEP_LOCAL: "Using existing plan: {path}",
    PlanAction.UNCHANGED: "Plan is up to date: {path}",
}


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("mob_args", nargs=-1, type=click.UNPROCESSED)
def start(mob_args: tuple[str, ...]) -> None:
    """Start or join a mob session.

    Runs 'mob start', fetches the current plan from the dashboard (if
    configured) and begins tracking the rotation. All arguments are passed
    through to mob.sh.

    Examples:

        mob-claude start

        mob-claude start -b my-feature --include-uncommitted-changes
    """
    with open_workspace() as workspace:
        echo_warnings(workspace.warnings)
        click.echo("Starting mob session...")
        try:
            result = workspace.orchestrator.start(mob_args)
        except (MobError, PersistenceError) as e:
            fail(e)

        echo_warnings(result.warnings)
        click.echo(PLAN_MESSAGES[result.plan.action].format(path=result.plan.path))
        if result.session.workstream_id:
            config = workspace.config
            click.echo(f"Registered with dashboard: {config.api_url}/team/{config.team_name}")

        click.echo()
        click.echo("Mob session started!")
        click.echo(f"Driver: {result.session.driver_name}")
        click.echo(f"Branch: {result.branch}")
