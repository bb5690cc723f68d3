"""Status command for mob-claude.

Shows mob status, the active session, the plan, the latest summary and,
when configured, the dashboard view of the team.
"""

import click

from mob_claude.commands.output import echo_warnings
from mob_claude.core.api import DashboardError
from mob_claude.core.mob import MobError, base_branch, is_mob_branch
from mob_claude.core.state import PersistenceError
from mob_claude.core.workspace import Workspace, open_workspace

MAX_PLAN_LINES = 20


def plan_preview(plan: str, max_lines: int = MAX_PLAN_LINES) -> str:
    """First max_lines lines of a plan, with a marker for the rest."""
    lines = plan.rstrip("\n").split("\n")
    if len(lines) <= max_lines:
        return "\n".join(lines)
    hidden = len(lines) - max_lines
    return "\n".join(lines[:max_lines] + [f"... ({hidden} more lines)"])


@click.command()
def status() -> None:
    """Show current session status.

    Shows the mob status, the active session, the plan for the branch, the
    latest rotation summary and the dashboard workstreams.
    """
    with open_workspace() as workspace:
        echo_warnings(workspace.warnings)
        orchestrator = workspace.orchestrator

        click.echo("=== Mob Status ===")
        try:
            click.echo(orchestrator.mob.status(), nl=False)
        except MobError as e:
            click.echo(f"mob status: {e}")

        try:
            session = orchestrator.tracker.current()
        except PersistenceError as e:
            echo_warnings([str(e)])
            session = None

        branch = ""
        if session is not None:
            branch = session.branch
            click.echo("\n=== Current Session ===")
            click.echo(f"Branch: {session.branch}")
            click.echo(f"Driver: {session.driver_name}")
            click.echo(f"Started: {session.started_at.isoformat(timespec='seconds')}")
        else:
            try:
                current = orchestrator.mob.current_branch()
                branch = base_branch(current)
                if not is_mob_branch(current):
                    click.echo(f"\nNot on a mob branch ({current})")
            except MobError:
                pass

        if branch:
            try:
                plan = orchestrator.plans.load_plan(branch)
            except OSError as e:
                echo_warnings([f"could not read plan: {e}"])
                plan = ""
            if plan:
                click.echo("\n=== Plan ===")
                click.echo(plan_preview(plan))

        try:
            latest = orchestrator.plans.latest_summary()
        except (OSError, ValueError, KeyError) as e:
            echo_warnings([f"could not read latest summary: {e}"])
            latest = None
        if latest is not None:
            click.echo("\n=== Latest Summary ===")
            click.echo(f"{latest.timestamp.isoformat(timespec='seconds')} {latest.driver_name}")
            click.echo(f"TL;DR: {latest.tldr}")
            for change in latest.changes:
                click.echo(f"  - {change}")
            if latest.next_steps:
                click.echo("Next steps:")
                for step in latest.next_steps:
                    click.echo(f"  - {step}")

        try:
            commits = orchestrator.mob.recent_commits(5)
        except MobError:
            commits = ""
        if commits.strip():
            click.echo("\n=== Recent Commits ===")
            click.echo(commits.rstrip("\n"))

        _echo_dashboard(workspace, branch)


def _echo_dashboard(workspace: Workspace, branch: str) -> None:
    client = workspace.orchestrator.client
    if client is None:
        return

    click.echo("\n=== Dashboard ===")
    try:
        client.ping()
    except DashboardError as e:
        click.echo(f"Dashboard unreachable: {e}")
        return
    click.echo(f"Dashboard: {workspace.config.api_url} (team {workspace.config.team_name})")

    try:
        team = client.get_team()
        if team is None:
            click.echo(f"Team '{workspace.config.team_name}' not found")
        else:
            for ws in team.workstreams:
                marker = "*" if ws.branch == branch else " "
                active = "active" if ws.is_active else "idle"
                click.echo(f" {marker} {ws.branch} ({active})")

        if branch:
            current = client.get_workstream(branch)
            if current is None:
                click.echo(f"Workstream for {branch} is not registered")
            else:
                click.echo(f"Current workstream: {current.id}")
    except DashboardError as e:
        echo_warnings([f"could not query dashboard: {e}"])
