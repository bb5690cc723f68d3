"""CLI entry point for mob-claude.

Usage:
    mob-claude start [mob args]        # Start or join a mob session
    mob-claude next -m "note"          # Record the rotation and hand off
    mob-claude done                    # Record the final rotation and finish
    mob-claude status                  # Show session, plan and latest summary
    mob-claude config show|set         # Manage configuration
"""

import click

from mob_claude.commands.config import config
from mob_claude.commands.done import done
from mob_claude.commands.next import next_cmd
from mob_claude.commands.start import start
from mob_claude.commands.status import status


@click.group()
@click.version_option(package_name="mob-claude")
def main() -> None:
    """mob-claude - Mob programming with Claude Code integration.

    Wraps mob.sh with plan management and AI-powered rotation summaries,
    kept in sync with the team dashboard.
    """
    pass


# Register commands
main.add_command(start)
main.add_command(next_cmd)
main.add_command(done)
main.add_command(status)
main.add_command(config)
