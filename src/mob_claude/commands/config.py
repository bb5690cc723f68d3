"""Config commands for mob-claude."""

import click

from mob_claude.commands.output import echo_warnings, fail
from mob_claude.core.config import (
    CONFIG_KEYS,
    Config,
    ConfigError,
    load_config,
    save_config,
    set_config_value,
)
from mob_claude.core.project import get_config_path, get_root_path


@click.group()
def config() -> None:
    """View or update mob-claude configuration."""
    pass


@config.command()
def show() -> None:
    """Show current configuration."""
    root = get_root_path()
    warnings: list[str] = []
    try:
        cfg = load_config(root, warnings=warnings)
    except ConfigError as e:
        fail(e)
    echo_warnings(warnings)

    click.echo("Current configuration:")
    for key, value in cfg.to_dict().items():
        if isinstance(value, bool):
            value = str(value).lower()
        click.echo(f"  {key + ':':<13}{value}")
    click.echo(f"\nConfig file: {get_config_path(root)}")


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def set_value(key: str, value: str) -> None:
    """Set a configuration value.

    KEY is one of apiUrl, teamName, model, maxTurns, skipSummary.

    Examples:

        mob-claude config set teamName platform

        mob-claude config set maxTurns 5
    """
    root = get_root_path()
    warnings: list[str] = []
    try:
        cfg = load_config(root, warnings=warnings)
    except ConfigError as e:
        warnings.append(f"could not load config: {e}")
        cfg = Config()
    echo_warnings(warnings)

    try:
        set_config_value(cfg, key, value)
    except ConfigError as e:
        fail(e)

    save_config(root, cfg)
    click.echo(f"Set {key} = {value}")
