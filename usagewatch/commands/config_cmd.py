"""CLI handlers for config commands."""

from __future__ import annotations

import json

import click

from usagewatch.config import init_config, load_config, set_value


@click.group("config")
def config_group():
    """Manage configuration."""
    pass


@config_group.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def config_init(force: bool):
    """Create default configuration file."""
    config = load_config()
    if config.config_path.exists() and not force:
        click.echo(f"Config already exists at: {config.config_path} (use --force to overwrite)")
        return
    path = init_config(config.config_path)
    click.echo(f"Configuration created at: {path}")


@config_group.command("show")
def config_show():
    """Show current configuration."""
    config = load_config()
    interval = config.refresh.interval
    click.echo(f"Config file: {config.config_path}")
    click.echo(f"  API: {config.api.url} (timeout={config.api.timeout}s)")
    click.echo(f"  Cookie name: {config.api.cookie_name}")
    click.echo(f"  Refresh interval: {f'{interval}s' if interval else 'disabled'}")
    click.echo(f"  Lookback: {config.refresh.lookback.value}")
    click.echo(f"  Session token: {'configured' if config.auth.session_token else 'not set'}")
    click.echo(f"  State database: {config.auth.state_db_path or 'auto-detect'}")


def _coerce(value: str):
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        pass
    if value.startswith("[") or value.startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


@config_group.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value.

    Modifies the TOML config file. Key uses dot notation, e.g.:
    refresh.interval, refresh.lookback, api.timeout
    """
    set_value(key, _coerce(value))
    click.echo(f"Set {key} = {value}")
