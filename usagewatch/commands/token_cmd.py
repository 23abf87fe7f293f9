"""CLI handlers for session token commands."""

from __future__ import annotations

import asyncio

import click

from usagewatch.config import load_config
from usagewatch.infra.credentials import CredentialResolver, normalize_credential
from usagewatch.infra.token_store import ConfigTokenStore


def _run(coro):
    return asyncio.run(coro)


def _mask(credential: str) -> str:
    name, _, value = credential.partition("=")
    if len(value) <= 12:
        return f"{name}=****"
    return f"{name}={value[:6]}...{value[-4:]}"


@click.group("token")
def token_group():
    """Manage the session token."""
    pass


@token_group.command("set")
@click.argument("token", required=False)
def token_set(token: str | None):
    """Save a session token (prompted for when omitted)."""
    if not token:
        token = click.prompt(
            "Session token (cookie value from the dashboard)",
            hide_input=True,
            default="",
            show_default=False,
        )
    if not token.strip():
        click.echo("No token entered, nothing saved.", err=True)
        return
    config = load_config()
    store = ConfigTokenStore(config)
    store.save(normalize_credential(token, config.api.cookie_name))
    click.echo(f"Token saved to {store.path}")


@token_group.command("clear")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
def token_clear(yes: bool):
    """Forget the stored session token."""
    if not yes and not click.confirm("Are you sure you want to clear the stored token?"):
        return
    config = load_config()
    store = ConfigTokenStore(config)
    store.clear()
    click.echo("Stored token cleared.")


@token_group.command("show")
def token_show():
    """Show which token would be used, and where it comes from."""
    config = load_config()
    resolver = CredentialResolver(
        token_store=ConfigTokenStore(config),
        db_path=config.resolved_state_db_path,
        cookie_name=config.api.cookie_name,
    )
    credential = _run(resolver.resolve())
    if not credential:
        click.echo("No session token found. Use 'usagewatch token set' to configure one.")
        return
    click.echo(f"Source: {resolver.last_source.value}")
    click.echo(f"Token: {_mask(credential)}")
