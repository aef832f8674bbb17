"""Flask CLI commands for refresh-token administration."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from todo_auth.core.container import get_token_service
from todo_auth.core.extensions import db
from todo_auth.services._shared.errors import TokenNotFoundError
from todo_auth.services._shared.ports import RefreshTokenRecord

LOGGER = logging.getLogger(__name__)


def _state(record: RefreshTokenRecord) -> str:
    if record.is_revoked:
        return "revoked"
    if record.is_used:
        return "used"
    return "active"


def _mask(token: str) -> str:
    """Show only enough of a token to tell records apart."""
    return f"{token[:6]}…" if len(token) > 6 else token


@click.group("tokens")
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def tokens_cli(verbose: bool) -> None:
    """Refresh-token administration commands."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


@tokens_cli.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create the ``users`` and ``refresh_tokens`` tables if missing."""
    db.create_all()
    click.echo("Database schema ready.")


@tokens_cli.command("revoke")
@click.argument("token")
@with_appcontext
def revoke_command(token: str) -> None:
    """Revoke a single refresh token."""
    try:
        get_token_service().revoke(token)
    except TokenNotFoundError as exc:
        raise click.ClickException("Refresh token not found.") from exc
    click.echo(f"Revoked {_mask(token)}")


@tokens_cli.command("revoke-user")
@click.argument("user_id")
@with_appcontext
def revoke_user_command(user_id: str) -> None:
    """Revoke every refresh token of USER_ID."""
    count = get_token_service().revoke_all_for_user(user_id)
    click.echo(f"Revoked {count} refresh token(s) for {user_id}")


@tokens_cli.command("list")
@click.argument("user_id")
@with_appcontext
def list_command(user_id: str) -> None:
    """List the refresh tokens of USER_ID, oldest first."""
    records = get_token_service().list_user_tokens(user_id)
    if not records:
        click.echo("  (no tokens)")
        return
    for record in records:
        click.echo(
            f"  #{record.id:<5} {_mask(record.token):<8} jti={record.jwt_id}  "
            f"state={_state(record):<7} created={record.created_date.isoformat()}  "
            f"exp={record.exp.isoformat()}"
        )
