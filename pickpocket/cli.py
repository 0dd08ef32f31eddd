"""
Command-line interface for Pickpocket.

Uses Typer to expose the authorization handshake and the library commands.
Supports loading .env files for the consumer key.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv

from . import runner
from .auth import oauth
from .auth.tokens import TokenHandler
from .config import AppConfig, get_home_folder, get_library_path, load_config
from .core.errors import PickpocketError
from .picker import Picker
from .store import InventoryStore, ensure_home_folder
from .utils.logging import setup_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Selects a random article from your Pocket (former Read It Later).",
)


@dataclass
class CliState:
    cfg: AppConfig
    logger: logging.Logger
    store: InventoryStore
    tokens: TokenHandler


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _fail(state: CliState, exc: PickpocketError) -> None:
    state.logger.error(str(exc))
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Pickpocket keeps a local copy of your Pocket list and picks articles from it."""
    load_dotenv()

    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level

    home = get_home_folder(cfg.storage)
    logger = setup_logging(cfg.logging, home)
    ensure_home_folder(home, logger)

    ctx.obj = CliState(
        cfg=cfg,
        logger=logger,
        store=InventoryStore(get_library_path(cfg.storage), logger),
        tokens=TokenHandler.from_config(cfg.storage),
    )


@app.command("oauth")
def oauth_command(ctx: typer.Context):
    """1st authorization step: ask Pocket to allow Pickpocket app."""
    state = _state(ctx)
    try:
        oauth.request_authorization(state.cfg.pocket, state.tokens, state.logger)
    except PickpocketError as exc:
        _fail(state, exc)


@app.command("authorize")
def authorize_command(ctx: typer.Context):
    """2nd authorization step: allow Pickpocket read/write access to your library."""
    state = _state(ctx)
    try:
        oauth.authorize(state.cfg.pocket, state.tokens, state.logger)
    except PickpocketError as exc:
        _fail(state, exc)


@app.command("pick")
def pick_command(
    ctx: typer.Context,
    quantity: int = typer.Option(1, "--quantity", "-q", min=1, help="Quantity of articles to open."),
):
    """Picks a random article from your library (marking it as read)."""
    state = _state(ctx)
    try:
        Picker(state.store, state.logger).pick(quantity)
    except PickpocketError as exc:
        _fail(state, exc)


@app.command("renew")
def renew_command(ctx: typer.Context):
    """Syncs your local library with your Pocket.

    Deletes read articles from Pocket and downloads the unread ones.
    """
    state = _state(ctx)
    try:
        result = runner.renew(state.cfg, state.store, state.tokens, state.logger)
        runner.status(state.store, state.logger)
    except PickpocketError as exc:
        _fail(state, exc)
    if result is None:
        raise typer.Exit(code=1)


@app.command("status")
def status_command(ctx: typer.Context):
    """Show the number of read/unread articles you have on your local library."""
    state = _state(ctx)
    try:
        runner.status(state.store, state.logger)
    except PickpocketError as exc:
        _fail(state, exc)


if __name__ == "__main__":
    app()
