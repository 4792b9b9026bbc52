"""Command line access to the endpoint table: list endpoints, make one call.

Provides:
- snoocore endpoints - List the paths and methods of the descriptor table
- snoocore call - Perform a single call and print the JSON body

Example:
    $ snoocore endpoints --json
    $ snoocore call get /r/$subreddit/new -a '$subreddit=python' -a limit=5
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError

from .client import Snoocore
from .errors import SnoocoreError
from .logging_utils import setup_logging
from .settings import LogFormat, SnoocoreSettings

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="snoocore",
    help="Call REST endpoints described by a descriptor table",
    no_args_is_help=True,
)


def _parse_args(pairs: List[str]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--arg")
        parsed[key] = value
    return parsed


def _load_settings(**overrides: Any) -> SnoocoreSettings:
    """Settings from the environment, with options the user actually passed on top."""
    try:
        return SnoocoreSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        typer.echo(f"error: invalid settings: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def endpoints(
    endpoints_file: Optional[Path] = typer.Option(
        None, "--endpoints-file", help="JSON/YAML descriptor table (default: bundled)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a listing"),
) -> None:
    """List endpoint paths and their methods."""
    try:
        with Snoocore(_load_settings(endpoints_file=endpoints_file)) as client:
            rows = client.endpoints()
    except SnoocoreError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps([{"path": path, "methods": list(methods)} for path, methods in rows]))
        return
    for path, methods in rows:
        typer.echo(f"{' '.join(methods):<12} {path}")


@app.command()
def call(
    method: str = typer.Argument(..., help="HTTP method (get, post, put, patch, delete, update)"),
    path: str = typer.Argument(..., help="Endpoint path, e.g. /api/me.json"),
    arg: List[str] = typer.Option([], "--arg", "-a", help="Call argument as key=value"),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="User-Agent string"),
    throttle: Optional[int] = typer.Option(None, "--throttle", help="Throttle unit in ms"),
    access_token: Optional[str] = typer.Option(None, "--access-token", help="OAuth access token"),
    token_type: str = typer.Option("bearer", "--token-type", help="OAuth token type"),
    endpoints_file: Optional[Path] = typer.Option(None, "--endpoints-file"),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logger level (default: SNOOCORE_LOG_LEVEL or WARNING)"
    ),
    log_format: Optional[LogFormat] = typer.Option(
        None, "--log-format", help="console or json (default: SNOOCORE_LOG_FORMAT)"
    ),
) -> None:
    """Perform one call and print the parsed JSON body."""
    settings = _load_settings(
        endpoints_file=endpoints_file, log_level=log_level, log_format=log_format
    )
    setup_logging(level=settings.log_level, fmt=settings.log_format)
    call_args = _parse_args(arg)

    try:
        with Snoocore(settings, user_agent=user_agent, throttle=throttle) as client:
            if access_token:
                client.auth({"access_token": access_token, "token_type": token_type})
            leaf = client.path(path)
            verb = method.lower()
            if verb not in leaf.methods:
                typer.echo(f"error: {path} does not support {method.upper()}", err=True)
                raise typer.Exit(code=1)
            result = leaf.methods[verb](call_args)
    except SnoocoreError as exc:
        logger.debug("Call failed", exc_info=True)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(result, indent=2, sort_keys=True))


def main() -> None:
    app()


__all__ = ["app", "main"]
