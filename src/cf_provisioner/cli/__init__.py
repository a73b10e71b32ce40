"""CLI application for cf-provisioner."""

from __future__ import annotations

import logging
import sys

import typer

from cf_provisioner import __version__
from cf_provisioner.logs import LOG_FORMAT, PACKAGE_LOGGER, env_level

app = typer.Typer(
    name="cf-provisioner",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cf-provisioner {__version__}")
        raise typer.Exit


def _configure_logging(verbose: int) -> None:
    """Set up stdlib logging from ``CF_LOG`` or the ``-v`` count.

    Without either, logging stays unconfigured and only warnings surface.
    """
    level = env_level()
    if level is None and verbose:
        level = logging.DEBUG if verbose >= 2 else logging.INFO
    if level is None:
        return
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v info, -vv debug).",
    ),
) -> None:
    """Provision Cloudflare resources with Pulumi and configure wrangler."""
    _ = version
    _configure_logging(verbose)


# Register commands after app is created to avoid circular imports.
from cf_provisioner.cli import commands as _commands  # noqa: E402, F401
