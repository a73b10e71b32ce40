"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1. No tracebacks are printed.
    """
    from cf_provisioner.config.errors import ConfigError
    from cf_provisioner.core.process import CommandError
    from cf_provisioner.engine.errors import (
        DuplicateResourceError,
        ProvisionError,
        UnknownResourceKindError,
    )

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, UnknownResourceKindError):
        _err(f"Invalid resource: {exc}", fg=fg)
    elif isinstance(exc, DuplicateResourceError):
        _err("Validation failed:", fg=fg)
        for e in exc.errors:
            _err(f"  - {e}", fg=fg)
    elif isinstance(exc, ProvisionError):
        _err(str(exc), fg=fg)
        if exc.resolved:
            names = ", ".join(r.remote_name for r in exc.resolved)
            _err(f"  Already resolved: {names}.", fg=fg)
    elif isinstance(exc, CommandError):
        _err(str(exc), fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
