"""Thin wrapper over ``subprocess`` for the external CLIs."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import TYPE_CHECKING, Any

from cf_provisioner.config.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

# Variables that would override or conflict with token-based auth.
_CONFLICTING_ENV_VARS = (
    "CLOUDFLARE_EMAIL",
    "CLOUDFLARE_API_KEY",
    "CF_API_TOKEN",
    "CF_ACCOUNT_ID",
    "CF_API_KEY",
    "WRANGLER_API_TOKEN",
    "WRANGLER_ACCOUNT_ID",
)


class CommandError(Exception):
    """Raised when an external command fails, times out or cannot start."""

    def __init__(
        self,
        cmd: Sequence[str],
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed: {' '.join(self.cmd)} - {message}"
        if stderr:
            msg += f": {stderr}"
        super().__init__(msg)


def run_command(
    command: str,
    args: Sequence[str] = (),
    *,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    input: str | None = None,  # noqa: A002
    capture: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> str:
    """Run *command* with *args* and return its stripped stdout.

    *env*, when given, is the complete child environment (see
    :func:`cloudflare_env`); otherwise the current one is inherited. With
    ``capture=False`` output goes straight to the terminal and ``""`` is
    returned.
    """
    cmd = [command, *args]
    logger.info("→ %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            input=input,
            capture_output=capture,
            text=True,
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        if exc.stdout:
            logger.debug("stdout of failed command: %s", exc.stdout)
        raise CommandError(
            cmd, f"exit code {exc.returncode}", returncode=exc.returncode, stderr=stderr
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandError(cmd, f"timed out after {timeout}s") from exc
    except OSError as exc:
        raise CommandError(cmd, str(exc)) from exc

    if not capture:
        return ""
    return (completed.stdout or "").strip()


def run_json(command: str, args: Sequence[str] = (), **kwargs: Any) -> Any:
    """Run a command whose stdout is JSON. Empty output parses as ``[]``."""
    output = run_command(command, args, **kwargs)
    try:
        return json.loads(output or "[]")
    except json.JSONDecodeError as exc:
        raise CommandError([command, *args], f"invalid JSON output: {exc}") from exc


def cloudflare_env(
    api_token: str,
    account_id: str,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build a child environment authenticated with an API token.

    Raises:
        ConfigError: If either credential is empty.
    """
    if not api_token or not account_id:
        raise ConfigError("Cloudflare API credentials are not available")

    env = dict(os.environ if base is None else base)
    for var in _CONFLICTING_ENV_VARS:
        env.pop(var, None)
    env["CLOUDFLARE_API_TOKEN"] = api_token
    env["CLOUDFLARE_ACCOUNT_ID"] = account_id
    env["WRANGLER_SEND_METRICS"] = "false"
    return env
