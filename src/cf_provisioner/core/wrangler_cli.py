"""Wrangler command lines and CLI wrapper.

The ``*_args`` builders are shared by :class:`WranglerCLI` (run here) and the
Pulumi program (run as ``local.Command`` shell strings via
:func:`command_line`).
"""

from __future__ import annotations

import contextlib
import logging
import shlex
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cf_provisioner.core.process import run_command

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

WRANGLER = "wrangler"


def deploy_args(config: Path | str) -> list[str]:
    return ["deploy", "--config", str(config)]


def delete_args(name: str, config: Path | str) -> list[str]:
    return ["delete", name, "--config", str(config)]


def migrations_args(database: str, config: Path | str) -> list[str]:
    return ["d1", "migrations", "apply", database, "--remote", "--config", str(config)]


def secret_bulk_args(config: Path | str) -> list[str]:
    """Secrets are read as a JSON object on stdin, never from argv."""
    return ["secret", "bulk", "--config", str(config)]


def command_line(args: Sequence[str], executable: str = WRANGLER) -> str:
    """Shell-quoted command line for *args*."""
    return shlex.join([executable, *args])


def clean_cache(project_dir: Path) -> None:
    """Remove wrangler's local caches so a build starts fresh."""
    for path in (project_dir / "node_modules" / ".cache" / "wrangler", project_dir / ".wrangler"):
        with contextlib.suppress(FileNotFoundError):
            shutil.rmtree(path)
            logger.debug("Removed %s", path)


class WranglerCLI:
    """Runs ``wrangler`` from a project directory with a fixed environment."""

    def __init__(
        self,
        project_dir: Path,
        *,
        env: Mapping[str, str] | None = None,
        executable: str = WRANGLER,
    ) -> None:
        self._project_dir = project_dir
        self._env = env
        self._executable = executable

    def _run(self, args: list[str], **kwargs: Any) -> str:
        kwargs.setdefault("timeout", None)
        return run_command(
            self._executable, args, cwd=self._project_dir, env=self._env, **kwargs
        )

    def delete(self, name: str, config: Path) -> None:
        # wrangler asks for confirmation before deleting a worker.
        self._run(delete_args(name, config), input="Y\n")

    def pages_deploy(
        self, project_name: str, *, directory: str = "dist", branch: str = "production"
    ) -> None:
        self._run(
            [
                "pages",
                "deploy",
                directory,
                "--project-name",
                project_name,
                "--branch",
                branch,
                "--commit-dirty=true",
            ],
            capture=False,
        )
