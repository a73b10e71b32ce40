"""Pulumi CLI wrapper."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cf_provisioner.core.process import CommandError, run_command, run_json

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)


class PulumiCLI:
    """Runs ``pulumi`` against one project directory.

    Every call passes ``--cwd <pulumi_dir>`` so the caller's working
    directory does not matter.
    """

    def __init__(
        self,
        pulumi_dir: Path,
        *,
        env: Mapping[str, str] | None = None,
        executable: str = "pulumi",
    ) -> None:
        self._pulumi_dir = pulumi_dir
        self._env = env
        self._executable = executable

    @property
    def pulumi_dir(self) -> Path:
        return self._pulumi_dir

    def _run(self, *args: str, **kwargs: Any) -> str:
        return run_command(
            self._executable,
            [*args, "--cwd", str(self._pulumi_dir)],
            env=self._env,
            **kwargs,
        )

    def is_logged_in(self) -> bool:
        try:
            self._run("whoami")
        except CommandError:
            return False
        return True

    def list_stacks(self) -> list[str]:
        stacks = run_json(
            self._executable,
            ["stack", "ls", "--json", "--cwd", str(self._pulumi_dir)],
            env=self._env,
        )
        return [s["name"] for s in stacks if isinstance(s, dict) and "name" in s]

    def stack_exists(self, stack_name: str) -> bool:
        return stack_name in self.list_stacks()

    def select(self, stack_name: str) -> None:
        self._run("stack", "select", stack_name)

    def select_or_init(self, stack_name: str) -> bool:
        """Select *stack_name*, creating it first if needed. Return True if created."""
        exists = self.stack_exists(stack_name)
        logger.info("Stack %s exists: %s", stack_name, exists)
        self._run("stack", "select" if exists else "init", stack_name)
        return not exists

    def show_stacks(self) -> None:
        self._run("stack", "ls", capture=False)

    def config_set(
        self, key: str, value: str, *, secret: bool = False, stack: str | None = None
    ) -> None:
        """Set a stack config value. The value goes through stdin, never argv."""
        args = ["config", "set", key]
        if secret:
            args.append("--secret")
        if stack:
            args.extend(["--stack", stack])
        self._run(*args, input=value)

    def config_get(self, key: str, *, stack: str | None = None) -> str:
        args = ["config", "get", key]
        if stack:
            args.extend(["--stack", stack])
        return self._run(*args)

    def up(self, *, auto: bool = False) -> None:
        args = ["up"]
        if auto:
            args.extend(["--yes", "--skip-preview"])
        self._run(*args, capture=False, timeout=None)

    def destroy(self, stack_name: str, *, remove: bool = True) -> None:
        args = ["destroy", "--stack", stack_name, "--yes", "--skip-preview"]
        if remove:
            args.append("--remove")
        self._run(*args, capture=False, timeout=None)
