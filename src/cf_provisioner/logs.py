"""Log level selection shared by the CLI and the Pulumi program."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_ENV = "CF_LOG"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
PACKAGE_LOGGER = "cf_provisioner"

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def env_level(env: Mapping[str, str] | None = None) -> int | None:
    """Level named by ``CF_LOG``, or None when unset.

    Unknown names print a warning to stderr and fall back to INFO.
    """
    env = os.environ if env is None else env
    name = env.get(LOG_ENV, "").upper()
    if not name:
        return None
    if name not in _VALID_LEVELS:
        print(
            f"WARNING: invalid {LOG_ENV} level '{name}', "
            f"expected one of {', '.join(sorted(_VALID_LEVELS))}; defaulting to INFO",
            file=sys.stderr,
        )
        return logging.INFO
    return getattr(logging, name)
