"""Atomic file writes for generated configuration."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_atomic(path: Path | str, content: str) -> Path:
    """Write *content* to *path* via a temp file in the same directory.

    Readers never observe a partially written file. Parent directories are
    created as needed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    tmp_file = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        tmp_file.replace(path)
    finally:
        with contextlib.suppress(FileNotFoundError):
            tmp_file.unlink()
    logger.debug("Wrote %d bytes to %s", len(content), path)
    return path
