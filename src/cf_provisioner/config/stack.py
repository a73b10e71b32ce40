"""Stack naming and Pulumi stack file access."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from ruamel.yaml import YAML

from cf_provisioner.config.errors import ConfigError

logger = logging.getLogger(__name__)


def extract_stack_name(base_url: str) -> str:
    """``https://api.example.com/x`` → ``api-example-com``."""
    parsed = urlparse((base_url or "").strip())
    if not parsed.scheme or not parsed.hostname:
        raise ConfigError(f"Invalid BASE_URL format: {base_url}")
    return parsed.hostname.replace(".", "-")


def normalize_stack_name(value: str) -> str:
    """Accept a URL, a host (optionally with a path) or a stack name."""
    value = value.strip()
    if "://" in value:
        value = urlparse(value).hostname or ""
    value = value.split("/", 1)[0]
    if not value:
        raise ConfigError("Stack name is empty")
    return value.replace(".", "-")


def stack_file_path(pulumi_dir: Path, stack_name: str) -> Path:
    return pulumi_dir / f"Pulumi.{stack_name}.yaml"


def load_stack_config(path: Path | str) -> dict[str, Any]:
    """Read the ``config:`` mapping of a Pulumi stack file, in file order.

    Encrypted values come back as ``{"secure": ...}`` mappings.
    """
    path = Path(path)
    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    config = (raw or {}).get("config") or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Invalid config section in {path}")
    logger.debug("Loaded %d stack config values from %s", len(config), path)
    return dict(config)
