"""Properties file loader."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from dotenv import dotenv_values
from pydantic import ValidationError

from cf_provisioner.config.errors import ConfigError
from cf_provisioner.config.keys import PASSPHRASE_KEY, REQUIRED_PROPS
from cf_provisioner.config.schema import SetupProperties

logger = logging.getLogger(__name__)

__all__ = ["ConfigError", "load_properties", "missing_keys", "read_properties"]

PASSPHRASE_ENV = PASSPHRASE_KEY


def read_properties(path: Path | str) -> dict[str, str]:
    """Read ``KEY=VALUE`` lines, preserving file order.

    Keys declared without a value map to ``""``.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Properties file not found: {path}")
    values = dotenv_values(path, encoding="utf-8-sig")
    return {k: (v or "").strip() for k, v in values.items()}


def missing_keys(properties: Mapping[str, str], required: Iterable[str]) -> list[str]:
    return [key for key in required if not properties.get(key)]


def load_properties(path: Path | str) -> SetupProperties:
    """Load and validate a setup properties file.

    Raises:
        ConfigError: If the file is missing, a required key is absent, or a
            value is invalid.
    """
    raw = read_properties(path)

    missing = missing_keys(raw, REQUIRED_PROPS)
    if missing:
        raise ConfigError(f"Missing key(s) in {path}: {', '.join(missing)}")

    try:
        props = SetupProperties.model_validate(
            {**{k.lower(): v for k, v in raw.items()}, "raw": raw}
        )
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info("Loaded properties from %s (%d keys)", path, len(raw))
    return props


def resolve_passphrase(
    props: SetupProperties, env: Mapping[str, str] | None = None
) -> str | None:
    """Passphrase from the environment, else from the properties file."""
    env = os.environ if env is None else env
    if env.get(PASSPHRASE_ENV):
        return env[PASSPHRASE_ENV]
    if props.pulumi_config_passphrase is not None:
        return props.pulumi_config_passphrase.get_secret_value()
    return None
