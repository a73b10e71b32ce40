"""Worker variables: key normalisation, secret filtering and TOML values."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel

from cf_provisioner.config.keys import IGNORE_KEYS, config_key, is_secret

logger = logging.getLogger(__name__)

_BOOL_STRINGS = {"true": True, "false": False}

_TOML_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class ConfigEntry(BaseModel):
    """One configuration value, keyed by its UPPER_SNAKE name."""

    key: str
    value: Any
    is_secret: bool


class WorkerBinding(BaseModel):
    name: str
    type: Literal["plain_text", "secret_text"]
    text: str


def toml_string(value: str) -> str:
    """Quote *value* as a TOML basic string."""
    escaped = "".join(_TOML_ESCAPES.get(ch, ch) for ch in value)
    return f'"{escaped}"'


def format_toml_value(value: Any) -> str | None:
    """Render a scalar as TOML, or None if the type is not supported.

    Strings are quoted, except ``"true"``/``"false"`` which are booleans.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        flag = _BOOL_STRINGS.get(value.strip().lower())
        if flag is not None:
            return "true" if flag else "false"
        return toml_string(value)
    return None


def config_entries(
    config: Mapping[str, Any], *, ignore_keys: Iterable[str] = IGNORE_KEYS
) -> list[ConfigEntry]:
    """Normalise *config* keys and classify secrets, preserving input order.

    Ignore-listed keys are dropped entirely.
    """
    ignore = set(ignore_keys)
    entries: list[ConfigEntry] = []
    for full_key, value in config.items():
        key = config_key(full_key).snake_key
        if key in ignore:
            continue
        entries.append(ConfigEntry(key=key, value=value, is_secret=is_secret(key)))
    return entries


def render_vars(
    config: Mapping[str, Any], *, ignore_keys: Iterable[str] = IGNORE_KEYS
) -> str:
    """Render the ``[vars]`` table. Secret entries are never written."""
    lines = ["[vars]"]
    for entry in config_entries(config, ignore_keys=ignore_keys):
        if entry.is_secret:
            continue
        value = format_toml_value(entry.value)
        if value is None:
            logger.debug(
                "Omitting %s: unsupported value type %s", entry.key, type(entry.value).__name__
            )
            continue
        lines.append(f"{entry.key} = {value}")
    return "\n".join(lines) + "\n"


def split_worker_bindings(
    entries: Iterable[ConfigEntry],
) -> tuple[list[WorkerBinding], list[WorkerBinding]]:
    """Partition entries into plain-text and secret-text bindings.

    Entries whose value is not a scalar are skipped.
    """
    plain: list[WorkerBinding] = []
    secret: list[WorkerBinding] = []
    for entry in entries:
        if entry.value is None or isinstance(entry.value, Mapping | list):
            continue
        text = str(entry.value).lower() if isinstance(entry.value, bool) else str(entry.value)
        if entry.is_secret:
            secret.append(WorkerBinding(name=entry.key, type="secret_text", text=text))
        else:
            plain.append(WorkerBinding(name=entry.key, type="plain_text", text=text))
    return plain, secret
