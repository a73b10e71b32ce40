"""Configuration key names, casing conversions and secret classification."""

from __future__ import annotations

import re
from enum import StrEnum
from typing import NamedTuple


class Prop(StrEnum):
    """Properties every setup file must define."""

    CLOUDFLARE_ACCOUNT_ID = "CLOUDFLARE_ACCOUNT_ID"
    CLOUDFLARE_API_TOKEN = "CLOUDFLARE_API_TOKEN"
    CLOUDFLARE_RESOURCE = "CLOUDFLARE_RESOURCE"
    BASE_URL = "BASE_URL"
    PROJECT_ID = "PROJECT_ID"
    PROJECT_TYPE = "PROJECT_TYPE"
    ENVIRONMENT = "ENVIRONMENT"


REQUIRED_PROPS: tuple[str, ...] = tuple(p.value for p in Prop)

PASSPHRASE_KEY = "PULUMI_CONFIG_PASSPHRASE"

# Properties that stay on the local machine: never stack config, never vars.
LOCAL_ONLY_KEYS: frozenset[str] = frozenset({PASSPHRASE_KEY})

# Internal keys that never become worker variables.
IGNORE_KEYS: frozenset[str] = (
    frozenset(
        {
            Prop.CLOUDFLARE_ACCOUNT_ID.value,
            Prop.CLOUDFLARE_API_TOKEN.value,
            Prop.CLOUDFLARE_RESOURCE.value,
            Prop.PROJECT_ID.value,
        }
    )
    | LOCAL_ONLY_KEYS
)

SECRET_PATTERNS: tuple[str, ...] = (
    "secret",
    "key",
    "password",
    "token",
    "credential",
    "apikey",
    "api_key",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def is_secret(key: str) -> bool:
    """Case-insensitive substring match against :data:`SECRET_PATTERNS`."""
    lower_key = key.lower()
    return any(pattern in lower_key for pattern in SECRET_PATTERNS)


def snake_to_camel(key: str) -> str:
    """``CLOUDFLARE_API_TOKEN`` → ``cloudflareApiToken``."""
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), key.lower())


def camel_to_snake(key: str) -> str:
    """``cloudflareApiToken`` → ``CLOUDFLARE_API_TOKEN``.

    Keys that are already upper snake case come back unchanged.
    """
    return _CAMEL_BOUNDARY.sub("_", key).upper()


def survives_stack_round_trip(key: str) -> bool:
    """True when *key* comes back from stack config as ``key.upper()``.

    Doubled and leading underscores are lost by the camelCase conversion
    (``MY__VAR`` returns as ``MY_VAR``).
    """
    return camel_to_snake(snake_to_camel(key)) == key.upper()


def strip_namespace(key: str) -> str:
    """Drop a ``project:`` namespace prefix, as Pulumi config keys carry one."""
    _, sep, rest = key.partition(":")
    return rest if sep else key


class ConfigKey(NamedTuple):
    camel_key: str
    snake_key: str


def config_key(full_key: str) -> ConfigKey:
    """Normalise a (possibly namespaced) config key into both casings."""
    key = strip_namespace(full_key)
    snake = camel_to_snake(key)
    return ConfigKey(camel_key=snake_to_camel(snake), snake_key=snake)
