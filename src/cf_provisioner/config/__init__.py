"""Setup properties, settings and key conventions."""

from __future__ import annotations

from cf_provisioner.config.errors import ConfigError
from cf_provisioner.config.keys import (
    IGNORE_KEYS,
    LOCAL_ONLY_KEYS,
    REQUIRED_PROPS,
    Prop,
    camel_to_snake,
    config_key,
    is_secret,
    snake_to_camel,
    survives_stack_round_trip,
)
from cf_provisioner.config.loader import load_properties, read_properties, resolve_passphrase
from cf_provisioner.config.schema import (
    CloudflareCredentials,
    ProvisionerSettings,
    SetupProperties,
)
from cf_provisioner.config.stack import (
    extract_stack_name,
    load_stack_config,
    normalize_stack_name,
    stack_file_path,
)

__all__ = [
    "IGNORE_KEYS",
    "LOCAL_ONLY_KEYS",
    "REQUIRED_PROPS",
    "CloudflareCredentials",
    "ConfigError",
    "Prop",
    "ProvisionerSettings",
    "SetupProperties",
    "camel_to_snake",
    "config_key",
    "extract_stack_name",
    "is_secret",
    "load_properties",
    "load_stack_config",
    "normalize_stack_name",
    "read_properties",
    "resolve_passphrase",
    "snake_to_camel",
    "stack_file_path",
    "survives_stack_round_trip",
]
