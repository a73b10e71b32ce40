from __future__ import annotations

import pytest

from cf_provisioner.config.keys import (
    IGNORE_KEYS,
    LOCAL_ONLY_KEYS,
    REQUIRED_PROPS,
    camel_to_snake,
    config_key,
    is_secret,
    snake_to_camel,
    strip_namespace,
    survives_stack_round_trip,
)


@pytest.mark.parametrize(
    ("snake", "camel"),
    [
        ("CLOUDFLARE_API_TOKEN", "cloudflareApiToken"),
        ("PROJECT_ID", "projectId"),
        ("R2_BUCKET", "r2Bucket"),
        ("ENVIRONMENT", "environment"),
    ],
)
def test_casing_round_trip(snake: str, camel: str) -> None:
    assert snake_to_camel(snake) == camel
    assert camel_to_snake(camel) == snake


def test_upper_snake_is_unchanged() -> None:
    assert camel_to_snake("MAX_RETRIES") == "MAX_RETRIES"


def test_strip_namespace() -> None:
    assert strip_namespace("shop:maxRetries") == "maxRetries"
    assert strip_namespace("maxRetries") == "maxRetries"


def test_config_key() -> None:
    key = config_key("shop:cloudflareAccountId")
    assert key.camel_key == "cloudflareAccountId"
    assert key.snake_key == "CLOUDFLARE_ACCOUNT_ID"


@pytest.mark.parametrize(
    ("key", "secret"),
    [
        ("CLOUDFLARE_API_TOKEN", True),
        ("stripeApiKey", True),
        ("DB_PASSWORD", True),
        ("JWT_SECRET", True),
        ("BASE_URL", False),
        ("MAX_RETRIES", False),
    ],
)
def test_is_secret(key: str, secret: bool) -> None:
    assert is_secret(key) is secret


def test_ignore_keys() -> None:
    assert IGNORE_KEYS <= set(REQUIRED_PROPS) | LOCAL_ONLY_KEYS
    assert "PULUMI_CONFIG_PASSPHRASE" in IGNORE_KEYS
    assert "BASE_URL" not in IGNORE_KEYS


@pytest.mark.parametrize(
    ("key", "kept"),
    [
        ("MAX_RETRIES", True),
        ("R2_BUCKET", True),
        ("max_retries", True),
        ("MY__VAR", False),
        ("_HIDDEN", False),
    ],
)
def test_survives_stack_round_trip(key: str, kept: bool) -> None:
    assert survives_stack_round_trip(key) is kept
