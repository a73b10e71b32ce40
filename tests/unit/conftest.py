"""Shared fixtures for unit tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

_ENV_PREFIXES = ("CF_", "CLOUDFLARE_", "PULUMI_", "WRANGLER_")

PROPERTIES = """\
# Cloudflare account
CLOUDFLARE_ACCOUNT_ID=acc123
CLOUDFLARE_API_TOKEN=tok
CLOUDFLARE_RESOURCE=kv_sessions, d1_main:mydb
BASE_URL=https://api.example.com
PROJECT_ID=shop
PROJECT_TYPE=worker
ENVIRONMENT=production
MAX_RETRIES=3
DEBUG=true
STRIPE_API_KEY=sk_live
"""


@pytest.fixture(autouse=True)
def _clean_cf_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove Cloudflare/Pulumi env vars so unit tests don't leak host config."""
    for var in list(os.environ):
        if var.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)


@pytest.fixture
def write_properties(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a properties file, return its path."""

    def _write(text: str = PROPERTIES, name: str = "setup.properties") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
