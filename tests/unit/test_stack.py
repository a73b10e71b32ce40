from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cf_provisioner.config.errors import ConfigError
from cf_provisioner.config.stack import (
    extract_stack_name,
    load_stack_config,
    normalize_stack_name,
    stack_file_path,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestStackNames:
    def test_extract_from_base_url(self) -> None:
        assert extract_stack_name("https://api.example.com/v1") == "api-example-com"

    def test_extract_ignores_port(self) -> None:
        assert extract_stack_name("http://localhost:8787") == "localhost"

    @pytest.mark.parametrize("value", ["", "api.example.com", "not a url"])
    def test_extract_invalid(self, value: str) -> None:
        with pytest.raises(ConfigError, match="Invalid BASE_URL"):
            extract_stack_name(value)

    @pytest.mark.parametrize(
        "value",
        ["https://api.example.com/x", "api.example.com/x", "api.example.com", "api-example-com"],
    )
    def test_normalize(self, value: str) -> None:
        assert normalize_stack_name(value) == "api-example-com"

    def test_normalize_empty(self) -> None:
        with pytest.raises(ConfigError):
            normalize_stack_name("  ")


class TestStackConfig:
    def test_path(self, tmp_path: Path) -> None:
        assert stack_file_path(tmp_path, "s") == tmp_path / "Pulumi.s.yaml"

    def test_load_preserves_order(self, tmp_path: Path) -> None:
        path = tmp_path / "Pulumi.s.yaml"
        path.write_text(
            "config:\n"
            "  shop:projectId: shop\n"
            "  shop:maxRetries: 3\n"
            "  shop:cloudflareApiToken:\n"
            "    secure: v1:abc\n"
        )
        config = load_stack_config(path)
        assert list(config) == ["shop:projectId", "shop:maxRetries", "shop:cloudflareApiToken"]
        assert config["shop:maxRetries"] == 3
        assert config["shop:cloudflareApiToken"] == {"secure": "v1:abc"}

    def test_no_config_section(self, tmp_path: Path) -> None:
        path = tmp_path / "Pulumi.s.yaml"
        path.write_text("encryptionsalt: v1:xyz\n")
        assert load_stack_config(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to read"):
            load_stack_config(tmp_path / "Pulumi.none.yaml")
