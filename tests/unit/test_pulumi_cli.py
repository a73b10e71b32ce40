from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cf_provisioner.core.process import CommandError
from cf_provisioner.core.pulumi_cli import PulumiCLI

_DIR = Path("/work/infra")
_ENV = {"PULUMI_CONFIG_PASSPHRASE": "pp"}


@pytest.fixture
def mock_run():  # noqa: ANN201
    with patch("cf_provisioner.core.pulumi_cli.run_command", return_value="") as mock:
        yield mock


@pytest.fixture
def cli() -> PulumiCLI:
    return PulumiCLI(_DIR, env=_ENV)


class TestPulumiCLI:
    def test_config_set_secret_uses_stdin(self, cli: PulumiCLI, mock_run: MagicMock) -> None:
        cli.config_set("stripeApiKey", "sk", secret=True, stack="s")
        mock_run.assert_called_once_with(
            "pulumi",
            ["config", "set", "stripeApiKey", "--secret", "--stack", "s", "--cwd", str(_DIR)],
            env=_ENV,
            input="sk",
        )

    def test_config_set_plain(self, cli: PulumiCLI, mock_run: MagicMock) -> None:
        cli.config_set("projectId", "shop")
        assert mock_run.call_args.args[1] == ["config", "set", "projectId", "--cwd", str(_DIR)]

    def test_config_get(self, cli: PulumiCLI, mock_run: MagicMock) -> None:
        mock_run.return_value = "shop"
        assert cli.config_get("projectId", stack="s") == "shop"
        assert mock_run.call_args.args[1] == [
            "config",
            "get",
            "projectId",
            "--stack",
            "s",
            "--cwd",
            str(_DIR),
        ]

    @patch("cf_provisioner.core.pulumi_cli.run_json")
    def test_list_stacks(self, mock_json: MagicMock, cli: PulumiCLI) -> None:
        mock_json.return_value = [{"name": "a", "current": True}, {"name": "b"}, "junk"]
        assert cli.list_stacks() == ["a", "b"]
        mock_json.assert_called_once_with(
            "pulumi", ["stack", "ls", "--json", "--cwd", str(_DIR)], env=_ENV
        )

    @patch("cf_provisioner.core.pulumi_cli.run_json", return_value=[{"name": "other"}])
    def test_select_or_init_creates(
        self, _mock_json: MagicMock, cli: PulumiCLI, mock_run: MagicMock
    ) -> None:
        assert cli.select_or_init("s") is True
        assert mock_run.call_args.args[1] == ["stack", "init", "s", "--cwd", str(_DIR)]

    @patch("cf_provisioner.core.pulumi_cli.run_json", return_value=[{"name": "s"}])
    def test_select_or_init_selects(
        self, _mock_json: MagicMock, cli: PulumiCLI, mock_run: MagicMock
    ) -> None:
        assert cli.select_or_init("s") is False
        assert mock_run.call_args.args[1] == ["stack", "select", "s", "--cwd", str(_DIR)]

    def test_is_logged_in(self, cli: PulumiCLI, mock_run: MagicMock) -> None:
        assert cli.is_logged_in() is True
        mock_run.side_effect = CommandError(["pulumi", "whoami"], "exit code 255")
        assert cli.is_logged_in() is False

    def test_up_auto(self, cli: PulumiCLI, mock_run: MagicMock) -> None:
        cli.up(auto=True)
        mock_run.assert_called_once_with(
            "pulumi",
            ["up", "--yes", "--skip-preview", "--cwd", str(_DIR)],
            env=_ENV,
            capture=False,
            timeout=None,
        )

    def test_destroy_removes_stack(self, cli: PulumiCLI, mock_run: MagicMock) -> None:
        cli.destroy("s")
        assert mock_run.call_args.args[1] == [
            "destroy",
            "--stack",
            "s",
            "--yes",
            "--skip-preview",
            "--remove",
            "--cwd",
            str(_DIR),
        ]
