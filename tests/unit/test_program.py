from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pulumi
import pytest

from cf_provisioner.config.schema import ProvisionerSettings
from cf_provisioner.core.wrangler_cli import command_line, migrations_args
from cf_provisioner.engine.handlers import StaticLookup
from cf_provisioner.program import (
    PulumiLogHandler,
    _secret_values,
    configure_logging,
    run,
)

_COMMAND_TYPE = "command:local:Command"

_STACK_FILE = """\
config:
  shop:projectId: shop
  shop:cloudflareApiToken:
    secure: v1:abc
  shop:cloudflareResource: kv_sessions, d1_main:mydb
  shop:maxRetries: "3"
  shop:webhookSecret: whsec-plain
"""


class _Mocks(pulumi.runtime.Mocks):
    def __init__(self) -> None:
        self.resources: dict[str, pulumi.runtime.MockResourceArgs] = {}

    def new_resource(self, args: pulumi.runtime.MockResourceArgs) -> tuple[str, dict[str, Any]]:
        self.resources[args.name] = args
        return f"{args.name}-id", args.inputs

    def call(self, args: pulumi.runtime.MockCallArgs) -> dict[str, Any]:
        return {}

    def commands(self) -> dict[str, dict[str, Any]]:
        return {
            name: args.inputs for name, args in self.resources.items() if args.typ == _COMMAND_TYPE
        }


@pytest.fixture(autouse=True)
def _restore_package_logger():  # noqa: ANN202
    package_logger = logging.getLogger("cf_provisioner")
    handlers = package_logger.handlers[:]
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def settings(tmp_path: Path) -> ProvisionerSettings:
    infra = tmp_path / "infra"
    infra.mkdir()
    (infra / "Pulumi.dev.yaml").write_text(_STACK_FILE)
    return ProvisionerSettings(project_dir=tmp_path)


def _run_program(settings: ProvisionerSettings, **config: str) -> _Mocks:
    mocks = _Mocks()
    pulumi.runtime.set_mocks(mocks, project="shop", stack="dev", preview=False)
    pulumi.runtime.set_all_config(
        {
            "shop:projectId": "shop",
            "shop:cloudflareAccountId": "acc123",
            "shop:cloudflareApiToken": "tok",
            **{f"shop:{key}": value for key, value in config.items()},
        }
    )

    @pulumi.runtime.test
    def program() -> None:
        run(settings)

    with (
        patch("cf_provisioner.program.CloudflareLookup", return_value=StaticLookup()),
        patch("cf_provisioner.program._run_stamp", return_value="stamp-1"),
    ):
        program()
    return mocks


class TestRun:
    def test_worker_declares_all_commands(self, settings: ProvisionerSettings) -> None:
        mocks = _run_program(
            settings, projectType="worker", cloudflareResource="kv_sessions, d1_main:mydb"
        )

        assert set(mocks.commands()) == {
            "write-wrangler-config",
            "d1-migrations",
            "worker-deploy",
            "worker-secrets",
        }

    def test_rendered_config_uses_resolved_ids(self, settings: ProvisionerSettings) -> None:
        mocks = _run_program(
            settings, projectType="worker", cloudflareResource="kv_sessions, d1_main:mydb"
        )

        data = tomllib.loads(mocks.commands()["write-wrangler-config"]["stdin"])
        assert data["d1_databases"][0]["database_id"] == "mydb-id"
        assert data["kv_namespaces"] == [{"binding": "SESSIONS", "id": "kv_sessions_shop-id"}]
        assert data["vars"] == {"MAX_RETRIES": "3"}

    def test_deploy_and_migrations_rerun_every_time(
        self, settings: ProvisionerSettings
    ) -> None:
        mocks = _run_program(
            settings, projectType="worker", cloudflareResource="kv_sessions, d1_main:mydb"
        )
        commands = mocks.commands()
        config_path = settings.wrangler_config_path("dev").resolve()

        assert commands["d1-migrations"]["triggers"][-1] == "stamp-1"
        assert commands["worker-deploy"]["triggers"][-1] == "stamp-1"
        assert commands["d1-migrations"]["create"] == command_line(
            migrations_args("mydb", config_path)
        )
        assert commands["worker-deploy"]["delete"].startswith("echo Y | wrangler delete shop")

    def test_site_without_database(self, settings: ProvisionerSettings) -> None:
        mocks = _run_program(settings, projectType="site", cloudflareResource="kv_sessions")

        assert set(mocks.commands()) == {"write-wrangler-config"}


def test_secret_values() -> None:
    config = MagicMock()
    config.require_secret.side_effect = lambda key: f"secret:{key}"
    stack_config = {
        "shop:projectId": "shop",
        "shop:cloudflareApiToken": {"secure": "v1:token"},
        "shop:stripeApiKey": {"secure": "v1:stripe"},
        "shop:webhookSecret": "plain-secret",
        "shop:maxRetries": "3",
    }

    assert _secret_values(config, stack_config) == {
        "STRIPE_API_KEY": "secret:stripeApiKey",
        "WEBHOOK_SECRET": "plain-secret",
    }
    config.require_secret.assert_called_once_with("stripeApiKey")


class TestLogging:
    @pytest.mark.parametrize(
        ("level", "method"),
        [
            (logging.ERROR, "error"),
            (logging.WARNING, "warn"),
            (logging.INFO, "info"),
            (logging.DEBUG, "debug"),
        ],
    )
    def test_handler_forwards_by_level(self, level: int, method: str) -> None:
        record = logging.LogRecord("cf_provisioner.x", level, __file__, 1, "hello %s", ("kv",), None)
        with patch("cf_provisioner.program.pulumi.log") as mock_log:
            PulumiLogHandler().emit(record)

        getattr(mock_log, method).assert_called_once_with("hello kv")

    def test_configure_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CF_LOG", "debug")
        configure_logging()
        configure_logging()

        package_logger = logging.getLogger("cf_provisioner")
        assert sum(isinstance(h, PulumiLogHandler) for h in package_logger.handlers) == 1
        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False

    def test_configure_logging_default_info(self) -> None:
        configure_logging()
        assert logging.getLogger("cf_provisioner").level == logging.INFO
