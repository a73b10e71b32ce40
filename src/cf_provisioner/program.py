"""Pulumi program: provision Cloudflare resources and wire up the worker.

Runs inside ``pulumi up``. Reads the stack config written by
``cf-provisioner setup``, adopts or creates every requested resource,
renders ``wrangler.toml`` once all ids are known, and (for workers) deploys
and uploads secrets.
"""

from __future__ import annotations

import json
import logging
import shlex
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pulumi
from pulumi_command import local

from cf_provisioner.config.errors import ConfigError
from cf_provisioner.config.keys import snake_to_camel
from cf_provisioner.config.schema import ProvisionerSettings
from cf_provisioner.config.stack import load_stack_config, stack_file_path
from cf_provisioner.core.wrangler_cli import (
    command_line,
    delete_args,
    deploy_args,
    migrations_args,
    secret_bulk_args,
)
from cf_provisioner.engine.cloudflare_handler import CloudflareLookup, CloudflareProvisioner
from cf_provisioner.engine.specs import parse_resource_list, primary_database_name
from cf_provisioner.engine.synchronizer import ResourceSynchronizer
from cf_provisioner.logs import PACKAGE_LOGGER, env_level
from cf_provisioner.render.variables import config_entries, split_worker_bindings
from cf_provisioner.render.wrangler_toml import RenderOptions, render_wrangler_toml

if TYPE_CHECKING:
    from pathlib import Path

    from cf_provisioner.engine.types import ResourceCollection

logger = logging.getLogger(__name__)

WORKER_PROJECT_TYPE = "worker"


def _require(config: pulumi.Config, key: str) -> str:
    value = config.get(key)
    if not value:
        raise ConfigError(f"Missing stack config value: {key}")
    return value


def _secret_values(config: pulumi.Config, stack_config: dict[str, Any]) -> dict[str, Any]:
    """Secret worker values keyed by UPPER_SNAKE name.

    Encrypted stack values resolve through Pulumi and stay secret outputs.
    """
    entries = config_entries(stack_config)
    secrets: dict[str, Any] = {}
    for entry in entries:
        if entry.is_secret and isinstance(entry.value, dict) and "secure" in entry.value:
            secrets[entry.key] = config.require_secret(snake_to_camel(entry.key))
    _, plain_secrets = split_worker_bindings(entries)
    secrets.update({binding.name: binding.text for binding in plain_secrets})
    return secrets


def _render(
    collection: ResourceCollection,
    *,
    project_id: str,
    account_id: str,
    stack_config: dict[str, Any],
    options: RenderOptions,
) -> pulumi.Output[str]:
    remote_ids = [resource.remote_id for resource in collection]
    return pulumi.Output.all(*remote_ids).apply(
        lambda ids: render_wrangler_toml(
            collection.with_remote_ids(ids),
            project_id=project_id,
            account_id=account_id,
            config=stack_config,
            options=options,
        )
    )


class PulumiLogHandler(logging.Handler):
    """Forwards log records to the Pulumi engine so they show in ``pulumi up``."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                pulumi.log.error(message)
            elif record.levelno >= logging.WARNING:
                pulumi.log.warn(message)
            elif record.levelno >= logging.INFO:
                pulumi.log.info(message)
            else:
                pulumi.log.debug(message)
        except Exception:
            self.handleError(record)


def configure_logging() -> None:
    """Route ``cf_provisioner`` logs to Pulumi at the ``CF_LOG`` level (INFO)."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, PulumiLogHandler) for h in package_logger.handlers):
        package_logger.addHandler(PulumiLogHandler())
    package_logger.setLevel(env_level() or logging.INFO)
    package_logger.propagate = False


def _run_stamp() -> str:
    """Changes on every run, so deploy and migrations are always re-applied."""
    return datetime.now(UTC).isoformat()


def run(settings: ProvisionerSettings | None = None) -> None:
    """Entry point called from the Pulumi project's ``__main__.py``."""
    configure_logging()
    settings = settings or ProvisionerSettings()
    config = pulumi.Config()
    stack = pulumi.get_stack()

    project_id = _require(config, "projectId")
    project_type = config.get("projectType") or ""
    account_id = _require(config, "cloudflareAccountId")
    api_token = config.require_secret("cloudflareApiToken")
    specs = parse_resource_list(config.get("cloudflareResource") or "")

    stack_config = load_stack_config(stack_file_path(settings.resolved_pulumi_dir, stack))

    provisioner = CloudflareProvisioner()
    synchronizer = ResourceSynchronizer(lookup=CloudflareLookup(), provisioner=provisioner)
    collection = synchronizer.synchronize(specs, account_id, project_id)

    config_path: Path = settings.wrangler_config_path(stack).resolve()
    toml = _render(
        collection,
        project_id=project_id,
        account_id=account_id,
        stack_config=stack_config,
        options=RenderOptions.from_settings(settings),
    )

    write_config = local.Command(
        "write-wrangler-config",
        create=shlex.join(
            [sys.executable, "-m", "cf_provisioner", "write-config", str(config_path)]
        ),
        stdin=toml,
        triggers=[toml],
        opts=pulumi.ResourceOptions(depends_on=provisioner.resources),
    )

    environment = {
        "CLOUDFLARE_API_TOKEN": api_token,
        "CLOUDFLARE_ACCOUNT_ID": account_id,
        "WRANGLER_SEND_METRICS": "false",
    }
    project_dir = str(settings.project_dir.resolve())
    stamp = _run_stamp()
    depends_on: list[pulumi.Resource] = [write_config]

    database = primary_database_name(specs, project_id)
    if database:
        migrations = local.Command(
            "d1-migrations",
            create=command_line(migrations_args(database, config_path)),
            dir=project_dir,
            environment=environment,
            triggers=[toml, stamp],
            opts=pulumi.ResourceOptions(depends_on=depends_on),
        )
        depends_on = [migrations]

    if project_type == WORKER_PROJECT_TYPE:
        delete = command_line(delete_args(project_id, config_path))
        deploy = local.Command(
            "worker-deploy",
            create=command_line(deploy_args(config_path)),
            delete=f"echo Y | {delete} || true",
            dir=project_dir,
            environment=environment,
            triggers=[toml, stamp],
            opts=pulumi.ResourceOptions(depends_on=depends_on),
        )

        secrets = _secret_values(config, stack_config)
        if secrets:
            payload = pulumi.Output.secret(
                pulumi.Output.all(**secrets).apply(lambda values: json.dumps(values))
            )
            local.Command(
                "worker-secrets",
                create=command_line(secret_bulk_args(config_path)),
                stdin=payload,
                dir=project_dir,
                environment=environment,
                triggers=[payload],
                opts=pulumi.ResourceOptions(depends_on=[deploy]),
            )
        logger.info("Worker %s will be deployed with %d secrets", project_id, len(secrets))

    pulumi.export("wranglerConfig", str(config_path))
    pulumi.export("resources", {r.remote_name: r.remote_id for r in collection})
