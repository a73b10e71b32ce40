"""Cloudflare lookup and provisioner backed by the Pulumi Cloudflare provider.

Only usable inside a running Pulumi program: data-source invokes and
resource declarations go through the Pulumi engine.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pulumi
import pulumi_cloudflare as cloudflare

from cf_provisioner.engine.handlers import ResourceLookup, ResourceProvisioner
from cf_provisioner.engine.types import ExistingResource, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class CloudflareLookup(ResourceLookup):
    """Existence checks through Cloudflare data sources."""

    def lookup(self, kind: ResourceKind, name: str, account_id: str) -> ExistingResource | None:
        finders: dict[ResourceKind, Callable[[str, str], ExistingResource | None]] = {
            ResourceKind.KV: self._find_kv,
            ResourceKind.D1: self._find_d1,
            ResourceKind.R2: self._find_r2,
        }
        return finders[kind](name, account_id)

    def _find_kv(self, name: str, account_id: str) -> ExistingResource | None:
        namespaces = cloudflare.get_workers_kv_namespaces(account_id=account_id)
        for ns in namespaces.results or []:
            if ns.title == name:
                return ExistingResource(id=ns.id, name=ns.title)
        return None

    def _find_d1(self, name: str, account_id: str) -> ExistingResource | None:
        databases = cloudflare.get_d1_databases(account_id=account_id, name=name)
        for db in databases.results or []:
            if db.name == name:
                return ExistingResource(id=db.uuid, name=db.name)
        return None

    def _find_r2(self, name: str, account_id: str) -> ExistingResource | None:
        bucket = cloudflare.get_r2_bucket(account_id=account_id, bucket_name=name)
        if not bucket or not bucket.id:
            return None
        return ExistingResource(id=bucket.id, name=name)


class CloudflareProvisioner(ResourceProvisioner):
    """Declares Cloudflare resources; adoption maps to a Pulumi import."""

    def __init__(self) -> None:
        self.resources: list[pulumi.CustomResource] = []

    def ensure(
        self,
        kind: ResourceKind,
        name: str,
        account_id: str,
        *,
        import_id: str | None = None,
    ) -> Any:
        opts = pulumi.ResourceOptions(import_=f"{account_id}/{import_id}") if import_id else None
        resource: pulumi.CustomResource
        match kind:
            case ResourceKind.KV:
                resource = cloudflare.WorkersKvNamespace(
                    name, account_id=account_id, title=name, opts=opts
                )
            case ResourceKind.D1:
                resource = cloudflare.D1Database(
                    name,
                    account_id=account_id,
                    name=name,
                    read_replication={"mode": "disabled"},
                    opts=opts,
                )
            case ResourceKind.R2:
                resource = cloudflare.R2Bucket(name, account_id=account_id, name=name, opts=opts)
            case _:
                raise ValueError(f"Unknown resource kind: {kind}")

        logger.debug("Declared %s %s (import=%s)", kind.value, name, import_id)
        self.resources.append(resource)
        return resource.id
