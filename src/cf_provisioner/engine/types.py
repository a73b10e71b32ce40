"""Engine types (resource kinds, specs, resolved resources)."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ResourceKind(str, Enum):
    KV = "kv"
    D1 = "d1"
    R2 = "r2"

    @property
    def prefix(self) -> str:
        """Spec prefix selecting this kind (e.g. ``kv_``)."""
        return f"{self.value}_"

    @property
    def toml_array(self) -> str:
        return _TOML_ARRAYS[self]

    @property
    def placeholder(self) -> str:
        """Comment rendered in place of an empty array of tables."""
        return _PLACEHOLDERS[self]


_TOML_ARRAYS: dict[ResourceKind, str] = {
    ResourceKind.KV: "kv_namespaces",
    ResourceKind.D1: "d1_databases",
    ResourceKind.R2: "r2_buckets",
}

_PLACEHOLDERS: dict[ResourceKind, str] = {
    ResourceKind.KV: "# No KV namespaces configured",
    ResourceKind.D1: "# No databases configured",
    ResourceKind.R2: "# No R2 buckets configured",
}


class ResourceSpec(BaseModel):
    """A requested resource, parsed from ``<prefix>[:<name>]``."""

    model_config = ConfigDict(frozen=True)

    raw: str
    prefix: str
    kind: ResourceKind
    explicit_name: str | None = None
    binding: str = ""

    def effective_name(self, project_id: str) -> str:
        """Explicit name if given, else ``{prefix}_{project_id}``."""
        if self.explicit_name:
            return self.explicit_name
        return f"{self.prefix}_{project_id}"


class ExistingResource(BaseModel):
    """A resource found remotely by a lookup."""

    id: str
    name: str | None = None


class ResolvedResource(BaseModel):
    """Outcome of reconciling one spec against remote state.

    ``remote_id`` is a plain string once known. While the orchestrator has not
    materialised a newly created resource it holds the orchestrator's deferred
    value (a Pulumi ``Output``).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ResourceKind
    binding: str
    remote_name: str
    remote_id: Any = None
    existing: bool = False


def _empty_buckets() -> dict[ResourceKind, list[ResolvedResource]]:
    return {kind: [] for kind in ResourceKind}


@dataclass
class ResourceCollection:
    """Resolved resources grouped by kind, each bucket in input order."""

    buckets: dict[ResourceKind, list[ResolvedResource]] = field(default_factory=_empty_buckets)

    def add(self, resource: ResolvedResource) -> None:
        self.buckets.setdefault(resource.kind, []).append(resource)

    def __getitem__(self, kind: ResourceKind) -> list[ResolvedResource]:
        return self.buckets.get(kind, [])

    def __iter__(self) -> Iterator[ResolvedResource]:
        for kind in ResourceKind:
            yield from self[kind]

    def __len__(self) -> int:
        return sum(len(v) for v in self.buckets.values())

    @property
    def kv(self) -> list[ResolvedResource]:
        return self[ResourceKind.KV]

    @property
    def d1(self) -> list[ResolvedResource]:
        return self[ResourceKind.D1]

    @property
    def r2(self) -> list[ResolvedResource]:
        return self[ResourceKind.R2]

    def with_remote_ids(self, remote_ids: Sequence[str]) -> ResourceCollection:
        """Return a copy with ids replaced, in iteration order.

        Used once the orchestrator has resolved deferred ids.
        """
        resources = list(self)
        if len(remote_ids) != len(resources):
            raise ValueError(
                f"Expected {len(resources)} remote ids, got {len(remote_ids)}"
            )
        resolved = ResourceCollection()
        for resource, remote_id in zip(resources, remote_ids, strict=True):
            resolved.add(resource.model_copy(update={"remote_id": remote_id}))
        return resolved
