"""Engine-facing interfaces to the remote orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cf_provisioner.engine.types import ExistingResource

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cf_provisioner.engine.types import ResourceKind


class ResourceLookup:
    """Finds resources that already exist remotely.

    Subclass and override :meth:`lookup`. "Not found" is a normal result and
    must be reported as ``None``, not raised.
    """

    def lookup(
        self, kind: ResourceKind, name: str, account_id: str
    ) -> ExistingResource | None:
        """Return the existing resource named *name*, or None."""
        raise NotImplementedError


class ResourceProvisioner:
    """Creates resources, or adopts existing ones into the orchestrator's state."""

    def ensure(
        self,
        kind: ResourceKind,
        name: str,
        account_id: str,
        *,
        import_id: str | None = None,
    ) -> Any:
        """Create *name* (or import *import_id* when given). Return its remote id.

        The id may be a deferred orchestrator value rather than a string.
        """
        raise NotImplementedError


class StaticLookup(ResourceLookup):
    """Lookup over a fixed ``name -> id`` mapping, for offline rendering."""

    def __init__(self, known: Mapping[str, str] | None = None) -> None:
        self._known = dict(known or {})

    def lookup(
        self, kind: ResourceKind, name: str, account_id: str
    ) -> ExistingResource | None:
        remote_id = self._known.get(name)
        if remote_id is None:
            return None
        return ExistingResource(id=remote_id, name=name)


class PlaceholderProvisioner(ResourceProvisioner):
    """Records requested resources and hands out placeholder ids."""

    def __init__(self) -> None:
        self.created: list[tuple[ResourceKind, str]] = []
        self.imported: list[tuple[ResourceKind, str, str]] = []

    def ensure(
        self,
        kind: ResourceKind,
        name: str,
        account_id: str,
        *,
        import_id: str | None = None,
    ) -> Any:
        if import_id is not None:
            self.imported.append((kind, name, import_id))
            return import_id
        self.created.append((kind, name))
        return f"<{name}-id>"
