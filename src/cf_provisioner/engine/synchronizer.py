"""Resource synchronizer: reconcile requested specs against remote state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cf_provisioner.engine.errors import DuplicateResourceError, ProvisionError
from cf_provisioner.engine.types import ResolvedResource, ResourceCollection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cf_provisioner.engine.handlers import ResourceLookup, ResourceProvisioner
    from cf_provisioner.engine.types import ExistingResource, ResourceSpec

logger = logging.getLogger(__name__)


def validate_specs(specs: Sequence[ResourceSpec], project_id: str) -> list[str]:
    """Check that no two specs of one kind share a name or a binding."""
    names: dict[tuple[str, str], str] = {}
    bindings: dict[tuple[str, str], str] = {}
    errors: list[str] = []
    for spec in specs:
        name = spec.effective_name(project_id)
        key = (spec.kind.value, name)
        if key in names:
            errors.append(
                f"Duplicate {spec.kind.value} name '{name}': "
                f"found in both '{names[key]}' and '{spec.raw}'"
            )
        else:
            names[key] = spec.raw

        if not spec.binding:
            continue
        key = (spec.kind.value, spec.binding)
        if key in bindings:
            errors.append(
                f"Duplicate {spec.kind.value} binding '{spec.binding}': "
                f"found in both '{bindings[key]}' and '{spec.raw}'"
            )
        else:
            bindings[key] = spec.raw
    return errors


class ResourceSynchronizer:
    """Adopt-or-create reconciliation, one spec at a time in input order."""

    def __init__(self, *, lookup: ResourceLookup, provisioner: ResourceProvisioner) -> None:
        self._lookup = lookup
        self._provisioner = provisioner

    def _find_existing(
        self, spec: ResourceSpec, name: str, account_id: str
    ) -> ExistingResource | None:
        # Fail open: a failed existence check must not halt provisioning.
        try:
            existing = self._lookup.lookup(spec.kind, name, account_id)
        except Exception as exc:
            logger.warning("Error searching for %s, assuming it does not exist: %s", name, exc)
            return None
        if existing is None:
            logger.info("No existing resource %s", name)
        return existing

    def synchronize(
        self, specs: Sequence[ResourceSpec], account_id: str, project_id: str
    ) -> ResourceCollection:
        """Resolve every spec and return the resulting collection.

        Raises:
            DuplicateResourceError: If specs collide within a kind.
            ProvisionError: If creating or adopting a resource fails.
        """
        errors = validate_specs(specs, project_id)
        if errors:
            raise DuplicateResourceError(errors)

        logger.info("Synchronizing %d resources for project %s", len(specs), project_id)
        collection = ResourceCollection()
        resolved: list[ResolvedResource] = []

        for spec in specs:
            name = spec.effective_name(project_id)
            logger.info("Configuring resource %s", name)
            existing = self._find_existing(spec, name, account_id)

            try:
                if existing is not None:
                    logger.debug("Adopting %s (%s)", name, existing.id)
                    self._provisioner.ensure(spec.kind, name, account_id, import_id=existing.id)
                    resource = ResolvedResource(
                        kind=spec.kind,
                        binding=spec.binding,
                        remote_name=existing.name or name,
                        remote_id=existing.id,
                        existing=True,
                    )
                else:
                    logger.debug("Creating %s", name)
                    remote_id = self._provisioner.ensure(spec.kind, name, account_id)
                    resource = ResolvedResource(
                        kind=spec.kind,
                        binding=spec.binding,
                        remote_name=name,
                        remote_id=remote_id,
                        existing=False,
                    )
            except Exception as exc:
                raise ProvisionError(resolved=resolved, spec=spec.raw, message=str(exc)) from exc

            collection.add(resource)
            resolved.append(resource)

        return collection
