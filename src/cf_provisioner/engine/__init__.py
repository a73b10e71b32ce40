"""Resource reconciliation engine for Cloudflare resources."""

from cf_provisioner.engine.errors import (
    DuplicateResourceError,
    EngineError,
    ProvisionError,
    UnknownResourceKindError,
)
from cf_provisioner.engine.handlers import (
    PlaceholderProvisioner,
    ResourceLookup,
    ResourceProvisioner,
    StaticLookup,
)
from cf_provisioner.engine.specs import (
    extract_binding,
    parse_resource_list,
    parse_resource_spec,
    primary_database_name,
)
from cf_provisioner.engine.synchronizer import ResourceSynchronizer, validate_specs
from cf_provisioner.engine.types import (
    ExistingResource,
    ResolvedResource,
    ResourceCollection,
    ResourceKind,
    ResourceSpec,
)

__all__ = [
    "DuplicateResourceError",
    "EngineError",
    "ExistingResource",
    "PlaceholderProvisioner",
    "ProvisionError",
    "ResolvedResource",
    "ResourceCollection",
    "ResourceKind",
    "ResourceLookup",
    "ResourceProvisioner",
    "ResourceSpec",
    "ResourceSynchronizer",
    "StaticLookup",
    "UnknownResourceKindError",
    "extract_binding",
    "parse_resource_list",
    "parse_resource_spec",
    "primary_database_name",
    "validate_specs",
]
