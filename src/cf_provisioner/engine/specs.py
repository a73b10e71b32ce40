"""Resource spec parsing and binding extraction.

A resource spec is ``<prefix>[:<name>]`` where the prefix selects the kind
(``kv_``, ``d1_``, ``r2_``) and the optional name overrides the generated
``{prefix}_{project_id}`` name. Specs arrive as one comma-separated string,
e.g. ``"kv_sessions, d1_main:mydb"``.
"""

from __future__ import annotations

import logging

from cf_provisioner.engine.errors import UnknownResourceKindError
from cf_provisioner.engine.types import ResourceKind, ResourceSpec

logger = logging.getLogger(__name__)


def extract_binding(raw: str) -> str:
    """Derive the binding name from the part of *raw* before the first ``:``.

    Everything after the first ``_`` is uppercased: ``"kv_cache:ns"`` gives
    ``"CACHE"``. Returns ``""`` when there is no ``_`` or it is the last
    character.
    """
    if not raw:
        return ""
    main_part = raw.split(":", 1)[0].strip()
    idx = main_part.find("_")
    if idx == -1 or idx == len(main_part) - 1:
        return ""
    return main_part[idx + 1 :].upper()


def kind_for_prefix(prefix: str) -> ResourceKind | None:
    for kind in ResourceKind:
        if prefix.startswith(kind.prefix):
            return kind
    return None


def parse_resource_spec(raw: str) -> ResourceSpec:
    """Parse a single ``<prefix>[:<name>]`` spec.

    Raises:
        UnknownResourceKindError: If the prefix matches no known kind.
    """
    prefix, _, name = (raw or "").partition(":")
    prefix = prefix.strip()
    name = name.strip()

    kind = kind_for_prefix(prefix)
    if kind is None:
        raise UnknownResourceKindError(raw)

    return ResourceSpec(
        raw=raw.strip(),
        prefix=prefix,
        kind=kind,
        explicit_name=name or None,
        binding=extract_binding(raw),
    )


def parse_resource_list(value: str) -> list[ResourceSpec]:
    """Parse a comma-separated spec list, preserving order.

    Empty items (``"kv_a,,d1_b"`` or a trailing comma) are skipped.
    """
    specs: list[ResourceSpec] = []
    for item in (value or "").split(","):
        item = item.strip()
        if not item:
            logger.debug("Skipping empty resource spec in %r", value)
            continue
        specs.append(parse_resource_spec(item))
    return specs


def primary_database_name(specs: list[ResourceSpec], project_id: str) -> str | None:
    """Effective name of the first D1 spec, used for schema migrations."""
    for spec in specs:
        if spec.kind is ResourceKind.D1:
            return spec.effective_name(project_id)
    return None
