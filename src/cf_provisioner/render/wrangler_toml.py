"""Rendering of ``wrangler.toml`` from resolved resources and configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jinja2 import DictLoader, Environment, StrictUndefined

from cf_provisioner.config.keys import IGNORE_KEYS
from cf_provisioner.engine.types import ResourceKind
from cf_provisioner.render.variables import render_vars, toml_string

if TYPE_CHECKING:
    from cf_provisioner.config.schema import ProvisionerSettings
    from cf_provisioner.engine.types import ResolvedResource, ResourceCollection

logger = logging.getLogger(__name__)

_DOCUMENT = """\
name = {{ project_id | toml }}
main = {{ options.worker_main | toml }}
compatibility_date = {{ options.compatibility_date | toml }}
compatibility_flags = [{{ options.compatibility_flags | map("toml") | join(", ") }}]
account_id = {{ account_id | toml }}

[observability]
enabled = true
head_sampling_rate = 1
{% for block in blocks %}

{{ block }}
{% endfor %}
"""

_TABLES = {
    ResourceKind.D1: """\
[[d1_databases]]
binding = {{ resource.binding | toml }}
database_name = {{ resource.remote_name | toml }}
database_id = {{ remote_id | toml }}
migrations_dir = {{ options.migrations_dir | toml }}
""",
    ResourceKind.KV: """\
[[kv_namespaces]]
binding = {{ resource.binding | toml }}
id = {{ remote_id | toml }}
""",
    ResourceKind.R2: """\
[[r2_buckets]]
binding = {{ resource.binding | toml }}
bucket_name = {{ resource.remote_name | toml }}
""",
}

# Databases, namespaces, buckets; downstream tooling relies on this order.
BLOCK_ORDER: tuple[ResourceKind, ...] = (ResourceKind.D1, ResourceKind.KV, ResourceKind.R2)


@dataclass(frozen=True)
class RenderOptions:
    worker_main: str = "../../src/index.ts"
    compatibility_date: str = "2024-01-01"
    compatibility_flags: tuple[str, ...] = ("nodejs_compat",)
    migrations_dir: str = "../../migrations"

    @classmethod
    def from_settings(cls, settings: ProvisionerSettings) -> RenderOptions:
        return cls(
            worker_main=settings.worker_main,
            compatibility_date=settings.compatibility_date,
            migrations_dir=settings.migrations_dir,
        )


def _environment() -> Environment:
    templates = {"document": _DOCUMENT}
    templates.update({f"table_{kind.value}": src for kind, src in _TABLES.items()})
    env = Environment(
        loader=DictLoader(templates),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["toml"] = lambda v: toml_string(str(v))
    return env


_ENV = _environment()


def render_resource_block(
    kind: ResourceKind,
    resources: Iterable[ResolvedResource],
    options: RenderOptions | None = None,
) -> str:
    """Render one array-of-tables entry per resource, or the placeholder comment.

    Raises:
        ValueError: If a resource id has not been resolved to a string yet.
    """
    options = options or RenderOptions()
    template = _ENV.get_template(f"table_{kind.value}")
    tables: list[str] = []
    for resource in resources:
        if not isinstance(resource.remote_id, str):
            raise ValueError(
                f"Remote id of {kind.value} '{resource.remote_name}' is not resolved"
            )
        tables.append(
            template.render(resource=resource, remote_id=resource.remote_id, options=options)
            .rstrip("\n")
        )
    if not tables:
        return kind.placeholder
    return "\n\n".join(tables)


def render_wrangler_toml(
    collection: ResourceCollection,
    *,
    project_id: str,
    account_id: str,
    config: Mapping[str, Any] | None = None,
    ignore_keys: Iterable[str] = IGNORE_KEYS,
    options: RenderOptions | None = None,
) -> str:
    """Render the complete configuration file.

    *config* is the merged key/value configuration; its iteration order is
    the order of the ``[vars]`` lines.
    """
    options = options or RenderOptions()
    blocks = [render_resource_block(kind, collection[kind], options) for kind in BLOCK_ORDER]
    blocks.append(render_vars(config or {}, ignore_keys=ignore_keys).rstrip("\n"))

    text = _ENV.get_template("document").render(
        project_id=project_id,
        account_id=account_id,
        options=options,
        blocks=blocks,
    )
    logger.debug(
        "Rendered wrangler config: %d databases, %d namespaces, %d buckets",
        len(collection.d1),
        len(collection.kv),
        len(collection.r2),
    )
    return text
