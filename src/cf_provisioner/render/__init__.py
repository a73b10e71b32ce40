"""Wrangler configuration rendering."""

from cf_provisioner.render.variables import (
    ConfigEntry,
    WorkerBinding,
    config_entries,
    format_toml_value,
    render_vars,
    split_worker_bindings,
)
from cf_provisioner.render.wrangler_toml import (
    RenderOptions,
    render_resource_block,
    render_wrangler_toml,
)
from cf_provisioner.render.writer import write_atomic

__all__ = [
    "ConfigEntry",
    "RenderOptions",
    "WorkerBinding",
    "config_entries",
    "format_toml_value",
    "render_resource_block",
    "render_vars",
    "render_wrangler_toml",
    "split_worker_bindings",
    "write_atomic",
]
