"""Terminal output for planned and resolved resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from cf_provisioner.engine.types import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from cf_provisioner.engine.types import ResourceCollection, ResourceSpec

_KIND_LABELS: dict[ResourceKind, str] = {
    ResourceKind.D1: "D1 databases",
    ResourceKind.KV: "KV namespaces",
    ResourceKind.R2: "R2 buckets",
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


def format_planned(
    specs: Sequence[ResourceSpec], project_id: str, *, color: bool = True
) -> str:
    """List requested resources by kind with their names and bindings."""
    style = styler(color)
    if not specs:
        return "No resources requested."

    lines: list[str] = []
    for kind in (ResourceKind.D1, ResourceKind.KV, ResourceKind.R2):
        selected = [s for s in specs if s.kind is kind]
        if not selected:
            continue
        lines.append(style(f"{_KIND_LABELS[kind]}:", bold=True))
        for spec in selected:
            binding = spec.binding or "-"
            lines.append(
                f"  {style('+', fg='green')} {spec.effective_name(project_id)} (binding {binding})"
            )
    return "\n".join(lines)


def format_resolved(collection: ResourceCollection, *, color: bool = True) -> str:
    """One line per resource: adopted (``=``) or created (``+``)."""
    style = styler(color)
    lines = []
    for resource in collection:
        symbol = style("=", fg="cyan") if resource.existing else style("+", fg="green")
        verb = "adopted" if resource.existing else "created"
        lines.append(
            f"  {symbol} {resource.kind.value} {resource.remote_name} ({verb}, id {resource.remote_id})"
        )
    return "\n".join(lines)
