"""Engine error types."""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base exception for engine errors."""


class UnknownResourceKindError(EngineError):
    """Raised when a resource spec has no recognised kind prefix."""

    def __init__(self, spec: str) -> None:
        super().__init__(
            f"Unknown resource kind in spec '{spec}': expected a kv_, d1_ or r2_ prefix"
        )
        self.spec = spec


class DuplicateResourceError(EngineError):
    """Raised when two specs of the same kind resolve to the same name or binding."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        msg = "Duplicate resources:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class ProvisionError(EngineError):
    """Raised when creating or adopting a resource fails.

    Carries the resources resolved before the failure so callers can inspect
    progress. The original exception is chained via ``__cause__``.
    """

    def __init__(self, *, resolved: list[Any], spec: str, message: str) -> None:
        self.resolved = resolved
        self.spec = spec
        super().__init__(f"Provisioning failed on {spec}: {message}")
