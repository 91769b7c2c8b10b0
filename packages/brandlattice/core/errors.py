"""Exception hierarchy for brandlattice.

Predicate failures are results, not exceptions. These errors cover
configuration and input problems outside the validation pass itself.
"""

from __future__ import annotations


class BrandLatticeError(Exception):
    """Base class for brandlattice errors."""


class GroundStateError(BrandLatticeError):
    """The configured ground state does not satisfy every predicate."""

    def __init__(self, variant: str, failing: list[str]) -> None:
        self.variant = variant
        self.failing = failing
        super().__init__(f"Ground state '{variant}' fails predicates: {', '.join(failing)}")


class ManifestLoadError(BrandLatticeError):
    """A manifest or brand profile file could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load {path}: {reason}")


__all__ = [
    "BrandLatticeError",
    "GroundStateError",
    "ManifestLoadError",
]
