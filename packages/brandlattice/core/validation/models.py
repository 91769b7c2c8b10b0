"""Result models for manifest validation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from brandlattice.core.models import Manifest


class Severity(str, Enum):
    """Severity of a predicate."""

    ERROR = "error"  # Weighs 10 in escape-path energy
    WARNING = "warning"  # Weighs 5

    @property
    def energy(self) -> int:
        return 10 if self is Severity.ERROR else 5


class PredicateOutcome(BaseModel):
    """Result of a single predicate test."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    message: str | None = None

    @classmethod
    def ok(cls) -> PredicateOutcome:
        return cls(valid=True)

    @classmethod
    def fail(cls, message: str) -> PredicateOutcome:
        return cls(valid=False, message=message)


class Violation(BaseModel):
    """A failed predicate."""

    model_config = ConfigDict(frozen=True)

    predicate: str = Field(description="Predicate name")
    message: str = Field(description="Human-readable reason")
    severity: Severity


class Repair(BaseModel):
    """A suggested fix for one violation.

    Repairs are advisory: each is computed from the original manifest
    independently and they are never composed.
    """

    model_config = ConfigDict(frozen=True)

    predicate: str
    repaired: Manifest
    description: str = Field(description="Violation message that motivated the repair")


class EscapeStep(BaseModel):
    """One state on an escape path toward the ground state."""

    model_config = ConfigDict(frozen=True)

    step: int = Field(ge=0)
    state: Manifest
    energy: int = Field(ge=0, description="Severity-weighted count of failing predicates")


class ValidationResult(BaseModel):
    """Outcome of validating a manifest.

    Attributes:
        valid: True iff no predicate failed
        violations: Failed predicates, in predicate order
        repairs: Suggested fixes, in predicate order
        escape_path: Path to the ground state, present only when invalid
        manifest: The validated manifest
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    violations: tuple[Violation, ...] = ()
    repairs: tuple[Repair, ...] = ()
    escape_path: tuple[EscapeStep, ...] | None = None
    manifest: Manifest

    @property
    def errors(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity is Severity.ERROR)

    @property
    def warnings(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity is Severity.WARNING)

    def repair_for(self, predicate: str) -> Manifest | None:
        """Repaired manifest suggested for a predicate, if any."""
        for repair in self.repairs:
            if repair.predicate == predicate:
                return repair.repaired
        return None


class ValidatorStats(BaseModel):
    """Counters kept by a validator instance."""

    model_config = ConfigDict(frozen=True)

    total_validations: int = 0
    cache_hits: int = 0
    valid_count: int = 0
    invalid_count: int = 0
    repair_count: int = 0

    @property
    def cache_hit_rate(self) -> float:
        """Cache hits as a fraction of all validations."""
        if self.total_validations == 0:
            return 0.0
        return self.cache_hits / self.total_validations


__all__ = [
    "EscapeStep",
    "PredicateOutcome",
    "Repair",
    "Severity",
    "ValidationResult",
    "ValidatorStats",
    "Violation",
]
