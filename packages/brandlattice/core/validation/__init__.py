"""Manifest validation: predicates, validator, ground state and escape paths."""

from brandlattice.core.validation.convergence import (
    ConvergencePhase,
    EscapePathSynthesizer,
    compute_energy,
    interpolate,
)
from brandlattice.core.validation.fingerprint import manifest_fingerprint
from brandlattice.core.validation.ground_state import (
    GROUND_STATE,
    GROUND_STATE_VARIANTS,
    distance_to_ground_state,
    get_ground_state,
    get_ground_state_variant,
    is_ground_state,
)
from brandlattice.core.validation.models import (
    EscapeStep,
    PredicateOutcome,
    Repair,
    Severity,
    ValidationResult,
    ValidatorStats,
    Violation,
)
from brandlattice.core.validation.predicates import PREDICATES, Predicate
from brandlattice.core.validation.validator import LatticeValidator

__all__ = [
    "GROUND_STATE",
    "GROUND_STATE_VARIANTS",
    "PREDICATES",
    "ConvergencePhase",
    "EscapePathSynthesizer",
    "EscapeStep",
    "LatticeValidator",
    "Predicate",
    "PredicateOutcome",
    "Repair",
    "Severity",
    "ValidationResult",
    "ValidatorStats",
    "Violation",
    "compute_energy",
    "distance_to_ground_state",
    "get_ground_state",
    "get_ground_state_variant",
    "interpolate",
    "is_ground_state",
    "manifest_fingerprint",
]
