"""Lattice validator: predicate conjunction with repairs, caching and escape paths."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from brandlattice.core.errors import GroundStateError
from brandlattice.core.models import Manifest
from brandlattice.core.utils.logging import get_logger
from brandlattice.core.validation.convergence import EscapePathSynthesizer, compute_energy
from brandlattice.core.validation.fingerprint import manifest_fingerprint
from brandlattice.core.validation.ground_state import DEFAULT_VARIANT, get_ground_state_variant
from brandlattice.core.validation.models import (
    EscapeStep,
    Repair,
    ValidationResult,
    ValidatorStats,
    Violation,
)
from brandlattice.core.validation.predicates import (
    PREDICATES,
    Predicate,
    attempt_repair,
    evaluate_predicate,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8

ManifestLike = Manifest | Mapping[str, Any]


class LatticeValidator:
    """Validates manifests against the predicate set.

    Results are memoized by the manifest's structural fingerprint, so two
    manifests with the same content (in any key order) share one result
    object. The cache is never invalidated entry by entry: call
    :meth:`clear_cache` after changing predicates, brand data or the ground
    state.

    Example:
        >>> validator = LatticeValidator()
        >>> result = validator.validate({"canvas": "0:0"})
        >>> result.valid
        False
        >>> result.violations[0].predicate
        'canvas_validity'
    """

    def __init__(
        self,
        ground_state_variant: str = DEFAULT_VARIANT,
        predicates: Sequence[Predicate] | None = None,
    ):
        """Initialize the validator.

        Args:
            ground_state_variant: Name of the ground state variant escape paths end at
            predicates: Predicate set; defaults to the standard six

        Raises:
            GroundStateError: If the ground state fails any predicate
        """
        self.predicates: tuple[Predicate, ...] = (
            tuple(predicates) if predicates is not None else PREDICATES
        )
        self.ground_state_variant = ground_state_variant
        self._ground_state = get_ground_state_variant(ground_state_variant)
        self._synthesizer = EscapePathSynthesizer(self._ground_state, self.predicates)
        self._cache: dict[str, ValidationResult] = {}
        self._stats_lock = threading.Lock()
        self._stats = ValidatorStats()

        failing = [v.predicate for v in self._evaluate(self._ground_state)]
        if failing:
            raise GroundStateError(ground_state_variant, failing)

        logger.debug(
            "LatticeValidator ready: %d predicates, ground state '%s'",
            len(self.predicates),
            ground_state_variant,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _evaluate(self, manifest: Manifest) -> list[Violation]:
        violations = []
        for predicate in self.predicates:
            violation = evaluate_predicate(predicate, manifest)
            if violation is not None:
                violations.append(violation)
        return violations

    def validate(self, manifest: ManifestLike) -> ValidationResult:
        """Validate a manifest.

        Every predicate is evaluated in order. For each failing predicate the
        fix is attempted on the original manifest and recorded; fixes are
        never combined. Invalid results carry an escape path to the ground
        state.

        Args:
            manifest: Manifest or manifest mapping; fields of the wrong shape
                are reported as violations (see ``Manifest.coerce``)

        Returns:
            Validation result (the cached instance on repeat calls)
        """
        model = Manifest.coerce(manifest)
        key = manifest_fingerprint(model)

        cached = self._cache.get(key)
        if cached is not None:
            self._record(cached, cache_hit=True, repairs=0)
            return cached

        violations = self._evaluate(model)

        repairs = []
        by_name = {p.name: p for p in self.predicates}
        for violation in violations:
            repaired = attempt_repair(by_name[violation.predicate], model)
            if repaired is not None:
                repairs.append(
                    Repair(
                        predicate=violation.predicate,
                        repaired=repaired,
                        description=violation.message,
                    )
                )

        valid = not violations
        escape_path = None if valid else self._synthesizer.synthesize(model)

        result = ValidationResult(
            valid=valid,
            violations=tuple(violations),
            repairs=tuple(repairs),
            escape_path=escape_path,
            manifest=model,
        )
        self._cache[key] = result
        self._record(result, cache_hit=False, repairs=len(repairs))

        if not valid:
            get_logger(__name__, fingerprint=key[:12]).debug(
                "Manifest invalid: %s", ", ".join(v.predicate for v in violations)
            )
        return result

    def is_valid(self, manifest: ManifestLike) -> bool:
        return self.validate(manifest).valid

    def compute_energy(self, manifest: ManifestLike) -> int:
        """Severity-weighted count of failing predicates (0 iff valid)."""
        return compute_energy(manifest, self.predicates)

    def compute_escape_path(self, manifest: ManifestLike) -> tuple[EscapeStep, ...]:
        """Escape path from a manifest to the ground state.

        Valid manifests get a single-entry path holding the ground state.
        """
        return self._synthesizer.synthesize(manifest)

    def get_ground_state(self) -> Manifest:
        return self._ground_state

    async def validate_many(
        self,
        manifests: Iterable[ManifestLike],
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> list[ValidationResult]:
        """Validate manifests concurrently, one worker thread per manifest.

        Args:
            manifests: Manifests to validate
            max_concurrency: Maximum number of validations in flight

        Returns:
            Results in input order
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")

        sem = asyncio.Semaphore(max_concurrency)

        async def _validate_one(manifest: ManifestLike) -> ValidationResult:
            async with sem:
                return await asyncio.to_thread(self.validate, manifest)

        results = list(await asyncio.gather(*[_validate_one(m) for m in manifests]))
        logger.info(
            "Validated %d manifests (%d invalid)",
            len(results),
            sum(1 for r in results if not r.valid),
        )
        return results

    # ------------------------------------------------------------------
    # Cache and stats
    # ------------------------------------------------------------------

    def _record(self, result: ValidationResult, cache_hit: bool, repairs: int) -> None:
        with self._stats_lock:
            stats = self._stats
            self._stats = stats.model_copy(
                update={
                    "total_validations": stats.total_validations + 1,
                    "cache_hits": stats.cache_hits + int(cache_hit),
                    "valid_count": stats.valid_count + int(result.valid),
                    "invalid_count": stats.invalid_count + int(not result.valid),
                    "repair_count": stats.repair_count + repairs,
                }
            )

    def get_stats(self) -> ValidatorStats:
        """Snapshot of validation counters.

        Valid/invalid counts include cache hits; the repair count covers
        fresh evaluations only.
        """
        with self._stats_lock:
            return self._stats

    def clear_cache(self) -> None:
        """Drop every cached result."""
        count = len(self._cache)
        self._cache.clear()
        logger.debug("Cleared %d cached validation results", count)

    @property
    def cache_size(self) -> int:
        return len(self._cache)


__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "LatticeValidator",
]
