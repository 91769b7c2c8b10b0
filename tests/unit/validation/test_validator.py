"""Tests for LatticeValidator."""

from __future__ import annotations

import pytest

from brandlattice.core.errors import GroundStateError
from brandlattice.core.models import Manifest
from brandlattice.core.validation import (
    PREDICATES,
    LatticeValidator,
    PredicateOutcome,
    Severity,
)
from brandlattice.core.validation.predicates import PREDICATE_NAMES, Predicate


def _fails_on_text(trigger: str):
    def _test(manifest: Manifest) -> PredicateOutcome:
        if manifest.text == trigger:
            raise RuntimeError(f"cannot handle {trigger}")
        return PredicateOutcome.ok()

    return _test


def _flag_bad_text(manifest: Manifest) -> PredicateOutcome:
    if manifest.text == "bad":
        return PredicateOutcome.fail("Text is bad")
    return PredicateOutcome.ok()


def _broken_fix(manifest: Manifest) -> Manifest:
    raise ValueError("fix exploded")


class TestValidate:
    """Tests for LatticeValidator.validate."""

    def test_valid_manifest(self, validator: LatticeValidator, valid_manifest: Manifest):
        result = validator.validate(valid_manifest)

        assert result.valid
        assert result.violations == ()
        assert result.repairs == ()
        assert result.escape_path is None
        assert result.manifest == valid_manifest

    def test_adversarial_manifest(self, validator: LatticeValidator, adversarial_manifest_data):
        result = validator.validate(adversarial_manifest_data)

        assert not result.valid
        assert tuple(v.predicate for v in result.violations) == PREDICATE_NAMES
        assert len(result.errors) == 3
        assert len(result.warnings) == 3
        assert tuple(r.predicate for r in result.repairs) == PREDICATE_NAMES
        assert [step.energy for step in result.escape_path] == [5, 0, 0]

    def test_single_predicate_failure(self, validator: LatticeValidator):
        result = validator.validate(
            {"colors": {"text": "#000000", "accent": "#ff00ff"}, "brandColors": ["#000000"]}
        )

        assert not result.valid
        assert [v.predicate for v in result.violations] == ["brand_compliance"]
        assert result.violations[0].severity is Severity.WARNING
        assert result.escape_path[-1].energy == 0

    def test_ground_state_validates(self, validator: LatticeValidator):
        result = validator.validate(validator.get_ground_state())
        assert result.valid
        assert result.violations == ()

    def test_repairs_are_independent(self, validator: LatticeValidator, adversarial_manifest_data):
        result = validator.validate(adversarial_manifest_data)

        canvas_fixed = result.repair_for("canvas_validity")
        assert canvas_fixed.canvas == "1:1"
        assert canvas_fixed.text == "   "

        text_fixed = result.repair_for("text_readability")
        assert text_fixed.text == "Text"
        assert text_fixed.canvas == "0:0"

    def test_repair_description_is_violation_message(self, validator: LatticeValidator):
        result = validator.validate({"canvas": "0:0"})
        assert result.repairs[0].description == "Invalid canvas ratio: 0:0"

    def test_is_valid_and_energy(self, validator: LatticeValidator, adversarial_manifest_data):
        assert validator.is_valid({})
        assert not validator.is_valid(adversarial_manifest_data)
        assert validator.compute_energy(adversarial_manifest_data) == 45
        assert validator.compute_energy({}) == 0

    def test_escape_path_for_valid_manifest(self, validator: LatticeValidator):
        path = validator.compute_escape_path({})
        assert len(path) == 1
        assert path[0].state is validator.get_ground_state()

    def test_empty_predicate_set_is_kept(self, adversarial_manifest_data):
        validator = LatticeValidator(predicates=[])

        assert validator.predicates == ()
        assert validator.validate(adversarial_manifest_data).valid


class TestMalformedFields:
    """Fields of the wrong shape become violations, never exceptions."""

    @pytest.mark.parametrize(
        ("data", "predicate"),
        [
            ({"text": 42}, "text_readability"),
            ({"typography": "huge"}, "text_readability"),
            ({"canvas": 169}, "canvas_validity"),
            ({"motion": {"easing": 1}}, "animation_physics"),
            ({"elements": "not-a-list"}, "layout_coherence"),
            ({"colors": ["#fff"]}, "color_contrast"),
            ({"brandColors": "#ff0000", "colors": {"text": "#000000"}}, "brand_compliance"),
        ],
    )
    def test_reported_by_owning_predicate(self, validator: LatticeValidator, data, predicate):
        result = validator.validate(data)

        assert not result.valid
        assert [v.predicate for v in result.violations] == [predicate]
        assert result.violations[0].message.startswith("Malformed field: ")
        assert result.repairs[0].repaired.malformed is None
        assert validator.validate(result.repairs[0].repaired).valid

        path = result.escape_path
        assert len(path) <= 11
        assert path[-1].state is validator.get_ground_state()
        assert validator.validate(path[-1].state).valid

    def test_escape_path_clears_malformed_fields(self, validator: LatticeValidator):
        path = validator.compute_escape_path({"text": 42, "canvas": "0:0"})

        assert [step.energy for step in path] == [0, 0]
        assert path[0].state.malformed is None
        assert validator.compute_energy({"text": 42, "canvas": "0:0"}) == 15

    def test_malformed_content_is_cached_separately(self, validator: LatticeValidator):
        assert validator.validate({"text": 42}) is not validator.validate({})

    @pytest.mark.asyncio
    async def test_batch_survives_malformed_manifest(self, validator: LatticeValidator):
        results = await validator.validate_many([{}, {"typography": "huge"}, {"canvas": "1:1"}])
        assert [r.valid for r in results] == [True, False, True]


class TestCache:
    """Tests for result caching and stats."""

    def test_same_content_returns_same_result(
        self, validator: LatticeValidator, valid_manifest_data
    ):
        first = validator.validate(valid_manifest_data)
        reordered = dict(reversed(list(valid_manifest_data.items())))
        second = validator.validate(reordered)

        assert second is first
        assert validator.cache_size == 1

    def test_clear_cache(self, validator: LatticeValidator, valid_manifest_data):
        first = validator.validate(valid_manifest_data)
        validator.clear_cache()

        assert validator.cache_size == 0
        second = validator.validate(valid_manifest_data)
        assert second is not first
        assert second == first

    def test_stats(self, validator: LatticeValidator, adversarial_manifest_data):
        validator.validate(adversarial_manifest_data)
        validator.validate(adversarial_manifest_data)
        validator.validate({})

        stats = validator.get_stats()
        assert stats.total_validations == 3
        assert stats.cache_hits == 1
        assert stats.invalid_count == 2
        assert stats.valid_count == 1
        assert stats.repair_count == 6
        assert stats.cache_hit_rate == pytest.approx(1 / 3)

    def test_fresh_stats(self, validator: LatticeValidator):
        stats = validator.get_stats()
        assert stats.total_validations == 0
        assert stats.cache_hit_rate == 0.0


class TestCrashIsolation:
    """A raising predicate must not abort the validation pass."""

    def test_raising_test_is_a_violation(self):
        crashy = Predicate("crashy", Severity.WARNING, _fails_on_text("boom"))
        validator = LatticeValidator(predicates=[*PREDICATES, crashy])

        result = validator.validate({"text": "boom", "canvas": "0:0"})

        names = [v.predicate for v in result.violations]
        assert names == ["canvas_validity", "crashy"]
        crash = result.violations[-1]
        assert crash.severity is Severity.WARNING
        assert crash.message == "Predicate raised RuntimeError: cannot handle boom"

    def test_raising_fix_is_skipped(self):
        flaky = Predicate("flaky", Severity.ERROR, _flag_bad_text, _broken_fix)
        validator = LatticeValidator(predicates=[*PREDICATES, flaky])

        result = validator.validate({"text": "bad"})

        assert [v.predicate for v in result.violations] == ["flaky"]
        assert result.repairs == ()
        assert result.escape_path[-1].energy == 0


class TestGroundState:
    """Tests for ground state selection at construction."""

    def test_default_variant(self, validator: LatticeValidator):
        assert validator.get_ground_state().colors.background == "#ffffff"

    def test_dark_variant(self, adversarial_manifest_data):
        validator = LatticeValidator(ground_state_variant="dark")
        ground = validator.get_ground_state()

        assert ground.colors.background == "#000000"
        path = validator.validate(adversarial_manifest_data).escape_path
        assert path[-1].state is ground

    def test_unknown_variant_falls_back(self):
        validator = LatticeValidator(ground_state_variant="neon")
        assert validator.get_ground_state().colors.text == "#000000"

    def test_invalid_ground_state_raises(self):
        never = Predicate("never", Severity.ERROR, lambda m: PredicateOutcome.fail("never holds"))

        with pytest.raises(GroundStateError) as exc_info:
            LatticeValidator(predicates=[never])

        assert exc_info.value.failing == ["never"]
        assert exc_info.value.variant == "default"


class TestValidateMany:
    """Tests for concurrent batch validation."""

    @pytest.mark.asyncio
    async def test_results_in_input_order(
        self, validator: LatticeValidator, valid_manifest_data, adversarial_manifest_data
    ):
        manifests = [valid_manifest_data, adversarial_manifest_data, {"canvas": "0:0"}]

        results = await validator.validate_many(manifests, max_concurrency=2)

        assert [r.valid for r in results] == [True, False, False]
        assert results[2].violations[0].predicate == "canvas_validity"
        assert validator.get_stats().total_validations == 3

    @pytest.mark.asyncio
    async def test_duplicates_share_results(self, validator: LatticeValidator):
        results = await validator.validate_many([{"text": "a"}] * 4, max_concurrency=1)
        assert all(r is results[0] for r in results)

    @pytest.mark.asyncio
    async def test_empty_batch(self, validator: LatticeValidator):
        assert await validator.validate_many([]) == []

    @pytest.mark.asyncio
    async def test_rejects_zero_concurrency(self, validator: LatticeValidator):
        with pytest.raises(ValueError):
            await validator.validate_many([{}], max_concurrency=0)
