"""Tests for the predicate set."""

from __future__ import annotations

import pytest

from brandlattice.core.color.contrast import contrast_ratio
from brandlattice.core.models import Manifest
from brandlattice.core.validation import Severity
from brandlattice.core.validation.predicates import (
    DEFAULT_MALFORMED_OWNER,
    MALFORMED_FIELD_OWNERS,
    PREDICATE_NAMES,
    PREDICATES,
    Predicate,
    attempt_repair,
    check_animation_physics,
    check_brand_compliance,
    check_canvas_validity,
    check_color_contrast,
    check_layout_coherence,
    check_text_readability,
    evaluate_predicate,
    is_valid_easing,
    malformed_fields,
    readable_text_color,
    repair_animation_physics,
    repair_brand_compliance,
    repair_canvas_validity,
    repair_color_contrast,
    repair_layout_coherence,
    repair_text_readability,
)


def _manifest(**data) -> Manifest:
    return Manifest.model_validate(data)


def test_predicate_order_and_severity():
    assert PREDICATE_NAMES == (
        "color_contrast",
        "layout_coherence",
        "brand_compliance",
        "animation_physics",
        "canvas_validity",
        "text_readability",
    )
    severities = {p.name: p.severity for p in PREDICATES}
    assert severities["color_contrast"] is Severity.ERROR
    assert severities["layout_coherence"] is Severity.ERROR
    assert severities["canvas_validity"] is Severity.ERROR
    assert severities["brand_compliance"] is Severity.WARNING
    assert severities["animation_physics"] is Severity.WARNING
    assert severities["text_readability"] is Severity.WARNING
    assert all(p.fix is not None for p in PREDICATES)


class TestColorContrast:
    """Tests for the color_contrast predicate."""

    def test_defaults_to_black_on_white(self):
        assert check_color_contrast(Manifest()).valid

    def test_low_contrast_fails(self, low_contrast_manifest: Manifest):
        outcome = check_color_contrast(low_contrast_manifest)
        assert not outcome.valid
        assert "below minimum 4.5" in outcome.message

    def test_unparseable_color_fails(self):
        outcome = check_color_contrast(_manifest(colors={"text": "not-a-color"}))
        assert not outcome.valid
        assert outcome.message.startswith("Invalid color format")

    def test_repair_falls_back_to_black(self, low_contrast_manifest: Manifest):
        repaired = repair_color_contrast(low_contrast_manifest)
        assert repaired.colors.text == "#000000"
        assert repaired.colors.background == low_contrast_manifest.colors.background
        assert check_color_contrast(repaired).valid

    def test_repair_darkens_mid_gray_on_white(self):
        repaired = repair_color_contrast(_manifest(colors={"text": "#999999"}))
        text = repaired.colors.text
        assert text != "#000000"
        assert contrast_ratio(text, "#ffffff") >= 4.5
        assert contrast_ratio(text, "#ffffff") > contrast_ratio("#999999", "#ffffff")

    def test_repair_on_black_background(self):
        repaired = repair_color_contrast(
            _manifest(colors={"text": "#444444", "background": "#000000"})
        )
        assert contrast_ratio(repaired.colors.text, "#000000") >= 4.5

    def test_repair_replaces_unparseable_background(self):
        repaired = repair_color_contrast(
            _manifest(colors={"text": "bogus", "background": "also-bogus"})
        )
        assert repaired.colors.background == "#ffffff"
        assert check_color_contrast(repaired).valid

    def test_repair_keeps_other_roles(self):
        manifest = _manifest(colors={"text": "#888888", "primary": "#123456"})
        assert repair_color_contrast(manifest).colors.primary == "#123456"

    def test_readable_text_color_keeps_readable_input(self):
        assert readable_text_color("#111111", "#ffffff") == "#111111"


class TestLayoutCoherence:
    """Tests for the layout_coherence predicate."""

    def test_no_elements(self):
        assert check_layout_coherence(Manifest()).valid
        assert check_layout_coherence(_manifest(elements=[])).valid

    def test_default_sizes_overlap(self):
        manifest = _manifest(elements=[{"x": 0, "y": 0}, {"x": 10, "y": 10}])
        outcome = check_layout_coherence(manifest)
        assert not outcome.valid
        assert outcome.message == "Elements 0 and 1 overlap"

    def test_touching_edges_do_not_overlap(self):
        manifest = _manifest(
            elements=[
                {"x": 0, "y": 0, "width": 50, "height": 50},
                {"x": 50, "y": 0, "width": 50, "height": 50},
            ]
        )
        assert check_layout_coherence(manifest).valid

    def test_grid_repair(self):
        manifest = _manifest(elements=[{"id": "a"}, {"id": "b"}, {"id": "c"}])
        repaired = repair_layout_coherence(manifest)

        assert [(e.x, e.y) for e in repaired.elements] == [
            ("0%", "0%"),
            ("50%", "0%"),
            ("0%", "50%"),
        ]
        assert {e.width for e in repaired.elements} == {"50%"}
        assert [e.id for e in repaired.elements] == ["a", "b", "c"]
        assert check_layout_coherence(repaired).valid

    def test_grid_repair_with_thirds(self):
        manifest = _manifest(elements=[{"x": 0, "y": 0}] * 7)
        repaired = repair_layout_coherence(manifest)
        assert repaired.elements[1].x == "33.3333%"
        assert check_layout_coherence(repaired).valid


class TestBrandCompliance:
    """Tests for the brand_compliance predicate."""

    def test_no_palette_is_compliant(self):
        assert check_brand_compliance(_manifest(colors={"text": "#ff00ff"})).valid

    def test_off_palette_color_fails(self):
        manifest = _manifest(colors={"text": "#ff00ff"}, brandColors=["#003366"])
        outcome = check_brand_compliance(manifest)
        assert not outcome.valid
        assert "#ff00ff" in outcome.message

    def test_embedded_profile_palette(self):
        manifest = _manifest(
            colors={"text": "#ff00ff"}, profile={"name": "acme", "palette": ["#003366"]}
        )
        assert not check_brand_compliance(manifest).valid

    def test_repair_snaps_to_nearest(self):
        manifest = _manifest(
            colors={"text": "#003367", "background": "#fdfdfd", "accent": "#ff0000"},
            brandColors=["#003366", "#ffffff"],
        )
        repaired = repair_brand_compliance(manifest)
        assert repaired.colors.text == "#003366"
        assert repaired.colors.background == "#ffffff"
        assert repaired.colors.accent in {"#003366", "#ffffff"}
        assert check_brand_compliance(repaired).valid


class TestAnimationPhysics:
    """Tests for the animation_physics predicate."""

    @pytest.mark.parametrize(
        "easing",
        [
            "linear",
            "EASE-IN-OUT",
            "cubic-bezier(0.4, 0, 0.2, 1)",
            "cubic-bezier(0.68,-0.55,0.27,1.55)",
            "steps(4)",
            "steps(4, jump-end)",
        ],
    )
    def test_valid_easings(self, easing):
        assert is_valid_easing(easing)

    @pytest.mark.parametrize(
        "easing", ["wobbly", "cubic-bezier(1.5, 0, 0.2, 1)", "steps(0)", "steps(3, sideways)"]
    )
    def test_invalid_easings(self, easing):
        assert not is_valid_easing(easing)

    def test_no_motion(self):
        assert check_animation_physics(Manifest()).valid

    def test_zero_duration_fails_when_animated(self):
        outcome = check_animation_physics(_manifest(motion={"type": "fade", "duration": "0s"}))
        assert not outcome.valid
        assert "positive" in outcome.message

    def test_missing_type_counts_as_animated(self):
        assert not check_animation_physics(_manifest(motion={"duration": "0ms"})).valid

    def test_static_motion_allows_zero_duration(self):
        assert check_animation_physics(_manifest(motion={"type": "none", "duration": "0s"})).valid

    @pytest.mark.parametrize("duration", ["-5s", "soon"])
    def test_static_motion_still_checks_duration(self, duration):
        manifest = _manifest(animation={"type": "none", "duration": duration})

        assert not check_animation_physics(manifest).valid
        assert repair_animation_physics(manifest).motion.duration == "1s"

    def test_unparseable_duration_fails(self):
        outcome = check_animation_physics(_manifest(motion={"type": "fade", "duration": "soon"}))
        assert not outcome.valid

    def test_bad_easing_fails(self):
        outcome = check_animation_physics(
            _manifest(motion={"type": "fade", "duration": "1s", "easing": "wobbly"})
        )
        assert outcome.message == "Invalid easing function: wobbly"

    def test_repair(self):
        manifest = _manifest(motion={"type": "slide", "duration": "-1s", "easing": "wobbly"})
        repaired = repair_animation_physics(manifest)
        assert repaired.motion.duration == "1s"
        assert repaired.motion.easing == "ease"
        assert repaired.motion.type == "slide"
        assert check_animation_physics(repaired).valid

    def test_repair_keeps_valid_fields(self):
        manifest = _manifest(motion={"type": "fade", "duration": "2s", "easing": "wobbly"})
        assert repair_animation_physics(manifest).motion.duration == "2s"


class TestCanvasValidity:
    """Tests for the canvas_validity predicate."""

    @pytest.mark.parametrize("canvas", ["16:9", "1080x1920", "1.91:1", "story", "cover", ""])
    def test_valid_canvas_strings(self, canvas):
        assert check_canvas_validity(_manifest(canvas=canvas)).valid

    def test_zero_ratio(self):
        outcome = check_canvas_validity(_manifest(canvas="0:0"))
        assert outcome.message == "Invalid canvas ratio: 0:0"

    @pytest.mark.parametrize("canvas", ["16:9:1", "a:b", "-1:1"])
    def test_invalid_ratios(self, canvas):
        assert not check_canvas_validity(_manifest(canvas=canvas)).valid

    def test_invalid_dimensions(self):
        outcome = check_canvas_validity(_manifest(canvas="widexhigh"))
        assert outcome.message == "Invalid canvas dimensions: widexhigh"

    def test_canvas_object(self):
        assert check_canvas_validity(_manifest(canvas={"width": 1080, "height": "1920px"})).valid
        assert check_canvas_validity(_manifest(canvas={"aspect": "4:3"})).valid
        assert not check_canvas_validity(_manifest(canvas={"width": 0, "height": 1080})).valid
        assert not check_canvas_validity(_manifest(canvas={"aspect": "0:3"})).valid

    def test_repair(self):
        repaired = repair_canvas_validity(_manifest(canvas="0:0"))
        assert repaired.canvas == "1:1"
        assert check_canvas_validity(repaired).valid


class TestTextReadability:
    """Tests for the text_readability predicate."""

    def test_absent_text_is_fine(self):
        assert check_text_readability(Manifest()).valid

    def test_blank_text_fails(self):
        outcome = check_text_readability(_manifest(text="   "))
        assert outcome.message == "Text content is empty"

    @pytest.mark.parametrize("size", ["8px", "200px", 48, "50%", "1rem"])
    def test_readable_sizes(self, size):
        assert check_text_readability(_manifest(typography={"fontSize": size})).valid

    @pytest.mark.parametrize("size", ["7px", "201px", -12, "40%", "huge"])
    def test_unreadable_sizes(self, size):
        assert not check_text_readability(_manifest(typography={"fontSize": size})).valid

    @pytest.mark.parametrize(
        ("size", "expected"), [("4px", "8px"), ("300px", "200px"), (-12, "8px"), ("huge", "16px")]
    )
    def test_repair_font_size(self, size, expected):
        repaired = repair_text_readability(_manifest(typography={"fontSize": size}))
        assert repaired.typography.font_size == expected
        assert check_text_readability(repaired).valid

    def test_repair_placeholder_text(self):
        repaired = repair_text_readability(_manifest(text="", typography={"fontFamily": "Inter"}))
        assert repaired.text == "Text"
        assert repaired.typography.font_family == "Inter"

    def test_repair_without_typography(self):
        repaired = repair_text_readability(_manifest(text=" "))
        assert repaired.text == "Text"
        assert repaired.typography is None


class TestMalformedFieldOwnership:
    """Fields set aside by Manifest.coerce are reported by one predicate each."""

    def test_owner_reports_and_repair_drops(self):
        manifest = Manifest.coerce({"canvas": 169, "text": 42})

        outcome = check_canvas_validity(manifest)
        assert outcome.message == "Malformed field: canvas=169"
        repaired = repair_canvas_validity(manifest)
        assert repaired.canvas == "1:1"
        assert repaired.malformed == {"text": "42"}

    def test_other_predicates_ignore_it(self):
        manifest = Manifest.coerce({"canvas": 169})

        assert check_color_contrast(manifest).valid
        assert check_text_readability(manifest).valid
        assert repair_text_readability(manifest) is manifest

    def test_unlisted_fields_go_to_text_readability(self):
        manifest = Manifest.coerce({"scene": ["quote"]})

        assert malformed_fields(manifest, "text_readability") == ["scene"]
        assert not check_text_readability(manifest).valid
        assert repair_text_readability(manifest).malformed is None

    def test_every_owner_is_a_predicate(self):
        assert set(MALFORMED_FIELD_OWNERS.values()) <= set(PREDICATE_NAMES)
        assert DEFAULT_MALFORMED_OWNER in PREDICATE_NAMES


class TestEvaluation:
    """Tests for crash isolation around predicate functions."""

    @staticmethod
    def _explode(manifest: Manifest):
        raise RuntimeError("kaboom")

    def test_raising_test_becomes_violation(self):
        predicate = Predicate("boom", Severity.WARNING, self._explode)
        violation = evaluate_predicate(predicate, Manifest())

        assert violation is not None
        assert violation.predicate == "boom"
        assert violation.severity is Severity.WARNING
        assert violation.message == "Predicate raised RuntimeError: kaboom"

    def test_passing_test_returns_none(self):
        assert evaluate_predicate(PREDICATES[0], Manifest()) is None

    def test_raising_fix_is_skipped(self):
        predicate = Predicate("boom", Severity.ERROR, check_color_contrast, self._explode)
        assert attempt_repair(predicate, Manifest()) is None

    def test_missing_fix(self):
        predicate = Predicate("nofix", Severity.ERROR, check_color_contrast)
        assert attempt_repair(predicate, Manifest()) is None
