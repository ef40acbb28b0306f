"""Tests for onmodel.core.prompt_builder — prompt compilation.

Tests cover:
- Segment order and single-space joining.
- Product name and highlights handling.
- Fallbacks for unknown vibe, target and price keys.
- Negative prompt composition.
- Determinism.
"""

from __future__ import annotations

import dataclasses

import pytest
from conftest import make_combo

from onmodel.core.models import BatchParams
from onmodel.core.presets import (
    DEFAULT_PRICE_NARRATIVE,
    DEFAULT_TARGET_NARRATIVE,
    PRICE_POINTS,
    TARGET_PROFILES,
    VIBE_PRESETS,
)
from onmodel.core.prompt_builder import DEFAULT_NEGATIVE_PROMPT, GENERIC_PRODUCT, build_prompt


class TestPromptStructure:
    def test_opening_sentence_uses_product_name(self, combo, batch_params):
        prompt = build_prompt(combo, batch_params).prompt
        assert prompt.startswith(
            "Ultra realistic fashion photography of Silk Wrap Dress styled on "
            "tall editorial runway model."
        )

    def test_product_name_is_stripped(self, combo):
        prompt = build_prompt(combo, BatchParams(product_name="  Linen Shirt  ")).prompt
        assert "photography of Linen Shirt styled on" in prompt

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_generic_product_when_name_missing(self, combo, name):
        prompt = build_prompt(combo, BatchParams(product_name=name)).prompt
        assert f"photography of {GENERIC_PRODUCT} styled on" in prompt

    def test_segment_order(self, combo, batch_params):
        prompt = build_prompt(combo, batch_params).prompt
        ordered = [
            combo.model_prompt,
            combo.model_notes,
            combo.shot_prompt,
            VIBE_PRESETS["street"].prompt,
            PRICE_POINTS["premium"].narrative,
            TARGET_PROFILES["genz-trend"].narrative,
            "Key fabrication notes: mulberry silk, hand-rolled hems.",
            "Emphasise true-to-life fabric drape",
            "Shot on medium format camera",
            "Ensure the garment faithfully matches the uploaded reference",
        ]
        positions = [prompt.index(fragment) for fragment in ordered]
        assert positions == sorted(positions)

    def test_prompt_ends_with_reference_match(self, combo, batch_params):
        prompt = build_prompt(combo, batch_params).prompt
        assert prompt.endswith("in color, print, and construction.")

    @pytest.mark.parametrize("highlights", [None, "", "  "])
    def test_highlights_omitted_when_empty(self, combo, highlights):
        prompt = build_prompt(combo, BatchParams(highlights=highlights)).prompt
        assert "Key fabrication notes" not in prompt

    def test_empty_segments_leave_no_double_spaces(self):
        bare = dataclasses.replace(make_combo(), model_notes="")
        prompt = build_prompt(bare, BatchParams()).prompt
        assert "  " not in prompt


class TestFallbacks:
    def test_unknown_keys_do_not_raise(self, combo):
        params = BatchParams(vibe="disco", target_customer="aliens", price_point="free")
        compiled = build_prompt(combo, params)
        assert VIBE_PRESETS["luxury"].prompt in compiled.prompt
        assert DEFAULT_TARGET_NARRATIVE in compiled.prompt
        assert DEFAULT_PRICE_NARRATIVE in compiled.prompt
        assert VIBE_PRESETS["luxury"].negative in compiled.negative_prompt


class TestNegativePrompt:
    def test_composition(self, combo, batch_params):
        negative = build_prompt(combo, batch_params).negative_prompt
        assert negative.startswith(DEFAULT_NEGATIVE_PROMPT + ", ")
        assert f", {VIBE_PRESETS['street'].negative}, " in negative
        assert negative.endswith("sketch, painting")

    @pytest.mark.parametrize("vibe", [*VIBE_PRESETS, "unknown"])
    def test_default_negative_always_present(self, combo, vibe):
        negative = build_prompt(combo, BatchParams(vibe=vibe)).negative_prompt
        assert DEFAULT_NEGATIVE_PROMPT in negative


class TestDeterminism:
    def test_identical_inputs_identical_output(self, combo, batch_params):
        assert build_prompt(combo, batch_params) == build_prompt(combo, batch_params)

    def test_vibe_changes_output(self, combo):
        luxury = build_prompt(combo, BatchParams(vibe="luxury"))
        catalog = build_prompt(combo, BatchParams(vibe="catalog"))
        assert luxury.prompt != catalog.prompt
        assert luxury.negative_prompt != catalog.negative_prompt
