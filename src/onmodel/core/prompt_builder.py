"""Prompt and negative-prompt compilation for on-model generation.

The prompt for each job is assembled from the combo (model casting and shot
framing) and the batch-wide creative parameters (vibe, price point, target
customer, product name, fabrication highlights), followed by fixed
fidelity instructions that keep the generated garment faithful to the
uploaded reference.

Prompt Structure::

    Ultra realistic fashion photography of [product] styled on [model prompt].
    [Model notes] [Shot prompt] [Vibe prompt] [Price narrative]
    [Target narrative] [Key fabrication notes: highlights.]
    [Fixed: fabric fidelity] [Fixed: camera / retouching] [Fixed: reference match]

Segments are joined with single spaces.  Empty segments (no model notes, no
highlights) are omitted rather than leaving double spaces behind.

Negative Prompt Structure::

    [Global default negative], [Vibe negative], [Fixed: garment/body artifacts]

Compilation is pure: the same combo and parameters always produce the same
strings.  The seed is chosen by the dispatcher, not here.

Usage
-----
::

    compiled = build_prompt(combo, BatchParams(vibe="street", highlights="raw silk"))
    compiled.prompt
    compiled.negative_prompt
"""

from __future__ import annotations

from onmodel.core.models import BatchParams, Combo, CompiledPrompt
from onmodel.core.presets import (
    resolve_price_narrative,
    resolve_target_narrative,
    resolve_vibe,
)

DEFAULT_NEGATIVE_PROMPT = (
    "low quality, distorted body, deformed hands, double limb, cropped face, cartoon, "
    "text overlay, logo watermark, frame, render artifact"
)

GENERIC_PRODUCT = "the garment provided in the reference image"

# ---------------------------------------------------------------------------
# Fixed fidelity sections.
# These close every prompt regardless of the selected presets.
# ---------------------------------------------------------------------------

_FABRIC_FIDELITY = (
    "Emphasise true-to-life fabric drape, authentic fit, and tactile texture fidelity."
)

_CAMERA_QUALITY = (
    "Shot on medium format camera, impeccable retouching, 8k resolution, "
    "editorial grade color science."
)

_REFERENCE_MATCH = (
    "Ensure the garment faithfully matches the uploaded reference in color, print, "
    "and construction."
)

_GARMENT_ARTIFACTS_NEGATIVE = (
    "unrealistic body, duplicated garment, missing garment, blur, grain, noisy render, "
    "sketch, painting"
)


def build_prompt(combo: Combo, params: BatchParams) -> CompiledPrompt:
    """Compile the prompt and negative prompt for one combo.

    Args:
        combo: The shot/model pairing being rendered.
        params: Batch-wide creative parameters.  Unknown preset keys fall back
            to the default vibe and generic narratives.

    Returns:
        A :class:`CompiledPrompt` with the final prompt and negative prompt.
    """
    vibe = resolve_vibe(params.vibe)
    product = (params.product_name or "").strip() or GENERIC_PRODUCT

    highlights = (params.highlights or "").strip()
    if highlights:
        highlights = f"Key fabrication notes: {highlights}."

    segments = [
        f"Ultra realistic fashion photography of {product} styled on {combo.model_prompt}.",
        combo.model_notes,
        combo.shot_prompt,
        vibe.prompt,
        resolve_price_narrative(params.price_point),
        resolve_target_narrative(params.target_customer),
        highlights,
        _FABRIC_FIDELITY,
        _CAMERA_QUALITY,
        _REFERENCE_MATCH,
    ]

    negatives = [DEFAULT_NEGATIVE_PROMPT, vibe.negative, _GARMENT_ARTIFACTS_NEGATIVE]

    return CompiledPrompt(
        prompt=" ".join(segment for segment in segments if segment),
        negative_prompt=", ".join(part for part in negatives if part),
    )
