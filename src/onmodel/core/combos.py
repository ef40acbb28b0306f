"""Expansion of shot × model selections into generation combos."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from onmodel.core.models import Combo
from onmodel.core.presets import MODEL_PRESETS, SHOT_PRESETS

logger = logging.getLogger(__name__)


def build_combos(shot_ids: Iterable[str], model_ids: Iterable[str]) -> list[Combo]:
    """Build one combo per selected (model, shot) pair.

    Selections are filtered against the preset libraries and always expanded
    in library order (models outer, shots inner), regardless of the order the
    caller listed them in.  Unknown identifiers are dropped.  Each combo gets
    a unique identifier of the form ``"{model_id}-{shot_id}-{uuid4}"``.

    Args:
        shot_ids: Selected shot preset identifiers.
        model_ids: Selected model preset identifiers.

    Returns:
        The ordered list of combos; empty when either selection is empty.
    """
    selected_shots = set(shot_ids)
    selected_models = set(model_ids)

    unknown = (selected_shots - SHOT_PRESETS.keys()) | (selected_models - MODEL_PRESETS.keys())
    if unknown:
        logger.warning("Ignoring unknown preset ids: %s", ", ".join(sorted(unknown)))

    shots = [shot for shot in SHOT_PRESETS.values() if shot.id in selected_shots]
    models = [model for model in MODEL_PRESETS.values() if model.id in selected_models]

    return [
        Combo(
            id=f"{model.id}-{shot.id}-{uuid.uuid4()}",
            shot_id=shot.id,
            shot_label=shot.label,
            shot_prompt=shot.prompt,
            aspect_ratio=shot.aspect_ratio,
            model_id=model.id,
            model_label=model.label,
            model_prompt=model.prompt,
            model_notes=model.notes,
        )
        for model in models
        for shot in shots
    ]
