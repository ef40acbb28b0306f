"""Pydantic request models for the On-Model Studio API.

The browser client speaks camelCase JSON, so every model uses a camelCase
alias generator while still accepting snake_case field names.

Models
------
ComboInput
    One shot/model pairing as sent by the client.
BatchParamsInput
    The creative parameters shared by every combo in a batch.
GeneratePayload
    The JSON ``payload`` form field of ``POST /api/generate``.
CompileRequest
    Payload for ``POST /api/prompt/compile`` — one combo plus parameters.
ComboSelection
    Payload for ``POST /api/combos`` — selected shot and model preset ids.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from onmodel.core.models import BatchParams, Combo
from onmodel.core.presets import DEFAULT_VIBE


class _CamelModel(BaseModel):
    # "model_*" fields name the fashion model preset, not pydantic internals.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class ComboInput(_CamelModel):
    """A single combo; ``id`` is echoed back on the matching result."""

    id: str = Field(..., min_length=1, description="Caller-assigned combo identifier.")
    shot_id: str = Field(..., description="Shot preset identifier.")
    shot_label: str = Field(default="", description="Shot display label.")
    shot_prompt: str = Field(..., description="Shot prompt fragment.")
    aspect_ratio: str = Field(default="3:4", description="Aspect ratio key, e.g. '3:4'.")
    model_id: str = Field(..., description="Model preset identifier.")
    model_label: str = Field(default="", description="Model display label.")
    model_prompt: str = Field(..., description="Model prompt fragment.")
    model_notes: str = Field(default="", description="Model styling notes.")

    def to_combo(self) -> Combo:
        return Combo(**self.model_dump(by_alias=False))

    @classmethod
    def from_combo(cls, combo: Combo) -> ComboInput:
        return cls(
            id=combo.id,
            shot_id=combo.shot_id,
            shot_label=combo.shot_label,
            shot_prompt=combo.shot_prompt,
            aspect_ratio=combo.aspect_ratio,
            model_id=combo.model_id,
            model_label=combo.model_label,
            model_prompt=combo.model_prompt,
            model_notes=combo.model_notes,
        )


class BatchParamsInput(_CamelModel):
    """Creative parameters.  Unknown preset keys fall back to defaults."""

    product_name: str | None = Field(default=None, description="Optional product name.")
    highlights: str | None = Field(default=None, description="Optional fabrication notes.")
    vibe: str | None = Field(default=DEFAULT_VIBE, description="Vibe preset key.")
    target_customer: str | None = Field(default="", description="Target customer preset key.")
    price_point: str | None = Field(default="", description="Price point preset key.")

    @field_validator("vibe", "target_customer", "price_point", mode="before")
    @classmethod
    def _non_string_key_is_unknown(cls, value: Any) -> str | None:
        # A preset key that is not a string simply selects the default.
        return value if isinstance(value, str) else None

    def to_params(self) -> BatchParams:
        return BatchParams(
            vibe=self.vibe or DEFAULT_VIBE,
            target_customer=self.target_customer or "",
            price_point=self.price_point or "",
            product_name=self.product_name,
            highlights=self.highlights,
        )


class GeneratePayload(BatchParamsInput):
    """The ``payload`` form field of ``POST /api/generate``."""

    combos: list[ComboInput] = Field(default_factory=list, description="Ordered combos.")


class CompileRequest(BatchParamsInput):
    """Request body for ``POST /api/prompt/compile``."""

    combo: ComboInput


class ComboSelection(_CamelModel):
    """Request body for ``POST /api/combos``."""

    shot_ids: list[str] = Field(default_factory=list)
    model_ids: list[str] = Field(default_factory=list)
