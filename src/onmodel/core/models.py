"""Domain data models for batch generation.

These are plain dataclasses shared by the prompt compiler, the job
dispatcher, and the batch orchestrator.  The HTTP layer has its own Pydantic
models in :mod:`onmodel.api.models` and converts to these at the boundary.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Literal

JobStatus = Literal["succeeded", "failed"]

DEFAULT_IMAGE_MIME = "image/png"


@dataclass(frozen=True)
class Combo:
    """One shot preset paired with one model preset.

    Each combo becomes exactly one generation job.  ``id`` is assigned by the
    caller and is echoed back on the matching :class:`JobResult`.
    """

    id: str
    shot_id: str
    shot_label: str
    shot_prompt: str
    aspect_ratio: str
    model_id: str
    model_label: str
    model_prompt: str
    model_notes: str = ""


@dataclass(frozen=True)
class BatchParams:
    """Creative parameters shared by every combo in a batch.

    Unknown ``vibe``, ``target_customer`` and ``price_point`` keys are not an
    error; the prompt compiler falls back to its defaults.
    """

    vibe: str = "luxury"
    target_customer: str = ""
    price_point: str = ""
    product_name: str | None = None
    highlights: str | None = None


@dataclass(frozen=True)
class ReferenceImage:
    """The uploaded product photo."""

    data: bytes
    mime_type: str = DEFAULT_IMAGE_MIME

    def to_data_uri(self) -> str:
        """Encode the image as a ``data:`` URI accepted by the provider."""
        mime = self.mime_type or DEFAULT_IMAGE_MIME
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{mime};base64,{encoded}"


@dataclass(frozen=True)
class CompiledPrompt:
    prompt: str
    negative_prompt: str


@dataclass(frozen=True)
class PromptBundle:
    """Everything derived for one job before it is submitted."""

    prompt: str
    negative_prompt: str
    width: int
    height: int
    seed: int


@dataclass
class JobResult:
    """Terminal outcome of one combo.

    A failed result always carries empty prompt fields and ``seed == 0`` so
    callers never display a prompt that was not actually rendered.
    """

    id: str
    status: JobStatus
    prompt: str = ""
    negative_prompt: str = ""
    seed: int = 0
    image_url: str | None = None
    error: str | None = None

    @classmethod
    def succeeded(cls, combo_id: str, image_url: str, bundle: PromptBundle) -> JobResult:
        return cls(
            id=combo_id,
            status="succeeded",
            image_url=image_url,
            prompt=bundle.prompt,
            negative_prompt=bundle.negative_prompt,
            seed=bundle.seed,
        )

    @classmethod
    def failed(cls, combo_id: str, message: str) -> JobResult:
        return cls(id=combo_id, status="failed", error=message or "Generation error")

    def to_dict(self) -> dict:
        """Convert to the camelCase dictionary returned to the caller."""
        data: dict = {
            "id": self.id,
            "status": self.status,
            "prompt": self.prompt,
            "negativePrompt": self.negative_prompt,
            "seed": self.seed,
        }
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.error is not None:
            data["error"] = self.error
        return data
