"""On-Model Studio — FastAPI Application.

This module is the single entry point for the web service.  It defines the
FastAPI ``app`` instance, all REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
The application is stateless apart from one
:class:`~onmodel.core.orchestrator.BatchOrchestrator` stored on
``app.state`` at startup:

- **Presets** are static and served to the frontend via
  ``GET /api/presets``.
- **Generation** is a single multipart request; every combo in it is
  rendered sequentially by the external provider and the aggregated results
  are returned in the response.  Nothing is persisted.
- **Errors** that abort a whole batch (missing token, bad form data) are
  returned as ``{"error": message}``.  Per-job failures are reported inside
  ``results`` next to their successful siblings.

Endpoints
---------
========  ========================  ========================================
Method    Path                      Purpose
========  ========================  ========================================
GET       ``/api/health``           Liveness and credential status
GET       ``/api/presets``          Shots, models, vibes, targets, prices
POST      ``/api/combos``           Expand shot × model selections
POST      ``/api/prompt/compile``   Preview one combo's prompts
POST      ``/api/generate``         Run a generation batch
========  ========================  ========================================

Usage
-----
CLI (installed entry point)::

    onmodel

Direct invocation::

    python -m onmodel.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from onmodel import __version__
from onmodel.api.models import ComboInput, ComboSelection, CompileRequest
from onmodel.api.uploads import parse_generate_payload, read_reference_image
from onmodel.core.combos import build_combos
from onmodel.core.config import config
from onmodel.core.errors import BatchValidationError, ConfigurationError
from onmodel.core.orchestrator import BatchOrchestrator
from onmodel.core.presets import (
    ASPECT_DIMENSIONS,
    MODEL_PRESETS,
    PRICE_POINTS,
    SHOT_PRESETS,
    TARGET_PROFILES,
    VIBE_PRESETS,
    resolve_dimensions,
)
from onmodel.core.prompt_builder import build_prompt

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the batch orchestrator on startup.

    A missing provider token is only logged here: the service still serves
    presets and previews, and ``/api/generate`` reports the problem per
    request.
    """
    app.state.orchestrator = BatchOrchestrator(config)
    if config.has_credentials:
        logger.info("BatchOrchestrator ready (model=%s).", config.replicate_model)
    else:
        logger.warning("No Replicate API token configured; generation requests will fail.")

    yield


app = FastAPI(
    title="On-Model Studio",
    description="AI on-model fashion imagery from a single product photo.",
    version=__version__,
    lifespan=lifespan,
)

# Allow the frontend to be served from a different port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Batch-level error responses.
# ---------------------------------------------------------------------------


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(BatchValidationError)
async def validation_error_handler(request: Request, exc: BatchValidationError) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


def _camel(record) -> dict:
    """Serialise a preset dataclass with camelCase keys."""
    return {to_camel(key): value for key, value in asdict(record).items()}


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/health")
async def health(request: Request) -> dict:
    """Return service liveness, version, and whether a token is configured."""
    orchestrator: BatchOrchestrator = request.app.state.orchestrator
    return {
        "status": "ok",
        "version": __version__,
        "credentialsConfigured": orchestrator.config.has_credentials,
    }


@app.get("/api/presets")
async def get_presets() -> dict:
    """Return every preset library for the frontend selectors.

    Returns:
        Dictionary with keys ``shots``, ``models``, ``vibes``, ``targets``,
        ``pricePoints`` (lists in display order) and ``aspectRatios``
        (mapping of ratio to ``{width, height}``).
    """
    return {
        "version": __version__,
        "shots": [_camel(p) for p in SHOT_PRESETS.values()],
        "models": [_camel(p) for p in MODEL_PRESETS.values()],
        # The negative fragment is an internal detail of prompt compilation.
        "vibes": [{"id": v.id, "label": v.label, "prompt": v.prompt} for v in VIBE_PRESETS.values()],
        "targets": [
            {"id": t.id, "label": t.label, "description": t.description}
            for t in TARGET_PROFILES.values()
        ],
        "pricePoints": [
            {"id": p.id, "label": p.label, "description": p.description}
            for p in PRICE_POINTS.values()
        ],
        "aspectRatios": {ratio: asdict(dims) for ratio, dims in ASPECT_DIMENSIONS.items()},
    }


@app.post("/api/combos")
async def expand_combos(req: ComboSelection) -> dict:
    """Expand selected shot and model presets into combos.

    Raises:
        BatchValidationError: (400) if the selection yields no combos.
    """
    combos = build_combos(req.shot_ids, req.model_ids)
    if not combos:
        raise BatchValidationError("Select at least one shot type and one model profile.")
    return {"combos": [ComboInput.from_combo(c).model_dump(by_alias=True) for c in combos]}


@app.post("/api/prompt/compile")
async def compile_prompt(req: CompileRequest) -> dict:
    """Preview the prompt, negative prompt and dimensions for one combo."""
    combo = req.combo.to_combo()
    compiled = build_prompt(combo, req.to_params())
    dims = resolve_dimensions(combo.aspect_ratio)
    return {
        "id": combo.id,
        "prompt": compiled.prompt,
        "negativePrompt": compiled.negative_prompt,
        "width": dims.width,
        "height": dims.height,
    }


@app.post("/api/generate")
async def generate(
    request: Request,
    image: UploadFile | None = File(default=None),
    payload: str | None = Form(default=None),
) -> dict:
    """Generate one on-model image per combo.

    The request is ``multipart/form-data`` with an ``image`` file and a JSON
    ``payload`` field (see :class:`~onmodel.api.models.GeneratePayload`).

    Returns:
        ``{"results": [...]}`` with one entry per combo, in request order:
        ``{id, status, imageUrl?, prompt, negativePrompt, seed, error?}``.

    Raises:
        ConfigurationError: (500) if no provider token is configured.
        BatchValidationError: (400) for a missing or unreadable image, a
            missing or malformed payload, or an empty combo list.
    """
    orchestrator: BatchOrchestrator = request.app.state.orchestrator
    orchestrator.require_token()

    data = await image.read() if image is not None else None
    reference = read_reference_image(data, image.content_type if image is not None else None)
    body = parse_generate_payload(payload)

    results = await orchestrator.run_batch(
        [c.to_combo() for c in body.combos],
        body.to_params(),
        reference,
    )
    return {"results": [r.to_dict() for r in results]}


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~onmodel.core.config.config`
    (``ONMODEL_SERVER_HOST``, ``ONMODEL_SERVER_PORT``, ``ONMODEL_LOG_LEVEL``).
    Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``onmodel`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "onmodel.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
