"""Core generation orchestration for On-Model Studio.

This package turns one uploaded product photo plus a set of creative choices
into a batch of on-model fashion images rendered by an external prediction
API.

Architecture Overview
---------------------
The core is layered leaves-first:

1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - ONMODEL_* variables, plus the bare REPLICATE_* names

2. **Preset Layer** (presets.py, combos.py):
   - Immutable shot, model, vibe, customer and price libraries
   - Aspect ratio → pixel dimension table
   - Shot × model expansion into combos

3. **Prompt Layer** (prompt_builder.py):
   - Pure prompt / negative prompt compilation per combo

4. **Dispatch Layer** (replicate.py, dispatcher.py):
   - Async provider client and prediction payload validation
   - Submit + poll state machine with a per-job timeout

5. **Orchestration Layer** (orchestrator.py):
   - Sequential batch execution with per-job error isolation

Usage Example
-------------
::

    import asyncio

    from onmodel.core import BatchOrchestrator, BatchParams, ReferenceImage, build_combos, config

    combos = build_combos(["front-hero", "detail"], ["editorial"])
    image = ReferenceImage(data=open("dress.png", "rb").read(), mime_type="image/png")
    results = asyncio.run(
        BatchOrchestrator(config).run_batch(combos, BatchParams(vibe="street"), image)
    )

See Also
--------
- :mod:`onmodel.api.main` — the HTTP front end for batches
"""

from onmodel.core.combos import build_combos
from onmodel.core.config import OnModelConfig, config
from onmodel.core.dispatcher import JobDispatcher
from onmodel.core.models import BatchParams, Combo, JobResult, ReferenceImage
from onmodel.core.orchestrator import BatchOrchestrator, run_batch
from onmodel.core.prompt_builder import build_prompt

__all__ = [
    "BatchOrchestrator",
    "BatchParams",
    "Combo",
    "JobDispatcher",
    "JobResult",
    "OnModelConfig",
    "ReferenceImage",
    "build_combos",
    "build_prompt",
    "config",
    "run_batch",
]
