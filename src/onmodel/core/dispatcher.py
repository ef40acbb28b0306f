"""Single-job dispatch: submit one combo to the provider and wait for it.

:class:`JobDispatcher` turns one :class:`~onmodel.core.models.Combo` into one
:class:`~onmodel.core.models.JobResult`.  It never raises: every failure
(rejected submission, malformed payload, transport error, timeout, provider
failure) ends up as a failed result carrying a human-readable message.

Job Lifecycle
-------------
Each job moves through an explicit set of states::

    SUBMITTED ──► POLLING ──► SUCCEEDED
        │            │   └──► FAILED
        │            └──────► TIMED_OUT
        └──► SUCCEEDED / FAILED   (terminal on submission, no polling)

While the provider reports ``starting`` or ``processing`` the dispatcher
checks the elapsed wall-clock time since submission, then sleeps for
``poll_interval`` seconds and fetches the prediction again.  Once more than
``generation_timeout`` seconds have passed the job is abandoned and no
further requests are made for it.  There are no retries: the first rejected
or malformed response ends the job.

Testing
-------
The clock, the sleep function, and the random source are constructor
arguments so tests can drive the poll loop with a simulated clock.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from onmodel.core.config import OnModelConfig
from onmodel.core.errors import (
    GenerationFailed,
    GenerationTimeout,
    OnModelError,
    PollingError,
    SubmissionError,
)
from onmodel.core.models import BatchParams, Combo, JobResult, PromptBundle, ReferenceImage
from onmodel.core.presets import resolve_dimensions
from onmodel.core.prompt_builder import build_prompt
from onmodel.core.replicate import InvalidPrediction, ReplicateClient, ValidPrediction, describe

logger = logging.getLogger(__name__)

MAX_SEED = 999_999_999

SUBMIT_FALLBACK_MESSAGE = "Unexpected response from Replicate when starting generation."
POLL_FALLBACK_MESSAGE = "Replicate returned an unexpected payload while polling."
TIMEOUT_MESSAGE = "Generation timed out."
UNKNOWN_FAILURE_MESSAGE = "Unknown failure."
NO_OUTPUT_MESSAGE = "Model completed without returning an image URL."


class JobState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class JobDispatcher:
    """Run one generation job end to end.

    Args:
        client: Provider client bound to an open HTTP session.
        config: Application configuration (model, inference and polling
            settings).
        sleep: Coroutine function used between polls.
        clock: Monotonic clock in seconds used for the timeout.
        rng: Random source for seeds.
    """

    def __init__(
        self,
        client: ReplicateClient,
        config: OnModelConfig,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._sleep = sleep
        self._clock = clock
        self._rng = rng or random.Random()

    # -- Public interface ---------------------------------------------------

    def prepare(self, combo: Combo, params: BatchParams) -> PromptBundle:
        """Compile the prompt and pick dimensions and a fresh seed."""
        compiled = build_prompt(combo, params)
        dims = resolve_dimensions(combo.aspect_ratio)
        return PromptBundle(
            prompt=compiled.prompt,
            negative_prompt=compiled.negative_prompt,
            width=dims.width,
            height=dims.height,
            seed=self._rng.randint(1, MAX_SEED),
        )

    def build_input(self, bundle: PromptBundle, reference_image: ReferenceImage) -> dict[str, Any]:
        """Build the provider ``input`` object for one job."""
        return {
            "prompt": bundle.prompt,
            "negative_prompt": bundle.negative_prompt,
            "image": reference_image.to_data_uri(),
            "guidance_scale": self._config.guidance_scale,
            "output_format": self._config.output_format,
            "num_inference_steps": self._config.num_inference_steps,
            "width": bundle.width,
            "height": bundle.height,
            "seed": bundle.seed,
            "num_outputs": 1,
            "apply_watermark": False,
            "disable_safety_checker": True,
        }

    async def run(
        self,
        combo: Combo,
        params: BatchParams,
        reference_image: ReferenceImage,
    ) -> JobResult:
        """Submit *combo*, wait for a terminal state, and normalise the outcome.

        Args:
            combo: The shot/model pairing to render.
            params: Batch-wide creative parameters.
            reference_image: The uploaded product photo.

        Returns:
            A succeeded result with the image URL, prompt, negative prompt and
            seed, or a failed result with an error message and empty prompt
            fields.
        """
        try:
            bundle = self.prepare(combo, params)
            prediction = await self._submit(bundle, reference_image)
            logger.info("Job %s submitted as prediction %s.", combo.id, prediction.id)
            final = await self._wait(combo.id, prediction)
            image_url = self._extract_image_url(final)
        except OnModelError as e:
            logger.warning("Job %s failed: %s", combo.id, e)
            return JobResult.failed(combo.id, str(e))
        except Exception as e:
            logger.exception("Job %s raised unexpectedly", combo.id)
            return JobResult.failed(combo.id, str(e))

        logger.info("Job %s succeeded (seed=%d).", combo.id, bundle.seed)
        return JobResult.succeeded(combo.id, image_url, bundle)

    # -- Internals ----------------------------------------------------------

    async def _submit(self, bundle: PromptBundle, reference_image: ReferenceImage) -> ValidPrediction:
        response = await self._client.create_prediction(
            self.build_input(bundle, reference_image),
            version=self._config.replicate_model_version,
            model=self._config.replicate_model,
        )
        if isinstance(response, InvalidPrediction):
            raise SubmissionError(response.message(SUBMIT_FALLBACK_MESSAGE))
        return response

    async def _wait(self, job_id: str, prediction: ValidPrediction) -> ValidPrediction:
        """Poll until *prediction* leaves the pending statuses or times out."""
        started_at = self._clock()
        state = JobState.SUBMITTED
        current = prediction

        while current.is_pending:
            if state is not JobState.POLLING:
                state = self._transition(job_id, state, JobState.POLLING)

            # Deadline is checked before each wait, measured from submission.
            if self._clock() - started_at > self._config.generation_timeout:
                self._transition(job_id, state, JobState.TIMED_OUT)
                raise GenerationTimeout(TIMEOUT_MESSAGE)

            await self._sleep(self._config.poll_interval)
            response = await self._client.get_prediction(current.id)
            if isinstance(response, InvalidPrediction):
                self._transition(job_id, state, JobState.FAILED)
                raise PollingError(response.message(POLL_FALLBACK_MESSAGE))
            current = response
            logger.debug("Job %s prediction %s is %s.", job_id, current.id, current.status)

        terminal = JobState.SUCCEEDED if current.status == "succeeded" else JobState.FAILED
        self._transition(job_id, state, terminal)
        return current

    @staticmethod
    def _transition(job_id: str, old: JobState, new: JobState) -> JobState:
        logger.debug("Job %s: %s -> %s", job_id, old.value, new.value)
        return new

    @staticmethod
    def _extract_image_url(prediction: ValidPrediction) -> str:
        if prediction.status != "succeeded":
            if prediction.error:
                raise GenerationFailed(describe(prediction.error))
            raise GenerationFailed(UNKNOWN_FAILURE_MESSAGE)

        # Only the first string entry counts; an empty one is not a URL.
        urls = prediction.output_urls()
        if not urls or not urls[0]:
            raise GenerationFailed(NO_OUTPUT_MESSAGE)
        return urls[0]
