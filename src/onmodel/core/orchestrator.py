"""Batch orchestration: run every combo of a request and collect the results.

The orchestrator validates the batch-level preconditions, opens one HTTP
session for the whole batch, and runs the :class:`JobDispatcher` once per
combo, one at a time, in input order.  The returned list always has exactly
one :class:`JobResult` per input combo at the same position, however many
individual jobs failed.

Only two failures abort a batch, and both happen before any job runs:

- :class:`~onmodel.core.errors.ConfigurationError` — no provider token.
- :class:`~onmodel.core.errors.BatchValidationError` — no combos.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import httpx

from onmodel.core.config import OnModelConfig
from onmodel.core.config import config as default_config
from onmodel.core.dispatcher import JobDispatcher
from onmodel.core.errors import BatchValidationError, ConfigurationError
from onmodel.core.models import BatchParams, Combo, JobResult, ReferenceImage
from onmodel.core.replicate import ReplicateClient

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = (
    "Missing REPLICATE_API_TOKEN. Add it to your environment to enable AI generation."
)
NO_COMBOS_MESSAGE = "No generation combos provided."


class BatchOrchestrator:
    """Run batches of generation jobs against the configured provider.

    Args:
        config: Application configuration.
        transport: Optional httpx transport, used by tests to stand in for
            the provider.
        sleep: Coroutine function used between polls.
        clock: Monotonic clock used for per-job timeouts.
        rng: Random source for seeds.
    """

    def __init__(
        self,
        config: OnModelConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sleep = sleep
        self._clock = clock
        self._rng = rng

    @property
    def config(self) -> OnModelConfig:
        return self._config

    def require_token(self) -> str:
        """Return the provider token.

        Raises:
            ConfigurationError: If no provider token is configured.
        """
        if not self._config.has_credentials:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)
        return self._config.replicate_api_token.strip()

    async def run_batch(
        self,
        combos: Sequence[Combo],
        params: BatchParams,
        reference_image: ReferenceImage,
    ) -> list[JobResult]:
        """Run one job per combo sequentially and return results in order.

        Args:
            combos: Ordered, non-empty combos to render.
            params: Batch-wide creative parameters.
            reference_image: The uploaded product photo.

        Returns:
            One result per combo, aligned by position with *combos*.

        Raises:
            ConfigurationError: If no provider token is configured.
            BatchValidationError: If *combos* is empty.
        """
        token = self.require_token()
        if not combos:
            raise BatchValidationError(NO_COMBOS_MESSAGE)

        logger.info(
            "Starting batch of %d job(s) (vibe=%s, target=%s, price=%s).",
            len(combos),
            params.vibe,
            params.target_customer,
            params.price_point,
        )
        started_at = self._clock()
        results: list[JobResult] = []

        async with httpx.AsyncClient(
            timeout=self._config.request_timeout,
            transport=self._transport,
        ) as http:
            client = ReplicateClient(http, token=token, base_url=self._config.replicate_api_url)
            dispatcher = JobDispatcher(
                client,
                self._config,
                sleep=self._sleep,
                clock=self._clock,
                rng=self._rng,
            )

            for index, combo in enumerate(combos, start=1):
                logger.info("Job %d/%d: %s.", index, len(combos), combo.id)
                # The dispatcher converts its own failures to results; this
                # boundary catches anything that slips past it.
                try:
                    result = await dispatcher.run(combo, params, reference_image)
                except Exception as e:
                    logger.exception("Job %s escaped the dispatcher", combo.id)
                    result = JobResult.failed(combo.id, str(e))
                results.append(result)

        succeeded = sum(1 for r in results if r.status == "succeeded")
        logger.info(
            "Batch finished: %d/%d succeeded in %.1fs.",
            succeeded,
            len(results),
            self._clock() - started_at,
        )
        return results


async def run_batch(
    combos: Sequence[Combo],
    params: BatchParams,
    reference_image: ReferenceImage,
    *,
    config: OnModelConfig = default_config,
) -> list[JobResult]:
    """Convenience wrapper running a batch with a fresh orchestrator."""
    return await BatchOrchestrator(config).run_batch(combos, params, reference_image)
