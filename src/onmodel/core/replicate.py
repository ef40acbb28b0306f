"""Async client for a Replicate-compatible predictions API.

The provider exposes two calls that matter to us:

- ``POST /predictions`` (or ``POST /models/{owner}/{name}/predictions`` when
  no version is pinned) creates a prediction and returns its initial state.
- ``GET /predictions/{id}`` returns the current state of a prediction.

Both return a JSON object shaped like ``{id, status, output?, error?}`` on
success.  Error payloads look like ``{detail?, error?}`` instead, and a 2xx
response can still carry one.  Rather than probing fields throughout the
dispatcher, every payload passes through :func:`parse_prediction` exactly
once and comes out as one of two variants:

- :class:`ValidPrediction` — ``id`` and ``status`` are both strings.
- :class:`InvalidPrediction` — anything else, keeping whatever ``detail`` or
  ``error`` text the provider supplied.

Non-2xx responses and transport failures are raised as
:class:`~onmodel.core.errors.SubmissionError` or
:class:`~onmodel.core.errors.PollingError`; they never come back as data.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Union

import httpx

from onmodel.core.errors import PollingError, SubmissionError

logger = logging.getLogger(__name__)

PENDING_STATUSES = frozenset({"starting", "processing"})
TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})


def describe(value: Any) -> str:
    """Render provider-supplied error text for display."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


@dataclass(frozen=True)
class ValidPrediction:
    """A structurally valid prediction payload."""

    id: str
    status: str
    output: Any = None
    error: Any = None

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    def output_urls(self) -> list[str]:
        """Return the string entries of ``output``, in order.

        ``output`` may be a list, a single value, or absent depending on the
        model; it is normalised to a list before non-string entries are
        discarded.
        """
        if isinstance(self.output, list):
            outputs = self.output
        elif self.output:
            outputs = [self.output]
        else:
            outputs = []
        return [item for item in outputs if isinstance(item, str)]


@dataclass(frozen=True)
class InvalidPrediction:
    """A payload lacking a string ``id`` and ``status``."""

    detail: Any = None
    error: Any = None

    def message(self, fallback: str) -> str:
        """Prefer the provider's ``error``, then ``detail``, then *fallback*."""
        if self.error:
            return describe(self.error)
        if self.detail:
            return describe(self.detail)
        return fallback


PredictionResponse = Union[ValidPrediction, InvalidPrediction]


def parse_prediction(payload: Any) -> PredictionResponse:
    """Classify a decoded JSON payload as a valid or invalid prediction."""
    if not isinstance(payload, dict):
        return InvalidPrediction()
    if isinstance(payload.get("id"), str) and isinstance(payload.get("status"), str):
        return ValidPrediction(
            id=payload["id"],
            status=payload["status"],
            output=payload.get("output"),
            error=payload.get("error"),
        )
    return InvalidPrediction(detail=payload.get("detail"), error=payload.get("error"))


def _decode(response: httpx.Response) -> PredictionResponse:
    try:
        payload = response.json()
    except ValueError:
        return InvalidPrediction()
    return parse_prediction(payload)


class ReplicateClient:
    """Thin async wrapper around the predictions endpoints.

    The underlying :class:`httpx.AsyncClient` is owned by the caller so that
    one connection pool can serve a whole batch.

    Args:
        http: Open async HTTP client.
        token: Bearer token for the API.
        base_url: API root, e.g. ``"https://api.replicate.com/v1"``.
    """

    def __init__(self, http: httpx.AsyncClient, token: str, base_url: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"}

    async def create_prediction(
        self,
        model_input: dict[str, Any],
        *,
        version: str | None = None,
        model: str | None = None,
    ) -> PredictionResponse:
        """Create a prediction for a pinned *version* or a named *model*.

        Raises:
            SubmissionError: On transport failure or a non-2xx response.
        """
        if version:
            url = f"{self._base_url}/predictions"
            body: dict[str, Any] = {"version": version, "input": model_input}
        else:
            url = f"{self._base_url}/models/{model}/predictions"
            body = {"input": model_input}

        try:
            response = await self._http.post(url, headers=self._headers, json=body)
        except httpx.HTTPError as exc:
            raise SubmissionError(f"Replicate request failed: {exc}") from exc

        if not response.is_success:
            raise SubmissionError(
                f"Replicate request failed ({response.status_code}): {response.text}"
            )
        return _decode(response)

    async def get_prediction(self, prediction_id: str) -> PredictionResponse:
        """Fetch the current state of a prediction.

        Raises:
            PollingError: On transport failure or a non-2xx response.
        """
        url = f"{self._base_url}/predictions/{prediction_id}"
        try:
            response = await self._http.get(url, headers=self._headers)
        except httpx.HTTPError as exc:
            raise PollingError(f"Polling failed: {exc}") from exc

        if not response.is_success:
            raise PollingError(f"Polling failed ({response.status_code}): {response.text}")
        return _decode(response)
