"""Shared pytest fixtures for On-Model Studio tests.

Provider traffic never leaves the process: :class:`FakeProvider` scripts the
predictions API behind an ``httpx.MockTransport``, and :class:`FakeClock`
replaces both the monotonic clock and ``asyncio.sleep`` so poll loops run
instantly against simulated time.
"""

from __future__ import annotations

import asyncio
import io
from collections.abc import Generator

import httpx
import pytest
from PIL import Image

from onmodel.core.config import OnModelConfig
from onmodel.core.dispatcher import JobDispatcher
from onmodel.core.models import BatchParams, Combo, ReferenceImage
from onmodel.core.orchestrator import BatchOrchestrator
from onmodel.core.replicate import ReplicateClient

API_URL = "https://provider.test/v1"


def prediction(prediction_id: str, status: str, output=None, error=None) -> dict:
    """Build a prediction payload as the provider would return it."""
    payload: dict = {"id": prediction_id, "status": status}
    if output is not None:
        payload["output"] = output
    if error is not None:
        payload["error"] = error
    return payload


class FakeProvider:
    """Scripted stand-in for the predictions API.

    Submissions are answered in FIFO order from :meth:`queue_submission`.
    Polls for a prediction id are answered from :meth:`queue_polls`; once a
    queue is exhausted the optional repeating response set with
    :meth:`repeat_poll` is used.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._submissions: list[httpx.Response] = []
        self._polls: dict[str, list[httpx.Response]] = {}
        self._repeat: dict[str, dict] = {}

    # -- Scripting ----------------------------------------------------------

    def queue_submission(self, payload=None, *, status_code: int = 201, text: str | None = None):
        if text is not None:
            self._submissions.append(httpx.Response(status_code, text=text))
        else:
            self._submissions.append(httpx.Response(status_code, json=payload))

    def queue_polls(self, prediction_id: str, *payloads: dict) -> None:
        queue = self._polls.setdefault(prediction_id, [])
        queue.extend(httpx.Response(200, json=p) for p in payloads)

    def queue_poll_response(self, prediction_id: str, response: httpx.Response) -> None:
        self._polls.setdefault(prediction_id, []).append(response)

    def repeat_poll(self, prediction_id: str, payload: dict) -> None:
        self._repeat[prediction_id] = payload

    # -- Inspection ---------------------------------------------------------

    @property
    def submissions(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    @property
    def polls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    # -- Transport ----------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if not self._submissions:
                return httpx.Response(500, text="no scripted submission")
            return self._submissions.pop(0)

        prediction_id = request.url.path.rsplit("/", 1)[-1]
        queue = self._polls.get(prediction_id)
        if queue:
            return queue.pop(0)
        if prediction_id in self._repeat:
            return httpx.Response(200, json=self._repeat[prediction_id])
        return httpx.Response(404, text="no scripted poll")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeClock:
    """Simulated monotonic clock whose ``sleep`` advances time instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def test_config(monkeypatch) -> OnModelConfig:
    """Configuration pointing at the fake provider with a test token."""
    for name in ("REPLICATE_API_TOKEN", "REPLICATE_MODEL", "REPLICATE_MODEL_VERSION"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"ONMODEL_{name}", raising=False)
    return OnModelConfig(
        _env_file=None,
        replicate_api_token="test-token",
        replicate_model="acme/fashion-gen",
        replicate_model_version="v123",
        replicate_api_url=API_URL,
        poll_interval=2.5,
        generation_timeout=120.0,
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny but valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def reference_image(png_bytes: bytes) -> ReferenceImage:
    return ReferenceImage(data=png_bytes, mime_type="image/png")


@pytest.fixture
def batch_params() -> BatchParams:
    return BatchParams(
        vibe="street",
        target_customer="genz-trend",
        price_point="premium",
        product_name="Silk Wrap Dress",
        highlights="mulberry silk, hand-rolled hems",
    )


def make_combo(combo_id: str = "editorial-front-hero-1", aspect_ratio: str = "3:4") -> Combo:
    return Combo(
        id=combo_id,
        shot_id="front-hero",
        shot_label="Front Hero",
        shot_prompt="front-facing full body hero shot",
        aspect_ratio=aspect_ratio,
        model_id="editorial",
        model_label="Editorial Muse",
        model_prompt="tall editorial runway model",
        model_notes="Runway-ready aesthetic for high-fashion positioning.",
    )


@pytest.fixture
def combo() -> Combo:
    return make_combo()


@pytest.fixture
def run_job(test_config, fake_provider, fake_clock, batch_params, reference_image):
    """Run one combo through a JobDispatcher wired to the fake provider."""

    def _run(combo: Combo, config: OnModelConfig | None = None):
        cfg = config or test_config

        async def go():
            async with httpx.AsyncClient(transport=fake_provider.transport) as http:
                client = ReplicateClient(http, token="test-token", base_url=cfg.replicate_api_url)
                dispatcher = JobDispatcher(client, cfg, sleep=fake_clock.sleep, clock=fake_clock)
                return await dispatcher.run(combo, batch_params, reference_image)

        return asyncio.run(go())

    return _run


@pytest.fixture
def orchestrator(test_config, fake_provider, fake_clock) -> BatchOrchestrator:
    return BatchOrchestrator(
        test_config,
        transport=fake_provider.transport,
        sleep=fake_clock.sleep,
        clock=fake_clock,
    )


@pytest.fixture
def test_client(orchestrator) -> Generator:
    """FastAPI TestClient whose orchestrator talks to the fake provider."""
    from fastapi.testclient import TestClient

    from onmodel.api.main import app

    with TestClient(app) as client:
        # Replace the orchestrator created by the lifespan handler.
        app.state.orchestrator = orchestrator
        yield client
