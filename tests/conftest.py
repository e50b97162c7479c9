"""Shared test fixtures."""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from pkgquality.models.schemas import MetricName, MetricResult

Route = Any  # JSON body, httpx.Response, or callable(request) -> either


def mock_client(routes: dict[str, Route]) -> httpx.AsyncClient:
    """An AsyncClient answering from `routes` keyed by URL path; anything else is 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


class StubScorer:
    """Scorer returning a fixed score, recording every call in `calls`."""

    def __init__(
        self,
        name: MetricName,
        score: float,
        calls: list | None = None,
        error: Exception | None = None,
        latency: float = 0.0,
    ) -> None:
        self.name = name
        self.score = score
        self.calls = calls if calls is not None else []
        self.error = error
        self.latency = latency

    async def evaluate(self, repo_url: str) -> MetricResult:
        self.calls.append((self.name, repo_url))
        if self.error is not None:
            raise self.error
        return MetricResult(score=self.score, latency=self.latency)


DEFAULT_SCORES = {
    MetricName.BUS_FACTOR: 0.8,
    MetricName.RESPONSIVE_MAINTAINER: 0.6,
    MetricName.RAMP_UP: 1.0,
    MetricName.CORRECTNESS: 0.4,
    MetricName.LICENSE: 0.9,
}


@pytest.fixture
def scorer_calls() -> list:
    return []


@pytest.fixture
def stub_factory(scorer_calls: list) -> Callable:
    """Scorer factory producing StubScorers with DEFAULT_SCORES."""

    def factory(github: Any) -> list[StubScorer]:
        return [StubScorer(name, score, scorer_calls) for name, score in DEFAULT_SCORES.items()]

    return factory


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging so handlers do not leak between tests."""
    logger = logging.getLogger("pkgquality")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
