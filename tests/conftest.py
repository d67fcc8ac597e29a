"""
Shared fixtures: an in-memory stand-in for requests.Session so aggregator
tests can script each source's response without touching the network.
"""
import json

import pytest
import requests

from anime_pulse.anime_pulse.config import AggregatorConfig, SourceEndpoint
from anime_pulse.anime_pulse.service import ContentAggregator

NOT_JSON = object()


class FakeResponse:
    def __init__(self, payload=None, status_code=200, reason="OK"):
        self.payload = payload
        self.status_code = status_code
        self.reason = reason
        self.raw = self
        self.closed = False

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def iter_content(self, chunk_size=1):
        body = b"<html>" if self.payload is NOT_JSON else json.dumps(self.payload).encode("utf-8")
        for start in range(0, len(body), chunk_size):
            yield body[start:start + chunk_size]

    def shutdown(self):
        pass

    def close(self):
        self.closed = True


class FakeSession:
    """
    Routes GETs by exact URL. A route value may be a payload (served with
    200), a FakeResponse, or an exception instance to raise.
    """

    def __init__(self, routes):
        self.routes = routes
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None, stream=False):
        self.calls.append((url, timeout))
        if url not in self.routes:
            raise requests.ConnectionError(f"No route to {url}")
        route = self.routes[url]
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def make_sources(*names, kind="generic"):
    return [
        SourceEndpoint(
            name=name,
            kind=kind,
            search=f"http://{name}.test/search/{{query}}?page={{page}}",
            trending=f"http://{name}.test/trending?page={{page}}",
            recent=f"http://{name}.test/recent?page={{page}}&type={{kind}}",
            info=f"http://{name}.test/info/{{id}}",
            watch=f"http://{name}.test/watch/{{id}}",
        )
        for name in names
    ]


def make_aggregator(routes, sources=None, timeout_ms=15000):
    """Builds an aggregator whose sessions all share one FakeSession."""
    session = FakeSession(routes)
    config = AggregatorConfig(
        timeout_ms=timeout_ms,
        sources=sources if sources is not None else make_sources("alpha", "beta", "gamma"),
    )
    return ContentAggregator(config, session_factory=lambda: session), session


@pytest.fixture
def aggregator_factory():
    return make_aggregator
