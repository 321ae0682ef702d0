"""Pytest configuration and shared fixtures."""
import os
from typing import Callable, Iterable, List, Union

import httpx
import pytest

# Set test environment variables BEFORE any package imports
os.environ.setdefault("API_KEY", "test-api-key")
os.environ["PHI_HASH_SALT"] = "test-salt"

from patient_risk.config.settings import PatientApiSettings
from patient_risk.services.integrations.http_client import ResilientHttpClient
from patient_risk.services.integrations.patients_api import PatientsApiClient

TEST_BASE_URL = "https://api.test.local/api"

Reply = Union[httpx.Response, Exception]


class RecordingSleep:
    """Stand-in for time.sleep that records requested waits (seconds)."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def calls_ms(self) -> List[float]:
        return [round(s * 1000, 3) for s in self.calls]


class ScriptedTransport:
    """
    httpx transport replaying a fixed sequence of replies.

    Each reply is either an httpx.Response or an exception to raise.
    Every request is recorded for later assertions.
    """

    def __init__(self, replies: Iterable[Reply]):
        self.replies = list(replies)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def settings() -> PatientApiSettings:
    """Settings pointing at a fake base URL with default paging and retry values."""
    return PatientApiSettings(api_key="test-api-key", base_url=TEST_BASE_URL)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_http(settings, sleeper) -> Callable[..., ResilientHttpClient]:
    """Factory for a ResilientHttpClient backed by a handler function or ScriptedTransport."""
    clients = []

    def _make(handler, client_settings: PatientApiSettings = None) -> ResilientHttpClient:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return ResilientHttpClient(client_settings or settings, client=client, sleep=sleeper)

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def make_api(settings, sleeper, make_http) -> Callable[..., PatientsApiClient]:
    """Factory for a PatientsApiClient whose HTTP traffic goes to `handler`."""

    def _make(handler, client_settings: PatientApiSettings = None) -> PatientsApiClient:
        api_settings = client_settings or settings
        return PatientsApiClient(
            api_settings,
            http=make_http(handler, api_settings),
            sleep=sleeper,
        )

    return _make
