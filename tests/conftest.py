"""Shared fixtures: fake SugarCRM/USPS transports and a controllable clock."""

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from routers.validate import get_validator
from services.sugar import SugarClient
from services.token_cache import TokenCache
from services.usps import UspsClient
from services.validator import AddressValidator

SUGAR_URL = "https://crm.example.com"
USPS_URL = "https://apis-tem.usps.com"

SUGAR_TOKEN_PATH = "/rest/v11_10/oauth2/token"
USPS_TOKEN_PATH = "/oauth2/v3/token"
USPS_STANDARDIZE_PATH = "/addresses/v3/address-standardization"


def contact_path(record_id: str) -> str:
    return f"/rest/v11_10/Contacts/{record_id}"


class FakeApi:
    """Route table for ``httpx.MockTransport`` that records every request.

    Routes map ``(method, path)`` to ``(status, json_body)`` or to a
    callable taking the request and returning an ``httpx.Response``.
    """

    def __init__(self):
        self.routes = {}
        self.calls: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json=None):
        self.routes[(method, path)] = (status, json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            raise AssertionError(f"unexpected request {request.method} {request.url}")
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def paths(self, method=None) -> list[str]:
        return [r.url.path for r in self.calls if method in (None, r.method)]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sugar_api():
    api = FakeApi()
    api.add("POST", SUGAR_TOKEN_PATH, json={"access_token": "sugar-token", "expires_in": 3600})
    return api


@pytest.fixture
def usps_api():
    api = FakeApi()
    api.add("POST", USPS_TOKEN_PATH, json={"access_token": "usps-token", "expires_in": 28800})
    return api


@pytest.fixture
def sugar_client(sugar_api, clock):
    return SugarClient(
        SUGAR_URL,
        "admin",
        "hunter2",
        cache=TokenCache(clock=clock),
        transport=sugar_api.transport,
    )


@pytest.fixture
def usps_client(usps_api):
    return UspsClient("usps-id", "usps-secret", base_url=USPS_URL, transport=usps_api.transport)


@pytest.fixture
def validator(sugar_client, usps_client):
    return AddressValidator(sugar_client, usps_client)


@pytest.fixture
def client(validator):
    app.dependency_overrides[get_validator] = lambda: validator
    yield TestClient(app)
    app.dependency_overrides.clear()
