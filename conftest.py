import json

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

import actions
from config import Secrets
from govee import GoveeClient
from main import app, get_client, get_secrets

TEST_API_KEY = "test-api-key"
TEST_API_URL = "https://govee.test/router/api/v1/device/control"

TOKENS = {
    "nathan": "token-nathan",
    "girlfriend": "token-girlfriend",
    "daughter": "token-daughter",
    "mom": "token-mom",
    "dad": "token-dad",
    "admin": "token-admin",
}


class FakeGovee:
    """Stands in for the Govee API; records every control request it receives."""

    def __init__(self):
        self.requests = []
        self.events = []
        self._failures = {}

    def fail(self, device, message, instance=None):
        self._failures[(device, instance)] = message

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(request)
        capability = body["payload"]["capability"]
        device = body["payload"]["device"]
        self.events.append(("call", device, capability["instance"], capability["value"]))

        message = self._failures.get((device, capability["instance"]), self._failures.get((device, None)))
        if message is not None:
            return httpx.Response(200, json={"code": 400, "message": message})
        return httpx.Response(200, json={"code": 200, "message": "success"})

    @property
    def bodies(self):
        return [json.loads(r.content) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def secrets():
    return Secrets(
        govee_api_key=TEST_API_KEY,
        govee_api_url=TEST_API_URL,
        token_nathan=TOKENS["nathan"],
        token_girlfriend=TOKENS["girlfriend"],
        token_daughter=TOKENS["daughter"],
        token_mom=TOKENS["mom"],
        token_dad=TOKENS["dad"],
        token_admin=TOKENS["admin"],
    )


@pytest.fixture
def govee():
    return FakeGovee()


@pytest.fixture
def fake_sleep(monkeypatch, govee):
    async def sleep(seconds):
        govee.events.append(("sleep", seconds))

    monkeypatch.setattr(actions, "sleep", sleep)
    return sleep


@pytest_asyncio.fixture
async def govee_client(govee):
    async with httpx.AsyncClient(transport=govee.transport()) as http:
        yield GoveeClient(http, TEST_API_KEY, TEST_API_URL)


@pytest.fixture
def client(secrets, govee, fake_sleep):
    async def override_client():
        async with httpx.AsyncClient(transport=govee.transport()) as http:
            yield GoveeClient(http, secrets.govee_api_key, secrets.govee_api_url)

    app.dependency_overrides[get_secrets] = lambda: secrets
    app.dependency_overrides[get_client] = override_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth(name):
    return {"Authorization": f"Bearer {TOKENS[name]}"}
