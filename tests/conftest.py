import json

import httpx
import pytest

from tiktok_shop_adapter.config import AdapterConfig

FIXED_TIME = 1700000000


def fixed_clock():
    return FIXED_TIME + 0.75


def make_config(**overrides):
    data = {
        "credentials": {
            "app_key": "app-key",
            "app_secret": "app-secret",
            "access_token": "ROW_token",
        },
        "api": {"base_url": "https://open-api.test", "auth_base_url": "https://auth.test"},
        "shop_cipher": "ROW_cipher",
    }
    data.update(overrides)
    return AdapterConfig(**data)


class Recorder:
    """Collects the requests seen by an httpx.MockTransport."""

    def __init__(self, status_code=200, payload=None):
        self.requests = []
        self.status_code = status_code
        self.payload = payload if payload is not None else {"code": 0, "message": "Success", "data": {}}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content.decode("utf-8"))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def http_client(recorder):
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder), base_url="https://open-api.test")


@pytest.fixture
def service_kwargs(http_client):
    return {
        "app_key": "app-key",
        "app_secret": "app-secret",
        "access_token": "ROW_token",
        "client": http_client,
        "clock": fixed_clock,
    }
