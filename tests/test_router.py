import httpx
import pytest
from fastapi import FastAPI

from tiktok_shop_adapter.client import TikTokShopClient
from tiktok_shop_adapter.errors import DocumentError, ErrorKind, ServiceError
from tiktok_shop_adapter.mock_client import MockTikTokShopClient
from tiktok_shop_adapter.router import error_status_code, get_tiktok_router

from conftest import fixed_clock, make_config


def make_app():
    shop = TikTokShopClient(
        make_config(),
        clock=fixed_clock,
        client=MockTikTokShopClient(),
        auth_client=MockTikTokShopClient(),
    )
    app = FastAPI()
    app.include_router(get_tiktok_router(shop))
    return app


@pytest.mark.asyncio
async def test_router_lists_operations():
    transport = httpx.ASGITransport(app=make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/tiktok/operations")
        assert response.status_code == 200
        assert "get_active_shops" in response.json()["seller"]


@pytest.mark.asyncio
async def test_router_runs_operation():
    transport = httpx.ASGITransport(app=make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/tiktok/seller/get_active_shops", json={})
        assert response.status_code == 200
        results = response.json()["results"]
        assert results[0]["json"]["data"]["shops"][0]["cipher"]


@pytest.mark.asyncio
async def test_router_maps_validation_errors_to_400():
    transport = httpx.ASGITransport(app=make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/tiktok/orders/get_order_detail", json={"items": [{"ids": []}]})
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "validation"


@pytest.mark.asyncio
async def test_router_batch_with_continue_on_fail():
    transport = httpx.ASGITransport(app=make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/tiktok/orders/get_order_detail",
            json={"items": [{"ids": ["1"]}, {"ids": []}], "continue_on_fail": True},
        )
        assert response.status_code == 200
        results = response.json()["results"]
        assert "error" in results[1]["json"]


@pytest.mark.asyncio
async def test_router_token_exchange():
    transport = httpx.ASGITransport(app=make_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/tiktok/token/access", json={"auth_code": "code-1"})
        assert response.status_code == 200
        assert response.json()["data"]["refresh_token"] == "ROW_mock_refresh_token"


def test_error_status_codes():
    assert error_status_code(ServiceError("bad")) == 400
    assert error_status_code(ServiceError("gone", kind=ErrorKind.REMOTE, status=404)) == 404
    assert error_status_code(ServiceError("down", kind=ErrorKind.TRANSPORT)) == 502
    assert error_status_code(DocumentError("bad url", "validate")) == 400
    assert error_status_code(DocumentError("404", "download", status=404)) == 502
    assert error_status_code(DocumentError("broken", "resize")) == 500
