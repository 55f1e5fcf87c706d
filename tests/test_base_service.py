import pytest

from tiktok_shop_adapter.errors import ErrorKind, ServiceError
from tiktok_shop_adapter.services import SellerService
from tiktok_shop_adapter.services.base import ACCESS_TOKEN_HEADER
from tiktok_shop_adapter.signing import sign

from conftest import FIXED_TIME


@pytest.mark.asyncio
async def test_request_is_signed_with_fixed_clock(service_kwargs, recorder):
    service = SellerService(**service_kwargs)

    await service.get_active_shops()

    params = dict(recorder.last.url.params)
    expected = sign("/seller/202309/shops", None, None, app_key="app-key", app_secret="app-secret", timestamp=FIXED_TIME)
    assert params["app_key"] == "app-key"
    assert params["timestamp"] == str(FIXED_TIME)
    assert params["sign"] == expected.signature
    assert recorder.last.headers[ACCESS_TOKEN_HEADER] == "ROW_token"


@pytest.mark.asyncio
async def test_per_call_access_token_overrides_default(service_kwargs, recorder):
    service = SellerService(**service_kwargs)

    await service.get_seller_permissions(access_token="ROW_other")

    assert recorder.last.url.path == "/seller/202309/permissions"
    assert recorder.last.headers[ACCESS_TOKEN_HEADER] == "ROW_other"


@pytest.mark.asyncio
async def test_legacy_request_sends_unsigned_access_token(service_kwargs, recorder):
    service = SellerService(**service_kwargs)

    await service.request_legacy("/api/orders/search", shop_id="123", query={"page_size": 5})

    params = dict(recorder.last.url.params)
    assert params["shop_id"] == "123"
    assert params["version"] == "202212"
    assert params["access_token"] == "ROW_token"
    expected = sign(
        "/api/orders/search",
        {"page_size": 5, "shop_id": "123", "version": "202212"},
        None,
        app_key="app-key",
        app_secret="app-secret",
        timestamp=FIXED_TIME,
    )
    assert params["sign"] == expected.signature


@pytest.mark.asyncio
async def test_legacy_request_requires_shop_id(service_kwargs):
    service = SellerService(**service_kwargs)

    with pytest.raises(ServiceError) as exc_info:
        await service.request_legacy("/api/orders/search", shop_id=" ")

    assert exc_info.value.kind == ErrorKind.VALIDATION


@pytest.mark.asyncio
async def test_remote_errors_are_tagged_with_service(service_kwargs, recorder):
    recorder.status_code = 404
    recorder.payload = {"message": "Not found"}
    service = SellerService(**service_kwargs)

    with pytest.raises(ServiceError) as exc_info:
        await service.get_active_shops()

    error = exc_info.value
    assert error.kind == ErrorKind.REMOTE
    assert error.status == 404
    assert error.service == "seller"
    assert error.to_dict()["data"] == {"message": "Not found"}


def test_blank_credentials_are_rejected():
    with pytest.raises(ServiceError) as exc_info:
        SellerService(app_key="", app_secret="secret")
    assert exc_info.value.kind == ErrorKind.VALIDATION
