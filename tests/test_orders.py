import pytest

from tiktok_shop_adapter.errors import ErrorKind, ServiceError
from tiktok_shop_adapter.services import OrdersService


@pytest.mark.asyncio
async def test_get_order_list(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)

    await service.get_order_list("ROW_cipher", page_size=20.0, body={"order_status": "AWAITING_SHIPMENT"})

    request = recorder.last
    assert request.url.path == "/order/202309/orders/search"
    assert request.url.params["page_size"] == "20"
    assert recorder.last_json() == {"order_status": "AWAITING_SHIPMENT"}


@pytest.mark.asyncio
async def test_get_order_list_ignores_non_positive_page_size(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)

    await service.get_order_list("ROW_cipher", page_size=0)

    assert "page_size" not in recorder.last.url.params
    assert recorder.last.content == b"{}"


@pytest.mark.asyncio
async def test_get_order_list_requires_cipher(service_kwargs):
    service = OrdersService(**service_kwargs)

    with pytest.raises(ServiceError) as exc_info:
        await service.get_order_list("")

    assert exc_info.value.kind == ErrorKind.VALIDATION
    assert exc_info.value.service == "orders"


@pytest.mark.asyncio
async def test_get_order_detail_accepts_fifty_ids(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)
    ids = [str(i) for i in range(50)]

    await service.get_order_detail(ids, shop_cipher="ROW_cipher")

    assert recorder.last.url.path == "/order/202507/orders"
    assert recorder.last.url.params["ids"] == ",".join(ids)


@pytest.mark.asyncio
async def test_get_order_detail_rejects_fifty_one_ids(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)

    with pytest.raises(ServiceError):
        await service.get_order_detail([str(i) for i in range(51)])

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_get_price_detail(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)

    await service.get_price_detail("576", shop_cipher="ROW_cipher")

    assert recorder.last.url.path == "/order/202407/orders/576/price_detail"


@pytest.mark.asyncio
async def test_add_external_order_references_accepts_one_hundred(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)
    references = [{"order_id": str(i), "external_order": {"id": f"ext-{i}"}} for i in range(100)]

    await service.add_external_order_references("ROW_cipher", references, platform="SHOPIFY")

    assert recorder.last.url.path == "/order/202406/orders/external_orders"
    assert recorder.last.url.params["platform"] == "SHOPIFY"
    assert recorder.last_json() == references


@pytest.mark.asyncio
async def test_add_external_order_references_rejects_one_hundred_one(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)

    with pytest.raises(ServiceError):
        await service.add_external_order_references("ROW_cipher", [{"order_id": str(i)} for i in range(101)])

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_add_external_order_references_rejects_non_objects(service_kwargs):
    service = OrdersService(**service_kwargs)

    with pytest.raises(ServiceError) as exc_info:
        await service.add_external_order_references("ROW_cipher", [{"order_id": "1"}, "oops"])

    assert "index 1" in exc_info.value.message


@pytest.mark.asyncio
async def test_external_reference_lookups(service_kwargs, recorder):
    service = OrdersService(**service_kwargs)

    await service.get_external_order_references("576", platform="SHOPIFY")
    assert recorder.last.url.path == "/order/202406/orders/576/external_orders"

    await service.search_order_by_external_reference("SHOPIFY", "ext-1")
    assert recorder.last.url.path == "/order/202406/orders/external_order_search"
    assert recorder.last.url.params["external_order_id"] == "ext-1"
