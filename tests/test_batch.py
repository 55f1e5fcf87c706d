import pytest

from tiktok_shop_adapter.batch import call_operation, execute_batch, list_operations
from tiktok_shop_adapter.client import TikTokShopClient
from tiktok_shop_adapter.errors import ErrorKind, ServiceError
from tiktok_shop_adapter.mock_client import MockTikTokShopClient

from conftest import fixed_clock, make_config


def make_client():
    return TikTokShopClient(
        make_config(),
        clock=fixed_clock,
        client=MockTikTokShopClient(),
        auth_client=MockTikTokShopClient(),
    )


def test_list_operations_covers_every_group():
    operations = list_operations()
    assert set(operations) == {"token", "seller", "product", "orders", "finances", "logistics", "fulfillments", "pdf"}
    assert "get_order_detail" in operations["orders"]


@pytest.mark.asyncio
async def test_default_shop_cipher_is_filled_in():
    shop = make_client()

    await call_operation(shop, "finances", "get_statements", {})

    method, path, kwargs = shop.dispatcher.client.calls[-1]
    assert path == "/finance/202309/statements"
    assert kwargs["params"]["shop_cipher"] == "ROW_cipher"
    await shop.close()


@pytest.mark.asyncio
async def test_batch_pairs_results_with_items():
    shop = make_client()

    results = await execute_batch(
        shop, "orders", "get_order_detail", [{"ids": ["1"]}, {"ids": ["2", "3"]}]
    )

    assert [r["paired_item"] for r in results] == [0, 1]
    assert results[0]["json"]["code"] == 0
    await shop.close()


@pytest.mark.asyncio
async def test_batch_continue_on_fail_records_errors():
    shop = make_client()

    results = await execute_batch(
        shop,
        "orders",
        "get_order_detail",
        [{"ids": ["1"]}, {"ids": []}],
        continue_on_fail=True,
    )

    assert results[0]["json"]["code"] == 0
    assert "error" in results[1]["json"]
    assert results[1]["paired_item"] == 1
    await shop.close()


@pytest.mark.asyncio
async def test_batch_raises_without_continue_on_fail():
    shop = make_client()

    with pytest.raises(ServiceError) as exc_info:
        await execute_batch(shop, "orders", "get_order_detail", [{"ids": []}])

    assert exc_info.value.service == "orders"
    await shop.close()


@pytest.mark.asyncio
async def test_unknown_operation_and_bad_parameters():
    shop = make_client()

    with pytest.raises(ServiceError) as exc_info:
        await call_operation(shop, "orders", "cancel_everything", {})
    assert exc_info.value.kind == ErrorKind.VALIDATION

    with pytest.raises(ServiceError) as exc_info:
        await call_operation(shop, "orders", "get_order_detail", {"ids": ["1"], "colour": "red"})
    assert exc_info.value.kind == ErrorKind.VALIDATION
    await shop.close()


@pytest.mark.asyncio
async def test_token_operation_uses_auth_client():
    shop = make_client()

    result = await shop.get_access_token("code-1")

    assert result["data"]["access_token"] == "ROW_mock_access_token"
    method, path, kwargs = shop.auth_dispatcher.client.calls[-1]
    assert path == "/api/v2/token/get"
    assert "sign" not in kwargs["params"]
    await shop.close()


@pytest.mark.asyncio
async def test_batch_stops_at_first_failure_without_sending_later_items():
    shop = make_client()
    mock = shop.dispatcher.client

    with pytest.raises(ServiceError):
        await execute_batch(
            shop,
            "product",
            "delete_products",
            [{"product_ids": ["p0"]}, {"product_ids": []}, {"product_ids": ["p1"]}, {"product_ids": ["p2"]}],
        )

    sent = [kwargs["content"] for method, path, kwargs in mock.calls if method == "DELETE"]
    assert sent == [b'{"product_ids":["p0"]}']
    await shop.close()


@pytest.mark.asyncio
async def test_unexpected_errors_become_records_with_continue_on_fail():
    shop = make_client()

    async def broken_statements(**kwargs):
        raise RuntimeError("socket closed")

    shop.finances.get_statements = broken_statements  # type: ignore[assignment]

    results = await execute_batch(shop, "finances", "get_statements", [{}, {}], continue_on_fail=True)

    assert [r["json"] for r in results] == [{"error": "socket closed"}, {"error": "socket closed"}]
    await shop.close()


@pytest.mark.asyncio
async def test_unexpected_errors_abort_as_service_errors():
    shop = make_client()

    async def broken_statements(**kwargs):
        raise RuntimeError("socket closed")

    shop.finances.get_statements = broken_statements  # type: ignore[assignment]

    with pytest.raises(ServiceError) as exc_info:
        await execute_batch(shop, "finances", "get_statements", [{}])

    assert exc_info.value.kind == ErrorKind.TRANSPORT
    assert exc_info.value.service == "finances"
    await shop.close()
