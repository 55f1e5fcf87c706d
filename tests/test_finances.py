import pytest

from tiktok_shop_adapter.errors import ServiceError
from tiktok_shop_adapter.services import FinancesService


@pytest.mark.asyncio
async def test_get_statements_defaults(service_kwargs, recorder):
    service = FinancesService(**service_kwargs)

    await service.get_statements("ROW_cipher")

    params = recorder.last.url.params
    assert recorder.last.url.path == "/finance/202309/statements"
    assert params["page_size"] == "20"
    assert params["sort_field"] == "statement_time"
    assert "sort_order" not in params


@pytest.mark.asyncio
async def test_sort_order_is_upper_cased(service_kwargs, recorder):
    service = FinancesService(**service_kwargs)

    await service.get_payments("ROW_cipher", page_size=50, sort_order="desc")

    assert recorder.last.url.path == "/finance/202309/payments"
    assert recorder.last.url.params["sort_order"] == "DESC"
    assert recorder.last.url.params["page_size"] == "50"


@pytest.mark.asyncio
@pytest.mark.parametrize("page_size", [0, 101, float("inf")])
async def test_page_size_out_of_range(service_kwargs, page_size):
    service = FinancesService(**service_kwargs)

    with pytest.raises(ServiceError):
        await service.get_statements("ROW_cipher", page_size=page_size)


@pytest.mark.asyncio
async def test_invalid_sort_order(service_kwargs):
    service = FinancesService(**service_kwargs)

    with pytest.raises(ServiceError):
        await service.get_statements("ROW_cipher", sort_order="up")


@pytest.mark.asyncio
async def test_withdrawal_types(service_kwargs, recorder):
    service = FinancesService(**service_kwargs)

    await service.get_withdrawals("ROW_cipher", types=["withdraw", "settle"])

    assert recorder.last.url.path == "/finance/202309/withdrawals"
    assert recorder.last.url.params["types"] == "WITHDRAW,SETTLE"

    with pytest.raises(ServiceError):
        await service.get_withdrawals("ROW_cipher", types=["REFUND"])


@pytest.mark.asyncio
async def test_statement_transactions(service_kwargs, recorder):
    service = FinancesService(**service_kwargs)

    await service.get_statement_transactions_by_order("576", "ROW_cipher")
    assert recorder.last.url.path == "/finance/202501/orders/576/statement_transactions"

    await service.get_statement_transactions_by_statement("st-1", "ROW_cipher")
    assert recorder.last.url.path == "/finance/202501/statements/st-1/statement_transactions"
    assert recorder.last.url.params["sort_field"] == "order_create_time"

    await service.get_unsettled_transactions("ROW_cipher", page_size=5)
    assert recorder.last.url.path == "/finance/202507/orders/unsettled"


@pytest.mark.asyncio
async def test_paged_calls_require_cipher(service_kwargs):
    service = FinancesService(**service_kwargs)

    with pytest.raises(ServiceError) as exc_info:
        await service.get_unsettled_transactions(" ")

    assert exc_info.value.service == "finances"
