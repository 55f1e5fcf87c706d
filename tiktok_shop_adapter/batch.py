"""Operation registry and per-item batch execution for host integrations.

A host (CLI, HTTP router, workflow engine) hands over a group, an operation
and a list of parameter dicts. Each item becomes one call; failures either
abort the batch or become per-item error records.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from pydantic import BaseModel

from .client import TikTokShopClient
from .errors import ErrorKind, ServiceError, wrap_error

logger = logging.getLogger("tiktok_shop_adapter.batch")

# group -> (client attribute, operations)
OPERATIONS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "token": ("token", ("get_access_token", "refresh_access_token")),
    "seller": ("seller", ("get_active_shops", "get_seller_permissions")),
    "product": (
        "products",
        (
            "search_products",
            "get_product_detail",
            "create_product",
            "upload_product_image",
            "delete_products",
        ),
    ),
    "orders": (
        "orders",
        (
            "get_order_list",
            "get_order_detail",
            "get_price_detail",
            "add_external_order_references",
            "get_external_order_references",
            "search_order_by_external_reference",
        ),
    ),
    "finances": (
        "finances",
        (
            "get_statements",
            "get_payments",
            "get_withdrawals",
            "get_statement_transactions_by_order",
            "get_statement_transactions_by_statement",
            "get_unsettled_transactions",
        ),
    ),
    "logistics": (
        "logistics",
        (
            "list_warehouses",
            "list_global_warehouses",
            "list_warehouse_delivery_options",
            "list_shipping_providers",
        ),
    ),
    "fulfillments": (
        "fulfillments",
        ("create_packages", "ship_package", "get_package_shipping_document"),
    ),
    "pdf": ("pdf", ("resize_from_url",)),
}


def list_operations() -> Dict[str, List[str]]:
    return {group: list(operations) for group, (_, operations) in OPERATIONS.items()}


def resolve_operation(client: TikTokShopClient, group: str, operation: str) -> Callable[..., Any]:
    """Return the bound service method for ``group``/``operation``."""
    entry = OPERATIONS.get(group)
    if entry is None or operation not in entry[1]:
        raise ServiceError(
            f"Unknown operation '{group}.{operation}'.",
            kind=ErrorKind.VALIDATION,
        )
    attribute, _ = entry
    return getattr(getattr(client, attribute), operation)


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    return result


async def call_operation(
    client: TikTokShopClient,
    group: str,
    operation: str,
    params: Mapping[str, Any],
) -> Any:
    """
    Run one operation with keyword parameters.

    The configured default shop cipher is filled in when the operation takes
    one and the item does not supply it.
    """
    method = resolve_operation(client, group, operation)
    kwargs = dict(params)

    signature = inspect.signature(method)
    if "shop_cipher" in signature.parameters and not kwargs.get("shop_cipher") and client.shop_cipher:
        kwargs["shop_cipher"] = client.shop_cipher

    try:
        signature.bind(**kwargs)
    except TypeError as exc:
        raise ServiceError(
            f"Invalid parameters for '{group}.{operation}': {exc}",
            kind=ErrorKind.VALIDATION,
            service=group,
        ) from exc

    return _to_jsonable(await method(**kwargs))


def _error_record(error: ServiceError) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error.message}
    if error.status is not None:
        payload["status"] = error.status
    return payload


def _item_failed(group: str, operation: str, index: int, error: BaseException) -> ServiceError:
    failure = wrap_error(error, group)
    logger.warning(
        "batch_item_failed",
        extra={
            "group": group,
            "operation": operation,
            "item_index": index,
            "kind": failure.kind.value,
            "status": failure.status,
        },
    )
    return failure


async def execute_batch(
    client: TikTokShopClient,
    group: str,
    operation: str,
    items: Sequence[Mapping[str, Any]],
    continue_on_fail: bool = False,
) -> List[Dict[str, Any]]:
    """
    Execute an operation once per item.

    Without ``continue_on_fail`` items run one at a time and the first
    failure stops the batch, so later items never reach the API. With it,
    items run concurrently and each failure becomes an error record.
    Results keep item order as ``{"json": ..., "paired_item": index}``.

    Args:
        client: Configured TikTok Shop client
        group: Operation group (e.g. ``"orders"``)
        operation: Operation name (e.g. ``"get_order_detail"``)
        items: Keyword parameters per item
        continue_on_fail: Emit ``{"error", "status"?}`` records instead of
            raising the first error

    Returns:
        One result record per item
    """
    resolve_operation(client, group, operation)
    results: List[Dict[str, Any]] = []

    if not continue_on_fail:
        for index, item in enumerate(items):
            try:
                outcome = await call_operation(client, group, operation, item)
            except ServiceError as exc:
                _item_failed(group, operation, index, exc)
                raise
            except Exception as exc:
                raise _item_failed(group, operation, index, exc) from exc
            results.append({"json": outcome, "paired_item": index})
        return results

    outcomes = await asyncio.gather(
        *(call_operation(client, group, operation, item) for item in items),
        return_exceptions=True,
    )
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, Exception):
            failure = _item_failed(group, operation, index, outcome)
            results.append({"json": _error_record(failure), "paired_item": index})
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append({"json": outcome, "paired_item": index})
    return results
