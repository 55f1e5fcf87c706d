"""Order endpoints."""

import math
from typing import Any, Dict, List, Mapping, Optional

from ..signing import encode_path_segment
from .base import BaseService

MAX_EXTERNAL_REFERENCES = 100
MAX_ORDER_DETAIL_IDS = 50


class OrdersService(BaseService):
    """Order search, detail, price detail and external order references."""

    service_name = "orders"

    async def get_order_list(
        self,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        cipher = self._require(shop_cipher, "OrdersService get_order_list requires a non-empty shop_cipher.")
        query: Dict[str, Any] = {"shop_cipher": cipher}

        if (
            isinstance(page_size, (int, float))
            and not isinstance(page_size, bool)
            and math.isfinite(page_size)
            and page_size > 0
        ):
            query["page_size"] = page_size

        token = self._optional(page_token)
        if token:
            query["page_token"] = token

        return await self.request(
            "/order/202309/orders/search",
            method="POST",
            query=query,
            body=body if body is not None else {},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_price_detail(
        self,
        order_id: str,
        shop_cipher: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        order = self._require(order_id, "OrdersService get_price_detail requires a non-empty order_id.")

        return await self.request(
            f"/order/202407/orders/{encode_path_segment(order)}/price_detail",
            method="GET",
            query={"shop_cipher": self._optional(shop_cipher)},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def add_external_order_references(
        self,
        shop_cipher: str,
        references: List[Dict[str, Any]],
        platform: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        """
        Link orders to external platform orders.

        The references are sent as a JSON array body (at most 100 per call).
        """
        cipher = self._require(
            shop_cipher, "OrdersService add_external_order_references requires a non-empty shop_cipher."
        )

        if not isinstance(references, (list, tuple)):
            raise self._fail(
                "OrdersService add_external_order_references requires an array of reference objects."
            )
        if not references:
            raise self._fail(
                "OrdersService add_external_order_references requires at least one external reference."
            )
        if len(references) > MAX_EXTERNAL_REFERENCES:
            raise self._fail(
                "OrdersService add_external_order_references supports a maximum of "
                f"{MAX_EXTERNAL_REFERENCES} external references per request."
            )

        for index, reference in enumerate(references):
            if not isinstance(reference, dict):
                raise self._fail(
                    "OrdersService add_external_order_references requires each reference to be an object. "
                    f"Invalid reference at index {index}."
                )

        return await self.request(
            "/order/202406/orders/external_orders",
            method="POST",
            query={"shop_cipher": cipher, "platform": self._optional(platform)},
            body=list(references),
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_external_order_references(
        self,
        order_id: str,
        shop_cipher: Optional[str] = None,
        platform: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        order = self._require(
            order_id, "OrdersService get_external_order_references requires a non-empty order_id."
        )

        return await self.request(
            f"/order/202406/orders/{encode_path_segment(order)}/external_orders",
            method="GET",
            query={"shop_cipher": self._optional(shop_cipher), "platform": self._optional(platform)},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def search_order_by_external_reference(
        self,
        platform: str,
        external_order_id: str,
        shop_cipher: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        platform_name = self._require(
            platform, "OrdersService search_order_by_external_reference requires a non-empty platform."
        )
        external_id = self._require(
            external_order_id,
            "OrdersService search_order_by_external_reference requires a non-empty external_order_id.",
        )

        return await self.request(
            "/order/202406/orders/external_order_search",
            method="POST",
            query={
                "platform": platform_name,
                "external_order_id": external_id,
                "shop_cipher": self._optional(shop_cipher),
            },
            body=body if body is not None else {},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_order_detail(
        self,
        ids: List[str],
        shop_cipher: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        if not isinstance(ids, (list, tuple)):
            raise self._fail("OrdersService get_order_detail requires an array of order IDs.")

        order_ids = self._clean_ids(ids)
        if not order_ids:
            raise self._fail("OrdersService get_order_detail requires at least one non-empty order ID.")
        if len(order_ids) > MAX_ORDER_DETAIL_IDS:
            raise self._fail(
                f"OrdersService get_order_detail supports a maximum of {MAX_ORDER_DETAIL_IDS} order IDs per request."
            )

        return await self.request(
            "/order/202507/orders",
            method="GET",
            query={"ids": ",".join(order_ids), "shop_cipher": self._optional(shop_cipher)},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )
