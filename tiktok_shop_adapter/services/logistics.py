"""Logistics endpoints."""

from typing import Any, Dict, Mapping, Optional

from ..signing import encode_path_segment
from .base import BaseService


class LogisticsService(BaseService):
    """Warehouses, delivery options and shipping providers."""

    service_name = "logistics"

    async def _get(self, path: str, query, headers, access_token, proxy) -> Any:
        return await self.request(
            path,
            method="GET",
            query=query,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def list_warehouses(
        self,
        shop_cipher: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        cipher = self._require(shop_cipher, "LogisticsService list_warehouses requires a non-empty shop_cipher.")
        merged: Dict[str, Any] = {**(query or {}), "shop_cipher": cipher}
        return await self._get("/logistics/202309/warehouses", merged, headers, access_token, proxy)

    async def list_global_warehouses(
        self,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        return await self._get("/logistics/202309/global_warehouses", query, headers, access_token, proxy)

    async def list_warehouse_delivery_options(
        self,
        warehouse_id: str,
        shop_cipher: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        warehouse = self._require(
            warehouse_id, "LogisticsService list_warehouse_delivery_options requires a non-empty warehouse_id."
        )
        cipher = self._require(
            shop_cipher, "LogisticsService list_warehouse_delivery_options requires a non-empty shop_cipher."
        )
        merged: Dict[str, Any] = {**(query or {}), "shop_cipher": cipher}
        return await self._get(
            f"/logistics/202309/warehouses/{encode_path_segment(warehouse)}/delivery_options",
            merged, headers, access_token, proxy,
        )

    async def list_shipping_providers(
        self,
        delivery_option_id: str,
        shop_cipher: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        delivery_option = self._require(
            delivery_option_id,
            "LogisticsService list_shipping_providers requires a non-empty delivery_option_id.",
        )
        cipher = self._require(
            shop_cipher, "LogisticsService list_shipping_providers requires a non-empty shop_cipher."
        )
        merged: Dict[str, Any] = {**(query or {}), "shop_cipher": cipher}
        return await self._get(
            f"/logistics/202309/delivery_options/{encode_path_segment(delivery_option)}/shipping_providers",
            merged, headers, access_token, proxy,
        )
