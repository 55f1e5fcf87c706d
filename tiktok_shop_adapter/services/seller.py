"""Seller endpoints."""

from typing import Any, Mapping, Optional

from .base import BaseService


class SellerService(BaseService):
    service_name = "seller"

    async def get_active_shops(
        self,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        """List the shops the seller has authorized, including their shop ciphers."""
        return await self.request(
            "/seller/202309/shops",
            method="GET",
            query=query,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_seller_permissions(
        self,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        return await self.request(
            "/seller/202309/permissions",
            method="GET",
            query=query,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )
