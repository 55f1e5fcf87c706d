"""Product endpoints."""

import math
import secrets
from typing import Any, Dict, List, Mapping, Optional

from ..models.request_models import MultipartBody
from ..signing import encode_path_segment
from .base import BaseService

MAX_DELETE_PRODUCT_IDS = 20


class ProductService(BaseService):
    """Search, read, create, delete products and upload product images."""

    service_name = "product"

    async def search_products(
        self,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        cipher = self._require(shop_cipher, "ProductService search_products requires a non-empty shop_cipher.")
        query: Dict[str, Any] = {"shop_cipher": cipher}

        if isinstance(page_size, (int, float)) and not isinstance(page_size, bool) and math.isfinite(page_size):
            query["page_size"] = page_size

        token = self._optional(page_token)
        if token:
            query["page_token"] = token

        return await self.request(
            "/product/202502/products/search",
            method="POST",
            query=query,
            body=body if body is not None else {},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_product_detail(
        self,
        product_id: str,
        shop_cipher: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        product = self._require(product_id, "ProductService get_product_detail requires a non-empty product_id.")
        query: Dict[str, Any] = {"shop_cipher": self._optional(shop_cipher)}

        return await self.request(
            f"/product/202309/products/{encode_path_segment(product)}",
            method="GET",
            query=query,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def create_product(
        self,
        shop_cipher: str,
        body: Dict[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        cipher = self._require(shop_cipher, "ProductService create_product requires a non-empty shop_cipher.")
        if not isinstance(body, dict) or not body:
            raise self._fail("ProductService create_product requires a non-empty body payload.")

        return await self.request(
            "/product/202309/products",
            method="POST",
            query={"shop_cipher": cipher},
            body=body,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def upload_product_image(
        self,
        file_bytes: bytes,
        use_case: str,
        file_name: str = "image",
        mime_type: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        """
        Upload an image as multipart/form-data.

        The upload is signed without its body. The boundary is fixed up front
        so the Content-Type header seen by the signer matches the wire.
        """
        if not isinstance(file_bytes, (bytes, bytearray)) or not file_bytes:
            raise self._fail("ProductService upload_product_image requires a non-empty image buffer.")
        case = self._require(use_case, "ProductService upload_product_image requires a non-empty use_case value.")

        boundary = secrets.token_hex(16)
        form = MultipartBody(
            fields={"use_case": case},
            files={"data": (file_name or "image", bytes(file_bytes), mime_type)},
        )

        return await self.request(
            "/product/202309/images/upload",
            method="POST",
            body=form,
            headers={"Content-Type": f"multipart/form-data; boundary={boundary}", **(headers or {})},
            access_token=access_token,
            proxy=proxy,
        )

    async def delete_products(
        self,
        shop_cipher: str,
        product_ids: List[str],
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        cipher = self._require(shop_cipher, "ProductService delete_products requires a non-empty shop_cipher.")

        if not isinstance(product_ids, (list, tuple)) or not product_ids:
            raise self._fail("ProductService delete_products requires at least one product ID.")
        if len(product_ids) > MAX_DELETE_PRODUCT_IDS:
            raise self._fail(
                f"ProductService delete_products supports a maximum of {MAX_DELETE_PRODUCT_IDS} product IDs per request."
            )

        ids = self._clean_ids(product_ids)
        if not ids:
            raise self._fail("ProductService delete_products requires at least one non-empty product ID.")

        return await self.request(
            "/product/202309/products",
            method="DELETE",
            query={"shop_cipher": cipher},
            body={"product_ids": ids},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )
