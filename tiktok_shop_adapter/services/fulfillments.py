"""Fulfillment endpoints."""

from typing import Any, Dict, Mapping, Optional

from ..signing import encode_path_segment
from .base import BaseService

SHIPPING_DOCUMENT_TYPES = (
    "SHIPPING_LABEL",
    "PACKING_SLIP",
    "SHIPPING_LABEL_AND_PACKING_SLIP",
    "SHIPPING_LABEL_PICTURE",
    "HAZMAT_LABEL",
    "INVOICE_LABEL",
)


class FulfillmentsService(BaseService):
    """Package creation, shipping and shipping documents."""

    service_name = "fulfillments"

    def _require_body(self, body: Any, operation: str) -> Dict[str, Any]:
        if not isinstance(body, dict) or not body:
            raise self._fail(f"FulfillmentsService {operation} requires a non-empty JSON body.")
        return body

    async def create_packages(
        self,
        shop_cipher: str,
        body: Dict[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        cipher = self._require(shop_cipher, "FulfillmentsService create_packages requires a non-empty shop_cipher.")
        payload = self._require_body(body, "create_packages")

        return await self.request(
            "/fulfillment/202309/packages",
            method="POST",
            query={"shop_cipher": cipher},
            body=payload,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def ship_package(
        self,
        package_id: str,
        shop_cipher: str,
        body: Dict[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        package = self._require(package_id, "FulfillmentsService ship_package requires a non-empty package_id.")
        cipher = self._require(shop_cipher, "FulfillmentsService ship_package requires a non-empty shop_cipher.")
        payload = self._require_body(body, "ship_package")

        return await self.request(
            f"/fulfillment/202309/packages/{encode_path_segment(package)}/ship",
            method="POST",
            query={"shop_cipher": cipher},
            body=payload,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_package_shipping_document(
        self,
        package_id: str,
        shop_cipher: str,
        document_type: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        """Fetch the shipping document URL for a package."""
        package = self._require(
            package_id, "FulfillmentsService get_package_shipping_document requires a non-empty package_id."
        )
        cipher = self._require(
            shop_cipher, "FulfillmentsService get_package_shipping_document requires a non-empty shop_cipher."
        )
        if document_type and document_type not in SHIPPING_DOCUMENT_TYPES:
            raise self._fail(
                "FulfillmentsService get_package_shipping_document received unsupported "
                f"document_type '{document_type}'."
            )

        return await self.request(
            f"/fulfillment/202309/packages/{encode_path_segment(package)}/shipping_documents",
            method="GET",
            query={"shop_cipher": cipher, "document_type": document_type or None},
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )
