"""Finance endpoints."""

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..signing import encode_path_segment
from .base import BaseService

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
SORT_ORDERS = ("ASC", "DESC")
WITHDRAWAL_TYPES = ("WITHDRAW", "SETTLE", "TRANSFER", "REVERSE")


class FinancesService(BaseService):
    """
    Statements, payments, withdrawals and transactions.

    Paged calls require a shop cipher, default to 20 results per page and
    reject page sizes outside 1..100.
    """

    service_name = "finances"

    def _resolve_page_size(self, page_size: Optional[float]) -> int:
        if page_size is None:
            return DEFAULT_PAGE_SIZE
        if isinstance(page_size, bool) or not isinstance(page_size, (int, float)) or not math.isfinite(page_size):
            raise self._fail("FinancesService page_size must be a finite number.")
        if page_size < MIN_PAGE_SIZE or page_size > MAX_PAGE_SIZE:
            raise self._fail(f"FinancesService page_size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}.")
        return int(math.floor(page_size))

    def _normalize_sort_order(self, sort_order: str) -> str:
        upper = str(sort_order).strip().upper()
        if upper not in SORT_ORDERS:
            raise self._fail("FinancesService sort_order must be either 'ASC' or 'DESC'.")
        return upper

    def _normalize_withdrawal_types(self, types: Iterable[str]) -> List[str]:
        normalized = [text.upper() for text in (self._optional(t) for t in types) if text]
        for value in normalized:
            if value not in WITHDRAWAL_TYPES:
                raise self._fail(
                    "FinancesService get_withdrawals supports types WITHDRAW, SETTLE, TRANSFER, or REVERSE."
                )
        return normalized

    def _paged_query(
        self,
        shop_cipher: str,
        page_size: Optional[float] = None,
        page_token: Optional[str] = None,
        default_sort_field: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Dict[str, Any]:
        cipher = self._require(shop_cipher, "FinancesService operations require a non-empty shop_cipher.")
        query: Dict[str, Any] = {
            "shop_cipher": cipher,
            "page_size": self._resolve_page_size(page_size),
        }

        token = self._optional(page_token)
        if token:
            query["page_token"] = token

        field = self._optional(sort_field if sort_field is not None else default_sort_field)
        if field:
            query["sort_field"] = field

        if sort_order:
            query["sort_order"] = self._normalize_sort_order(sort_order)

        return query

    async def _get(self, path: str, query: Mapping[str, Any], headers, access_token, proxy) -> Any:
        return await self.request(
            path,
            method="GET",
            query=query,
            headers=self._json_headers(headers),
            access_token=access_token,
            proxy=proxy,
        )

    async def get_statements(
        self,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        query = self._paged_query(
            shop_cipher, page_size, page_token,
            default_sort_field="statement_time", sort_field=sort_field, sort_order=sort_order,
        )
        return await self._get("/finance/202309/statements", query, headers, access_token, proxy)

    async def get_payments(
        self,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        query = self._paged_query(
            shop_cipher, page_size, page_token, sort_field=sort_field, sort_order=sort_order,
        )
        return await self._get("/finance/202309/payments", query, headers, access_token, proxy)

    async def get_withdrawals(
        self,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        types: Optional[List[str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        query = self._paged_query(shop_cipher, page_size, page_token)
        if types:
            normalized = self._normalize_withdrawal_types(types)
            if normalized:
                query["types"] = ",".join(normalized)
        return await self._get("/finance/202309/withdrawals", query, headers, access_token, proxy)

    async def get_statement_transactions_by_order(
        self,
        order_id: str,
        shop_cipher: str,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        order = self._require(
            order_id, "FinancesService get_statement_transactions_by_order requires a non-empty order_id."
        )
        cipher = self._require(
            shop_cipher, "FinancesService get_statement_transactions_by_order requires a non-empty shop_cipher."
        )
        return await self._get(
            f"/finance/202501/orders/{encode_path_segment(order)}/statement_transactions",
            {"shop_cipher": cipher},
            headers, access_token, proxy,
        )

    async def get_statement_transactions_by_statement(
        self,
        statement_id: str,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        statement = self._require(
            statement_id,
            "FinancesService get_statement_transactions_by_statement requires a non-empty statement_id.",
        )
        query = self._paged_query(
            shop_cipher, page_size, page_token,
            default_sort_field="order_create_time", sort_field=sort_field, sort_order=sort_order,
        )
        return await self._get(
            f"/finance/202501/statements/{encode_path_segment(statement)}/statement_transactions",
            query, headers, access_token, proxy,
        )

    async def get_unsettled_transactions(
        self,
        shop_cipher: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> Any:
        query = self._paged_query(
            shop_cipher, page_size, page_token,
            default_sort_field="order_create_time", sort_field=sort_field, sort_order=sort_order,
        )
        return await self._get("/finance/202507/orders/unsettled", query, headers, access_token, proxy)
