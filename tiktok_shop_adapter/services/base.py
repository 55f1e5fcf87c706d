"""Shared request pipeline for signed TikTok Shop services."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from ..config import OPEN_API_BASE_URL
from ..dispatcher import DEFAULT_TIMEOUT_SECONDS, HttpDispatcher
from ..errors import ErrorKind, ServiceError, wrap_error
from ..models.request_models import Credentials, RequestSpec
from ..signing import Signer

logger = logging.getLogger("tiktok_shop_adapter.services")

ACCESS_TOKEN_HEADER = "x-tts-access-token"
LEGACY_API_VERSION = "202212"


class BaseService:
    """
    Signs and dispatches requests for one resource area.

    Subclasses set ``service_name``; every error leaving a public method is a
    ServiceError tagged with it.
    """

    service_name: Optional[str] = None

    def __init__(
        self,
        app_key: str,
        app_secret: str,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
        client: Optional[Any] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Optional[Callable[[], float]] = None,
        base_url: str = OPEN_API_BASE_URL,
        dispatcher: Optional[HttpDispatcher] = None,
    ):
        """
        Initialize the service.

        Args:
            app_key: TikTok Shop app key
            app_secret: TikTok Shop app secret
            access_token: Default seller access token
            proxy: Default proxy string, overridable per call
            client: Optional HTTP client (e.g., MockTikTokShopClient)
            timeout: Request timeout in seconds
            clock: Returns the current epoch in seconds; defaults to wall-clock
            base_url: API base URL
            dispatcher: Shared dispatcher; when given, ``client``, ``timeout``
                and ``base_url`` are ignored
        """
        try:
            credentials = Credentials(app_key=app_key, app_secret=app_secret)
        except ValidationError as exc:
            raise self._fail("app_key and app_secret must be non-empty strings.") from exc

        self.signer = Signer(credentials, clock=clock)
        self.default_access_token = access_token
        self.default_proxy = proxy

        if dispatcher is not None:
            self.dispatcher = dispatcher
            self._owns_dispatcher = False
        else:
            self.dispatcher = HttpDispatcher(base_url=base_url, timeout=timeout, client=client)
            self._owns_dispatcher = True

    async def close(self):
        if self._owns_dispatcher:
            await self.dispatcher.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # Validation helpers

    def _fail(self, message: str) -> ServiceError:
        return ServiceError(message, kind=ErrorKind.VALIDATION, service=self.service_name)

    def _require(self, value: Any, message: str) -> str:
        text = self._optional(value)
        if not text:
            raise self._fail(message)
        return text

    @staticmethod
    def _optional(value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def _clean_ids(values: Optional[Iterable[Any]]) -> List[str]:
        return [text for text in (BaseService._optional(v) for v in values or []) if text]

    @staticmethod
    def _json_headers(headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        return {"Content-Type": "application/json", **(headers or {})}

    def _build_headers(
        self,
        headers: Optional[Mapping[str, str]],
        access_token: Optional[str],
    ) -> Dict[str, str]:
        result = dict(headers or {})
        token = access_token if access_token is not None else self.default_access_token
        if token:
            result[ACCESS_TOKEN_HEADER] = token
        return result

    async def request(
        self,
        path: str,
        method: str = "GET",
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        proxy: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Sign and send one request.

        Args:
            path: API path; identifiers must already be percent-encoded
            method: HTTP method
            query: Query parameters (``None`` values are dropped)
            body: JSON value, raw bytes/str, or a body model
            headers: Extra headers; Content-Type controls body signing
            access_token: Overrides the default access token
            proxy: Overrides the default proxy (empty string forces direct)
            timeout: Per-call timeout override

        Returns:
            Decoded response body
        """
        try:
            spec = RequestSpec(
                path=path,
                method=method,
                query=dict(query or {}),
                body=body,
                headers=dict(headers or {}),
                access_token=access_token,
                proxy=proxy,
                timeout=timeout,
            )
        except ValidationError as exc:
            raise self._fail(f"Invalid request: {exc}") from exc

        try:
            signed = self.signer.sign(spec.path, spec.query, spec.body, spec.headers)
            return await self.dispatcher.dispatch(
                signed.path,
                method=spec.method,
                params=signed.params,
                body=spec.body,
                headers=self._build_headers(spec.headers, spec.access_token),
                proxy=spec.proxy if spec.proxy is not None else self.default_proxy,
                timeout=spec.timeout,
            )
        except ServiceError as exc:
            if self.service_name:
                exc.with_service(self.service_name)
            raise
        except Exception as exc:
            raise wrap_error(exc, self.service_name or "tiktok_shop") from exc

    async def request_legacy(
        self,
        path: str,
        shop_id: Any,
        version: Optional[str] = None,
        access_token: Optional[str] = None,
        query: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Call a legacy (pre-202309) endpoint.

        Adds ``shop_id``, ``version`` (default 202212) and, when available,
        ``access_token`` to the query. The token is sent but never signed.
        """
        shop_id_text = self._require(shop_id, "Legacy requests require a non-empty shop_id value.")
        token = access_token if access_token is not None else self.default_access_token

        merged: Dict[str, Any] = {
            **(query or {}),
            "shop_id": shop_id_text,
            "version": version or LEGACY_API_VERSION,
        }
        if token:
            merged["access_token"] = token

        return await self.request(path, query=merged, access_token=token, **kwargs)
