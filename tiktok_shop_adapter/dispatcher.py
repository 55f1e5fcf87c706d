"""HTTP dispatch for signed TikTok Shop requests."""

import logging
from time import perf_counter
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from .config import OPEN_API_BASE_URL
from .errors import ErrorKind, ServiceError
from .models.request_models import body_from_value
from .proxy import ProxyAgent, create_proxy_agent
from .telemetry import get_request_duration_histogram

logger = logging.getLogger("tiktok_shop_adapter.dispatcher")

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_HEADERS = {"Content-Type": "application/json"}


def _error_message(data: Any, fallback: str) -> str:
    if isinstance(data, dict) and "message" in data:
        return str(data["message"])
    return fallback


def _decode(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return getattr(response, "text", None)


class HttpDispatcher:
    """
    Executes requests against the TikTok Shop API and normalizes failures.

    Each call is a single attempt. Transport failures become
    ``ServiceError(kind=TRANSPORT)`` without a status; responses with status
    400 and above become ``ServiceError(kind=REMOTE)`` carrying the status and
    the decoded body.
    """

    def __init__(
        self,
        base_url: str = OPEN_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[Any] = None,
        client_factory: Optional[Callable[[ProxyAgent], Any]] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            base_url: API base URL
            timeout: Request timeout in seconds
            client: Optional HTTP client (e.g., MockTikTokShopClient)
            client_factory: Builds the short-lived client used for proxied calls
        """
        self.base_url = base_url
        self.timeout = timeout
        self.client_factory = client_factory or self._build_proxied_client
        self.duration_histogram = get_request_duration_histogram()

        if client is not None:
            self.client = client
            self._owns_client = False
        else:
            self.client = httpx.AsyncClient(
                base_url=base_url,
                headers=DEFAULT_HEADERS,
                timeout=timeout,
            )
            self._owns_client = True

    async def close(self):
        """Close HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _build_proxied_client(self, agent: ProxyAgent) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=DEFAULT_HEADERS,
            timeout=self.timeout,
            mounts=agent.mounts(),
        )

    async def dispatch(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        proxy: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Send one request.

        Args:
            path: Request path (already encoded and signed)
            method: HTTP method
            params: Final query parameters
            body: Request body (any value accepted by ``body_from_value``)
            headers: Request headers
            proxy: Proxy string resolved for this call only
            timeout: Per-call timeout override in seconds

        Returns:
            Decoded JSON response body (or text for non-JSON responses)
        """
        try:
            content = body_from_value(body).request_kwargs()
        except (TypeError, ValueError) as exc:
            raise ServiceError(
                f"Request body is not JSON serializable: {exc}",
                kind=ErrorKind.VALIDATION,
            ) from exc

        agent = create_proxy_agent(proxy)

        kwargs: Dict[str, Any] = {"params": dict(params or {}), **content}
        if headers:
            kwargs["headers"] = dict(headers)
        if timeout is not None:
            kwargs["timeout"] = timeout

        start = perf_counter()
        status: Optional[int] = None
        try:
            if agent is None:
                response = await self.client.request(method, path, **kwargs)
            else:
                async with self.client_factory(agent) as proxied:
                    response = await proxied.request(method, path, **kwargs)
            status = response.status_code
        except httpx.RequestError as exc:
            cause = str(exc) or type(exc).__name__
            logger.warning(
                "tiktok_request_transport_error",
                extra={"method": method, "path": path, "error": cause},
            )
            raise ServiceError(
                f"TikTok Shop request failed: {cause}",
                kind=ErrorKind.TRANSPORT,
            ) from exc
        finally:
            duration_ms = (perf_counter() - start) * 1000
            if self.duration_histogram:
                self.duration_histogram.record(
                    duration_ms,
                    attributes={"method": method, "status": status or 0},
                )
            logger.debug(
                "tiktok_request",
                extra={
                    "method": method,
                    "path": path,
                    "status": status,
                    "duration_ms": duration_ms,
                    "proxied": agent is not None,
                },
            )

        data = _decode(response)
        if status >= 400:
            fallback = getattr(response, "reason_phrase", "") or "HTTP error"
            message = _error_message(data, fallback)
            logger.warning(
                "tiktok_request_remote_error",
                extra={"method": method, "path": path, "status": status},
            )
            raise ServiceError(
                f"TikTok Shop request failed with status {status}: {message}",
                kind=ErrorKind.REMOTE,
                status=status,
                data=data,
            )
        return data
