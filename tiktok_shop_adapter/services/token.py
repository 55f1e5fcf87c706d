"""Access token exchange against the TikTok Shop auth host.

These calls are not HMAC signed: the app key and secret travel in the query
string together with the grant.
"""

import logging
from typing import Any, Dict, Optional

from ..config import AUTH_BASE_URL
from ..dispatcher import DEFAULT_TIMEOUT_SECONDS, HttpDispatcher
from ..errors import ErrorKind, ServiceError, wrap_error

logger = logging.getLogger("tiktok_shop_adapter.services")

ACCESS_TOKEN_PATH = "/api/v2/token/get"
REFRESH_TOKEN_PATH = "/api/v2/token/refresh"
AUTHORIZED_CODE_GRANT = "authorized_code"
REFRESH_TOKEN_GRANT = "refresh_token"


class TokenService:
    """Exchanges authorization codes and refresh tokens for access tokens."""

    service_name = "token"

    def __init__(
        self,
        client: Optional[Any] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str = AUTH_BASE_URL,
        proxy: Optional[str] = None,
        dispatcher: Optional[HttpDispatcher] = None,
    ):
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

    def _require(self, value: Optional[str], name: str) -> str:
        text = (value or "").strip()
        if not text:
            raise ServiceError(
                f"TokenService requires a non-empty {name}.",
                kind=ErrorKind.VALIDATION,
                service=self.service_name,
            )
        return text

    async def get_access_token(
        self,
        app_key: str,
        app_secret: str,
        auth_code: str,
        proxy: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Exchange an authorization code for access and refresh tokens.

        Args:
            app_key: App key
            app_secret: App secret
            auth_code: Code returned by the seller authorization redirect
            proxy: Proxy override for this call

        Returns:
            Token payload as returned by TikTok Shop
        """
        params = {
            "app_key": self._require(app_key, "app_key"),
            "app_secret": self._require(app_secret, "app_secret"),
            "auth_code": self._require(auth_code, "auth_code"),
            "grant_type": AUTHORIZED_CODE_GRANT,
        }
        return await self._dispatch(ACCESS_TOKEN_PATH, params, proxy)

    async def refresh_access_token(
        self,
        app_key: str,
        app_secret: str,
        refresh_token: str,
        proxy: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Obtain a new access token from a refresh token."""
        params = {
            "app_key": self._require(app_key, "app_key"),
            "app_secret": self._require(app_secret, "app_secret"),
            "refresh_token": self._require(refresh_token, "refresh_token"),
            "grant_type": REFRESH_TOKEN_GRANT,
        }
        return await self._dispatch(REFRESH_TOKEN_PATH, params, proxy)

    async def _dispatch(self, path: str, params: Dict[str, str], proxy: Optional[str]) -> Dict[str, Any]:
        logger.info("token_request", extra={"path": path, "grant_type": params["grant_type"]})
        try:
            return await self.dispatcher.dispatch(
                path,
                method="GET",
                params=params,
                headers={"Content-Type": "application/json"},
                proxy=proxy if proxy is not None else self.default_proxy,
            )
        except ServiceError as exc:
            exc.with_service(self.service_name)
            raise
        except Exception as exc:
            raise wrap_error(exc, self.service_name) from exc
