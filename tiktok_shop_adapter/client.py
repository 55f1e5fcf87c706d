"""Facade bundling every TikTok Shop service behind one configuration."""

from typing import Any, Callable, Optional

from .config import AdapterConfig
from .dispatcher import HttpDispatcher
from .services import (
    FinancesService,
    FulfillmentsService,
    LogisticsService,
    OrdersService,
    PdfService,
    ProductService,
    SellerService,
    TokenService,
)


class TikTokShopClient:
    """
    Main entry point for calling the TikTok Shop Open API.

    All signed services share one dispatcher (and so one connection pool).
    The token service talks to the auth host through its own dispatcher, and
    the PDF service downloads documents with its own client.

    Example:
        async with TikTokShopClient(config) as shop:
            shops = await shop.seller.get_active_shops()
    """

    def __init__(
        self,
        config: AdapterConfig,
        clock: Optional[Callable[[], float]] = None,
        client: Optional[Any] = None,
        auth_client: Optional[Any] = None,
        document_client: Optional[Any] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Adapter configuration
            clock: Returns the current epoch in seconds (for deterministic signing)
            client: Optional HTTP client for the Open API (e.g., MockTikTokShopClient)
            auth_client: Optional HTTP client for the auth host
            document_client: Optional HTTP client for document downloads
        """
        self.config = config
        self.dispatcher = HttpDispatcher(
            base_url=config.api.base_url,
            timeout=config.api.timeout_seconds,
            client=client,
        )
        self.auth_dispatcher = HttpDispatcher(
            base_url=config.api.auth_base_url,
            timeout=config.api.timeout_seconds,
            client=auth_client,
        )

        credentials = config.credentials
        common = dict(
            app_key=credentials.app_key,
            app_secret=credentials.app_secret,
            access_token=credentials.access_token,
            proxy=config.proxy,
            clock=clock,
            dispatcher=self.dispatcher,
        )
        self.seller = SellerService(**common)
        self.products = ProductService(**common)
        self.orders = OrdersService(**common)
        self.finances = FinancesService(**common)
        self.logistics = LogisticsService(**common)
        self.fulfillments = FulfillmentsService(**common)
        self.token = TokenService(proxy=config.proxy, dispatcher=self.auth_dispatcher)
        self.pdf = PdfService(client=document_client, timeout=config.api.document_timeout_seconds)

    @property
    def shop_cipher(self) -> Optional[str]:
        return self.config.shop_cipher

    async def close(self):
        """Close HTTP clients."""
        await self.dispatcher.close()
        await self.auth_dispatcher.close()
        await self.pdf.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def get_access_token(self, auth_code: str, proxy: Optional[str] = None):
        """Exchange an authorization code using the configured credentials."""
        return await self.token.get_access_token(
            self.config.credentials.app_key,
            self.config.credentials.app_secret,
            auth_code,
            proxy=proxy,
        )

    async def refresh_access_token(self, refresh_token: str, proxy: Optional[str] = None):
        """Refresh an access token using the configured credentials."""
        return await self.token.refresh_access_token(
            self.config.credentials.app_key,
            self.config.credentials.app_secret,
            refresh_token,
            proxy=proxy,
        )
