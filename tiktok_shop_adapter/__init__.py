"""
TikTok Shop Open API Adapter

Signs and dispatches TikTok Shop Open API requests, with resource services
for sellers, products, orders, finances, logistics and fulfillments, plus a
PDF resize utility for shipping documents.
"""

__version__ = "0.1.0"

from .client import TikTokShopClient
from .config import AdapterConfig
from .errors import DocumentError, ErrorKind, ProxyConfigurationError, ServiceError
from .mock_client import MockTikTokShopClient
from .router import get_tiktok_router
from .signing import Signer, sign
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

__all__ = [
    "TikTokShopClient",
    "AdapterConfig",
    "get_tiktok_router",
    "MockTikTokShopClient",
    "ServiceError",
    "ErrorKind",
    "ProxyConfigurationError",
    "DocumentError",
    "Signer",
    "sign",
    "SellerService",
    "ProductService",
    "OrdersService",
    "FinancesService",
    "LogisticsService",
    "FulfillmentsService",
    "TokenService",
    "PdfService",
]
