"""Resource services for the TikTok Shop Open API."""

from .base import BaseService
from .seller import SellerService
from .product import ProductService
from .orders import OrdersService
from .finances import FinancesService
from .logistics import LogisticsService
from .fulfillments import FulfillmentsService, SHIPPING_DOCUMENT_TYPES
from .token import TokenService
from .pdf import PdfService

__all__ = [
    "BaseService",
    "SellerService",
    "ProductService",
    "OrdersService",
    "FinancesService",
    "LogisticsService",
    "FulfillmentsService",
    "SHIPPING_DOCUMENT_TYPES",
    "TokenService",
    "PdfService",
]
