"""
Сервисы сущностей маркетплейса.
"""

from services.marketplace_services.base_service import BaseService
from services.marketplace_services.catalog_services import ListingService, ProductService, ProfileService
from services.marketplace_services.commerce_services import OrderItemService, OrderService, PaymentService
from services.marketplace_services.farm_task_service import FarmTaskService
from services.marketplace_services.logistics_services import ColdChainService, InventoryService, ShipmentService
from services.marketplace_services.trade_services import DisputeService, MessageService, NegotiationService
from services.marketplace_services.trust_services import (
    BlockchainTxService, CertificationService, QualityReportService, ReviewService,
)

__all__ = [
    "BaseService",
    "BlockchainTxService",
    "CertificationService",
    "ColdChainService",
    "DisputeService",
    "FarmTaskService",
    "InventoryService",
    "ListingService",
    "MessageService",
    "NegotiationService",
    "OrderItemService",
    "OrderService",
    "PaymentService",
    "ProductService",
    "ProfileService",
    "QualityReportService",
    "ReviewService",
    "ShipmentService",
]
