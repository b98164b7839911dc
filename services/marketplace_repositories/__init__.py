"""
Репозитории сущностей маркетплейса.
"""

from services.marketplace_repositories.base_repository import BaseRepository, PG_ERROR_CODE_MAPPINGS
from services.marketplace_repositories.catalog_repositories import (
    ProductListingRepository, ProductRepository, ProfileRepository,
)
from services.marketplace_repositories.farm_task_repository import FarmTaskRepository
from services.marketplace_repositories.logistics_repositories import (
    ColdChainLogRepository, RetailerInventoryRepository, ShipmentRepository,
)
from services.marketplace_repositories.order_repositories import (
    OrderItemRepository, OrderRepository, PaymentRepository,
)
from services.marketplace_repositories.trade_repositories import (
    DisputeRepository, MessageRepository, NegotiationRepository,
)
from services.marketplace_repositories.trust_repositories import (
    BlockchainTxRepository, CertificationRepository, QualityReportRepository, ReviewRepository,
)

__all__ = [
    "BaseRepository",
    "PG_ERROR_CODE_MAPPINGS",
    "BlockchainTxRepository",
    "CertificationRepository",
    "ColdChainLogRepository",
    "DisputeRepository",
    "FarmTaskRepository",
    "MessageRepository",
    "NegotiationRepository",
    "OrderItemRepository",
    "OrderRepository",
    "PaymentRepository",
    "ProductListingRepository",
    "ProductRepository",
    "ProfileRepository",
    "QualityReportRepository",
    "RetailerInventoryRepository",
    "ReviewRepository",
    "ShipmentRepository",
]
