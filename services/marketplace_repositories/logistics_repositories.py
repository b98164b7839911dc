"""
MODULE: services.marketplace_repositories.logistics_repositories
RESPONSIBILITY: Access shipments, cold chain logs and retailer inventory.
ALLOWED: typing, base_repository.
FORBIDDEN: Business logic outside DB operations.
ERRORS: None escape (RepositoryResult.error).

Репозитории логистики и складских остатков.
"""

from typing import Optional

from core.contracts import FilterOptions, QueryOptions, RepositoryResult, SortOptions
from core.models import ColdChainLog, RetailerInventory, Shipment
from services.marketplace_repositories.base_repository import BaseRepository


class ShipmentRepository(BaseRepository[Shipment]):
    table_name = "shipments"
    record_type = Shipment

    def find_by_order(self, order_id: str) -> RepositoryResult:
        return self.find_where([FilterOptions("order_id", "eq", order_id)])

    def find_by_tracking_number(self, tracking_number: str) -> RepositoryResult:
        return self.find_where([FilterOptions("tracking_number", "eq", tracking_number)])

    def find_by_status(self, status: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "eq", status)], options)


class ColdChainLogRepository(BaseRepository[ColdChainLog]):
    table_name = "cold_chain_logs"
    record_type = ColdChainLog

    def find_by_shipment(self, shipment_id: str) -> RepositoryResult:
        return self.find_where([FilterOptions("shipment_id", "eq", shipment_id)],
                               QueryOptions(sorts=[SortOptions("recorded_at")]))


class RetailerInventoryRepository(BaseRepository[RetailerInventory]):
    table_name = "retailer_inventory"
    record_type = RetailerInventory

    def find_by_retailer(self, retailer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("retailer_id", "eq", retailer_id)], options)

    def find_low_stock(self, retailer_id: str) -> RepositoryResult:
        """Позиции, остаток которых опустился до уровня дозаказа"""
        query = f"""
            SELECT *
            FROM {self.table_name}
            WHERE retailer_id = %s
              AND status <> 'discontinued'
              AND quantity <= reorder_level
            ORDER BY quantity ASC
        """
        return self._fetch("поиска позиций с низким остатком", query, (retailer_id,))
