"""
MODULE: services.marketplace_repositories.order_repositories
RESPONSIBILITY: Access orders, order items and payments.
ALLOWED: typing, base_repository.
FORBIDDEN: Business logic outside DB operations.
ERRORS: None escape (RepositoryResult.error).

Репозитории заказов и платежей.
"""

from typing import Optional

from core.contracts import FilterOptions, QueryOptions, RepositoryResult, SortOptions
from core.models import Order, OrderItem, Payment
from services.marketplace_repositories.base_repository import BaseRepository

NEWEST_FIRST = [SortOptions("created_at", ascending=False)]


class OrderRepository(BaseRepository[Order]):
    table_name = "orders"
    record_type = Order

    def find_by_buyer(self, buyer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("buyer_id", "eq", buyer_id)],
                               options or QueryOptions(sorts=NEWEST_FIRST))

    def find_by_status(self, status: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "eq", status)], options)

    def find_by_seller(self, seller_id: str) -> RepositoryResult:
        """Заказы, содержащие позиции из объявлений продавца"""
        query = f"""
            SELECT DISTINCT o.*
            FROM {self.table_name} o
            JOIN order_items oi ON oi.order_id = o.id
            JOIN product_listings pl ON pl.id = oi.listing_id
            WHERE pl.farmer_id = %s
            ORDER BY o.created_at DESC
        """
        return self._fetch("поиска заказов продавца", query, (seller_id,))


class OrderItemRepository(BaseRepository[OrderItem]):
    table_name = "order_items"
    record_type = OrderItem

    def find_by_order(self, order_id: str) -> RepositoryResult:
        return self.find_where([FilterOptions("order_id", "eq", order_id)])


class PaymentRepository(BaseRepository[Payment]):
    table_name = "payments"
    record_type = Payment

    def find_by_order(self, order_id: str) -> RepositoryResult:
        return self.find_where([FilterOptions("order_id", "eq", order_id)],
                               QueryOptions(sorts=NEWEST_FIRST))

    def find_by_status(self, status: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "eq", status)], options)

    def find_by_stripe_charge_id(self, stripe_charge_id: str) -> RepositoryResult:
        return self.find_where([FilterOptions("stripe_charge_id", "eq", stripe_charge_id)])

    def find_pending(self) -> RepositoryResult:
        return self.find_by_status("pending", QueryOptions(sorts=[SortOptions("created_at")]))
