"""
MODULE: services.marketplace_repositories.trade_repositories
RESPONSIBILITY: Access negotiations, disputes and messages.
ALLOWED: typing, base_repository.
FORBIDDEN: Business logic outside DB operations.
ERRORS: None escape (RepositoryResult.error).

Репозитории торгового взаимодействия.
"""

from typing import Optional

from core.contracts import FilterOptions, Pagination, QueryOptions, RepositoryResult, SortOptions
from core.models import Dispute, Message, Negotiation
from services.marketplace_repositories.base_repository import BaseRepository, like_pattern

NEWEST_FIRST = [SortOptions("created_at", ascending=False)]
ACTIVE_NEGOTIATION_STATUSES = ["pending", "counter_offered"]
OPEN_DISPUTE_STATUSES = ["open", "under_review", "escalated"]
UNREAD_MESSAGE_STATUSES = ["sent", "delivered"]


class NegotiationRepository(BaseRepository[Negotiation]):
    table_name = "negotiations"
    record_type = Negotiation

    def find_by_farmer(self, farmer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("farmer_id", "eq", farmer_id)],
                               options or QueryOptions(sorts=NEWEST_FIRST))

    def find_by_buyer(self, buyer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("buyer_id", "eq", buyer_id)],
                               options or QueryOptions(sorts=NEWEST_FIRST))

    def find_active(self, order_id: Optional[str] = None) -> RepositoryResult:
        filters = [FilterOptions("status", "in", ACTIVE_NEGOTIATION_STATUSES)]
        if order_id:
            filters.append(FilterOptions("order_id", "eq", order_id))
        return self.find_where(filters, QueryOptions(sorts=NEWEST_FIRST))

    def search(self, text: str, status: Optional[str] = None,
               limit: Optional[int] = None) -> RepositoryResult:
        """Поиск по заметкам переговоров (ILIKE), с фильтром статуса"""
        filters = [FilterOptions("notes", "ilike", like_pattern(text.strip()))]
        if status:
            filters.append(FilterOptions("status", "eq", status))
        pagination = Pagination(page=0, limit=int(limit)) if limit else None
        return self.find_where(filters, QueryOptions(sorts=NEWEST_FIRST, pagination=pagination))


class DisputeRepository(BaseRepository[Dispute]):
    table_name = "disputes"
    record_type = Dispute

    def find_by_order(self, order_id: str) -> RepositoryResult:
        return self.find_where([FilterOptions("order_id", "eq", order_id)], QueryOptions(sorts=NEWEST_FIRST))

    def find_open(self, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "in", OPEN_DISPUTE_STATUSES)],
                               options or QueryOptions(sorts=[SortOptions("created_at")]))


class MessageRepository(BaseRepository[Message]):
    table_name = "messages"
    record_type = Message

    def find_conversation(self, user_id_1: str, user_id_2: str,
                          limit: int = 50, offset: int = 0) -> RepositoryResult:
        """Переписка двух пользователей в хронологическом порядке, без удаленных"""
        query = f"""
            SELECT *
            FROM {self.table_name}
            WHERE ((sender_id = %s AND receiver_id = %s) OR (sender_id = %s AND receiver_id = %s))
              AND status <> 'deleted'
            ORDER BY created_at ASC
            LIMIT %s OFFSET %s
        """
        params = (user_id_1, user_id_2, user_id_2, user_id_1, limit, offset)
        return self._fetch("выборки переписки", query, params)

    def find_unread(self, receiver_id: str) -> RepositoryResult:
        return self.find_where([
            FilterOptions("receiver_id", "eq", receiver_id),
            FilterOptions("status", "in", UNREAD_MESSAGE_STATUSES),
        ], QueryOptions(sorts=NEWEST_FIRST))
