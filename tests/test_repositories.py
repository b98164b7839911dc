"""
Тесты репозиториев на записывающем менеджере БД.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from core.contracts import FilterOptions, Pagination, QueryOptions, ServiceErrorCode
from core.exceptions import DatabaseConnectionError, DatabaseQueryError
from services.marketplace_repositories import (
    FarmTaskRepository, MessageRepository, NegotiationRepository, OrderRepository, ProductRepository,
    RetailerInventoryRepository, ReviewRepository,
)
from services.marketplace_repositories.farm_task_repository import priority_filters


class TestBaseRepository:
    """Общий CRUD через OrderRepository"""

    def test_find_all_returns_page_and_total(self, db_manager):
        db_manager.execute_query.side_effect = [[{"id": "o-6"}, {"id": "o-7"}], [{"count": 7}]]
        result = OrderRepository(db_manager).find_all(QueryOptions(pagination=Pagination(page=1, limit=5)))

        assert result.ok
        assert result.data == [{"id": "o-6"}, {"id": "o-7"}]
        assert result.count == 7
        data_call, count_call = db_manager.execute_query.call_args_list
        assert data_call.args == ("SELECT * FROM orders LIMIT %s OFFSET %s", (5, 5))
        assert count_call.args == ("SELECT COUNT(*) AS count FROM orders", ())

    def test_find_by_id_missing_row(self, db_manager):
        result = OrderRepository(db_manager).find_by_id("o-1")
        assert result.error.code is ServiceErrorCode.NOT_FOUND
        assert result.data is None

    def test_find_where_merges_filters(self, db_manager):
        db_manager.execute_query.side_effect = [[], [{"count": 0}]]
        OrderRepository(db_manager).find_where(
            [FilterOptions("buyer_id", "eq", "b-1")],
            QueryOptions(filters=[FilterOptions("status", "eq", "pending")]),
        )
        query, params = db_manager.execute_query.call_args_list[0].args
        assert query == "SELECT * FROM orders WHERE buyer_id = %s AND status = %s"
        assert params == ("b-1", "pending")

    def test_create_returns_inserted_row(self, db_manager):
        db_manager.execute_query.return_value = [{"id": "o-1", "buyer_id": "b-1"}]
        result = OrderRepository(db_manager).create({"buyer_id": "b-1"})
        assert result.data == {"id": "o-1", "buyer_id": "b-1"}

    def test_update_missing_row(self, db_manager):
        result = OrderRepository(db_manager).update("o-1", {"status": "confirmed"})
        assert result.error.code is ServiceErrorCode.NOT_FOUND

    def test_delete_reports_affected_rows(self, db_manager):
        db_manager.execute_update.return_value = 1
        result = OrderRepository(db_manager).delete("o-1")
        assert result.data == 1
        db_manager.execute_update.assert_called_once_with("DELETE FROM orders WHERE id = %s", ("o-1",))

    def test_count(self, db_manager):
        db_manager.execute_query.return_value = [{"count": 3}]
        assert OrderRepository(db_manager).count().data == 3

    def test_unknown_column_never_reaches_database(self, db_manager):
        result = OrderRepository(db_manager).find_where([FilterOptions("password", "eq", "x")])
        assert result.error.code is ServiceErrorCode.VALIDATION_ERROR
        assert result.error.details["column"] == "password"
        db_manager.execute_query.assert_not_called()


class TestErrorMapping:
    """Перевод ошибок PostgreSQL в коды сервиса"""

    @pytest.mark.parametrize("pgcode, code", [
        ("23505", ServiceErrorCode.CONFLICT),
        ("23503", ServiceErrorCode.VALIDATION_ERROR),
        ("23514", ServiceErrorCode.VALIDATION_ERROR),
        ("42501", ServiceErrorCode.FORBIDDEN),
        ("28P01", ServiceErrorCode.UNAUTHORIZED),
        ("08006", ServiceErrorCode.NETWORK_ERROR),
        ("40P01", ServiceErrorCode.DATABASE_ERROR),
        ("XX000", ServiceErrorCode.INTERNAL_ERROR),
        (None, ServiceErrorCode.INTERNAL_ERROR),
    ])
    def test_sqlstate_mapping(self, db_manager, pgcode, code):
        db_manager.execute_query.side_effect = DatabaseQueryError("boom", pgcode=pgcode)
        result = OrderRepository(db_manager).create({"buyer_id": "b-1"})
        assert result.error.code is code
        assert result.error.details["code"] == pgcode

    def test_diagnostics_are_kept(self, db_manager):
        original = SimpleNamespace(diag=SimpleNamespace(message_detail="Key (id) exists", message_hint=None))
        db_manager.execute_query.side_effect = DatabaseQueryError("dup", pgcode="23505", original_error=original)
        result = OrderRepository(db_manager).create({"buyer_id": "b-1"})
        assert result.error.details["details"] == "Key (id) exists"

    def test_connection_error(self, db_manager):
        db_manager.execute_query.side_effect = DatabaseConnectionError("down")
        result = OrderRepository(db_manager).find_by_id("o-1")
        assert result.error.code is ServiceErrorCode.NETWORK_ERROR

    def test_unexpected_error_does_not_escape(self, db_manager):
        db_manager.execute_query.side_effect = RuntimeError("surprise")
        result = OrderRepository(db_manager).count()
        assert result.error.code is ServiceErrorCode.INTERNAL_ERROR


class TestFarmTaskRepository:
    TODAY = date(2025, 6, 15)

    def test_priority_filters(self):
        assert priority_filters("high", self.TODAY) == [FilterOptions("due_date", "lte", "2025-06-16")]
        assert priority_filters("medium", self.TODAY) == [
            FilterOptions("due_date", "gt", "2025-06-16"),
            FilterOptions("due_date", "lte", "2025-06-22"),
        ]
        assert priority_filters("low", self.TODAY) == [FilterOptions("due_date", "gt", "2025-06-22")]
        assert priority_filters("urgent", self.TODAY) is None

    def test_priority_name_is_case_insensitive(self):
        assert priority_filters("HIGH", self.TODAY) == priority_filters("high", self.TODAY)
        assert priority_filters("Low", self.TODAY) == [FilterOptions("due_date", "gt", "2025-06-22")]

    def test_find_by_priority_excludes_completed(self, db_manager):
        db_manager.execute_query.side_effect = [[], [{"count": 0}]]
        FarmTaskRepository(db_manager).find_by_priority("high", self.TODAY, farmer_id="f-1")
        query, params = db_manager.execute_query.call_args_list[0].args
        assert query == (
            "SELECT * FROM farm_tasks WHERE due_date <= %s AND status <> %s AND farmer_id = %s"
            " ORDER BY due_date ASC"
        )
        assert params == ("2025-06-16", "completed", "f-1")

    def test_unknown_priority_is_empty(self, db_manager):
        result = FarmTaskRepository(db_manager).find_by_priority("urgent", self.TODAY)
        assert result.data == [] and result.count == 0
        db_manager.execute_query.assert_not_called()

    def test_find_overdue(self, db_manager):
        db_manager.execute_query.side_effect = [[], [{"count": 0}]]
        FarmTaskRepository(db_manager).find_overdue(self.TODAY)
        query, params = db_manager.execute_query.call_args_list[0].args
        assert query == "SELECT * FROM farm_tasks WHERE due_date < %s AND status <> %s ORDER BY due_date ASC"
        assert params == ("2025-06-15", "completed")


class TestEntityQueries:
    def test_name_search_escapes_wildcards(self, db_manager):
        db_manager.execute_query.side_effect = [[], [{"count": 0}]]
        ProductRepository(db_manager).search_by_name("50%_off")
        _, params = db_manager.execute_query.call_args_list[0].args
        assert params == ("%50\\%\\_off%",)

    def test_negotiation_search_filters_notes_and_status(self, db_manager):
        db_manager.execute_query.side_effect = [[], [{"count": 0}]]
        NegotiationRepository(db_manager).search(" tomatoes ", status="pending", limit=10)
        query, params = db_manager.execute_query.call_args_list[0].args
        assert query == (
            "SELECT * FROM negotiations WHERE notes ILIKE %s AND status = %s"
            " ORDER BY created_at DESC LIMIT %s OFFSET %s"
        )
        assert params == ("%tomatoes%", "pending", 10, 0)

    def test_average_rating(self, db_manager):
        db_manager.execute_query.return_value = [{"average": 4.5, "total": 2}]
        result = ReviewRepository(db_manager).average_rating("l-1")
        assert result.data == {"average": 4.5, "total": 2}

    def test_average_rating_without_reviews(self, db_manager):
        db_manager.execute_query.return_value = [{"average": None, "total": 0}]
        assert ReviewRepository(db_manager).average_rating("l-1").data == {"average": None, "total": 0}

    def test_conversation_is_symmetric(self, db_manager):
        MessageRepository(db_manager).find_conversation("u-1", "u-2", limit=10, offset=20)
        _, params = db_manager.execute_query.call_args.args
        assert params == ("u-1", "u-2", "u-2", "u-1", 10, 20)

    def test_low_stock(self, db_manager):
        db_manager.execute_query.return_value = [{"id": "i-1", "quantity": 2, "reorder_level": 5}]
        result = RetailerInventoryRepository(db_manager).find_low_stock("r-1")
        assert result.count == 1
        query, params = db_manager.execute_query.call_args.args
        assert "quantity <= reorder_level" in query
        assert params == ("r-1",)
