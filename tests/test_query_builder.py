"""
Тесты построения SQL.
"""

import pytest
from psycopg2.extras import Json

from core.contracts import FilterOptions, Pagination, QueryOptions, SortOptions
from core.exceptions import QueryBuildError
from services.marketplace_repositories.query_builder import MarketplaceQueryBuilder


@pytest.fixture
def builder():
    return MarketplaceQueryBuilder("orders", ["id", "buyer_id", "status", "total_amount",
                                              "shipping_address", "created_at", "updated_at"])


class TestSelect:
    def test_plain_select(self, builder):
        assert builder.build_select() == ("SELECT * FROM orders", ())

    def test_filters_then_sorts_then_pagination(self, builder):
        options = QueryOptions(
            filters=[FilterOptions("status", "eq", "pending"), FilterOptions("total_amount", "gte", 10)],
            sorts=[SortOptions("created_at", ascending=False), SortOptions("id")],
            pagination=Pagination(page=1, limit=5),
        )
        query, params = builder.build_select(options)
        assert query == (
            "SELECT * FROM orders WHERE status = %s AND total_amount >= %s"
            " ORDER BY created_at DESC, id ASC LIMIT %s OFFSET %s"
        )
        assert params == ("pending", 10, 5, 5)

    def test_page_covers_inclusive_row_range(self):
        assert Pagination(page=1, limit=5).row_range() == (5, 9)
        assert Pagination(page=0, limit=20).row_range() == (0, 19)

    def test_select_list(self, builder):
        query, _ = builder.build_select(QueryOptions(select=["id", "status"]))
        assert query == "SELECT id, status FROM orders"

    def test_in_operator_uses_array_parameter(self, builder):
        clause, params = builder.build_condition(FilterOptions("status", "in", ("pending", "confirmed")))
        assert clause == "status = ANY(%s)"
        assert params == (["pending", "confirmed"],)

    @pytest.mark.parametrize("value, sql", [(None, "NULL"), (True, "TRUE"), (False, "FALSE")])
    def test_is_operator(self, builder, value, sql):
        assert builder.build_condition(FilterOptions("status", "is", value)) == (f"status IS {sql}", ())

    def test_count(self, builder):
        query, params = builder.build_count([FilterOptions("buyer_id", "eq", "b-1")])
        assert query == "SELECT COUNT(*) AS count FROM orders WHERE buyer_id = %s"
        assert params == ("b-1",)


class TestRejectedInput:
    """Недопустимые идентификаторы и параметры не попадают в SQL"""

    def test_unknown_column(self, builder):
        with pytest.raises(QueryBuildError) as excinfo:
            builder.build_select(QueryOptions(filters=[FilterOptions("password", "eq", "x")]))
        assert excinfo.value.column == "password"

    def test_injection_in_sort_column(self, builder):
        with pytest.raises(QueryBuildError):
            builder.build_order_by([SortOptions("id; DROP TABLE orders")])

    def test_unknown_operator(self, builder):
        with pytest.raises(QueryBuildError):
            builder.build_condition(FilterOptions("status", "between", (1, 2)))

    def test_in_requires_collection(self, builder):
        with pytest.raises(QueryBuildError):
            builder.build_condition(FilterOptions("status", "in", "pending"))

    def test_is_rejects_arbitrary_values(self, builder):
        with pytest.raises(QueryBuildError):
            builder.build_condition(FilterOptions("status", "is", "pending"))

    @pytest.mark.parametrize("pagination", [Pagination(page=-1, limit=5), Pagination(page=0, limit=0)])
    def test_invalid_pagination(self, builder, pagination):
        with pytest.raises(QueryBuildError):
            builder.build_pagination(pagination)

    def test_invalid_table_name(self):
        with pytest.raises(QueryBuildError):
            MarketplaceQueryBuilder("orders o", ["id"])


class TestWrites:
    def test_insert_returns_row_and_wraps_json(self, builder):
        query, params = builder.build_insert({"buyer_id": "b-1", "shipping_address": {"city": "Fresno"}})
        assert query == "INSERT INTO orders (buyer_id, shipping_address) VALUES (%s, %s) RETURNING *"
        assert params[0] == "b-1"
        assert isinstance(params[1], Json)

    def test_update_skips_managed_columns(self, builder):
        query, params = builder.build_update("o-1", {"id": "other", "status": "confirmed", "created_at": "x"})
        assert query == "UPDATE orders SET status = %s, updated_at = NOW() WHERE id = %s RETURNING *"
        assert params == ("confirmed", "o-1")

    def test_update_without_changes(self, builder):
        with pytest.raises(QueryBuildError):
            builder.build_update("o-1", {"id": "o-1"})

    def test_empty_insert(self, builder):
        with pytest.raises(QueryBuildError):
            builder.build_insert({})

    def test_delete(self, builder):
        assert builder.build_delete("o-1") == ("DELETE FROM orders WHERE id = %s", ("o-1",))
