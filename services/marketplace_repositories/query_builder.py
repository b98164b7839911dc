"""
MODULE: services.marketplace_repositories.query_builder
RESPONSIBILITY: Build parameterised SQL for generic CRUD over entity tables.
ALLOWED: typing, re, psycopg2.extras (Json), core.contracts, core.exceptions.
FORBIDDEN: Executing queries (only building).
ERRORS: QueryBuildError.

Билдер SQL запросов для репозиториев маркетплейса.

Имена таблиц и колонок подставляются в текст запроса только после проверки
по списку колонок сущности, значения всегда передаются параметрами (%s).
"""

import re
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from psycopg2.extras import Json

from core.contracts import FilterOperator, FilterOptions, Pagination, QueryOptions, SortOptions
from core.exceptions import QueryBuildError

IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")

COMPARISON_OPERATORS = {
    FilterOperator.EQ.value: "=",
    FilterOperator.NEQ.value: "<>",
    FilterOperator.GT.value: ">",
    FilterOperator.GTE.value: ">=",
    FilterOperator.LT.value: "<",
    FilterOperator.LTE.value: "<=",
    FilterOperator.LIKE.value: "LIKE",
    FilterOperator.ILIKE.value: "ILIKE",
}

IS_VALUES = {None: "NULL", True: "TRUE", False: "FALSE"}

Query = Tuple[str, Tuple[Any, ...]]


def adapt_value(value: Any) -> Any:
    """Словари сохраняются как JSONB, остальное psycopg2 адаптирует сам"""
    if isinstance(value, dict):
        return Json(value)
    return value


class MarketplaceQueryBuilder:
    """
    Построение SQL для одной таблицы

    Attributes:
        table_name: Имя таблицы
        columns: Допустимые колонки (из TypedDict-записи сущности)
    """

    def __init__(self, table_name: str, columns: Iterable[str]):
        self.table_name = self._identifier(table_name)
        self.columns: FrozenSet[str] = frozenset(columns)

    @staticmethod
    def _identifier(name: str) -> str:
        if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
            raise QueryBuildError(f"Недопустимый идентификатор: {name!r}", column=str(name))
        return name

    def column(self, name: str) -> str:
        """Проверка колонки по списку колонок сущности"""
        self._identifier(name)
        if self.columns and name not in self.columns:
            raise QueryBuildError(f"Колонка {name} отсутствует в таблице {self.table_name}", column=name)
        return name

    def build_condition(self, filter_option: FilterOptions) -> Query:
        column = self.column(filter_option.column)
        operator = filter_option.operator
        value = filter_option.value

        if operator in COMPARISON_OPERATORS:
            return f"{column} {COMPARISON_OPERATORS[operator]} %s", (value,)
        if operator == FilterOperator.IN.value:
            if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
                raise QueryBuildError(f"Оператор in требует список значений для {column}", column=column)
            return f"{column} = ANY(%s)", (list(value),)
        if operator == FilterOperator.IS.value:
            if not any(value is key for key in IS_VALUES):
                raise QueryBuildError(f"Оператор is допускает только NULL/TRUE/FALSE для {column}",
                                      column=column)
            return f"{column} IS {IS_VALUES[value]}", ()
        raise QueryBuildError(f"Неизвестный оператор фильтра: {operator}", column=column)

    def build_where(self, filters: Sequence[FilterOptions]) -> Query:
        """WHERE из фильтров, объединенных через AND"""
        if not filters:
            return "", ()
        clauses: List[str] = []
        params: List[Any] = []
        for filter_option in filters:
            clause, clause_params = self.build_condition(filter_option)
            clauses.append(clause)
            params.extend(clause_params)
        return " WHERE " + " AND ".join(clauses), tuple(params)

    def build_order_by(self, sorts: Sequence[SortOptions]) -> str:
        """ORDER BY в порядке перечисления сортировок"""
        if not sorts:
            return ""
        parts = [f"{self.column(sort.column)} {'ASC' if sort.ascending else 'DESC'}" for sort in sorts]
        return " ORDER BY " + ", ".join(parts)

    @staticmethod
    def build_pagination(pagination: Optional[Pagination]) -> Query:
        """
        LIMIT/OFFSET страницы

        Страница page при размере limit соответствует строкам
        [page * limit, page * limit + limit - 1].
        """
        if pagination is None:
            return "", ()
        if pagination.page < 0 or pagination.limit < 1:
            raise QueryBuildError(
                f"Некорректная пагинация: page={pagination.page}, limit={pagination.limit}"
            )
        return " LIMIT %s OFFSET %s", (pagination.limit, pagination.offset)

    def build_select_list(self, select: Optional[Sequence[str]]) -> str:
        if not select:
            return "*"
        return ", ".join(self.column(name) for name in select)

    def build_select(self, options: Optional[QueryOptions] = None) -> Query:
        options = options or QueryOptions()
        where, where_params = self.build_where(options.filters)
        order_by = self.build_order_by(options.sorts)
        limit, limit_params = self.build_pagination(options.pagination)
        query = f"SELECT {self.build_select_list(options.select)} FROM {self.table_name}{where}{order_by}{limit}"
        return query, where_params + limit_params

    def build_count(self, filters: Sequence[FilterOptions] = ()) -> Query:
        where, params = self.build_where(filters)
        return f"SELECT COUNT(*) AS count FROM {self.table_name}{where}", params

    def build_insert(self, data: Mapping[str, Any]) -> Query:
        if not data:
            raise QueryBuildError(f"Пустые данные для вставки в {self.table_name}")
        columns = [self.column(name) for name in data]
        placeholders = ", ".join(["%s"] * len(columns))
        query = (
            f"INSERT INTO {self.table_name} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING *"
        )
        return query, tuple(adapt_value(data[name]) for name in data)

    def build_update(self, record_id: Any, data: Mapping[str, Any]) -> Query:
        changes: Dict[str, Any] = {name: value for name, value in data.items()
                                   if name not in ("id", "created_at", "updated_at")}
        if not changes:
            raise QueryBuildError(f"Нет изменяемых полей для {self.table_name}")
        assignments = [f"{self.column(name)} = %s" for name in changes]
        if not self.columns or "updated_at" in self.columns:
            assignments.append("updated_at = NOW()")
        query = f"UPDATE {self.table_name} SET {', '.join(assignments)} WHERE id = %s RETURNING *"
        return query, tuple(adapt_value(value) for value in changes.values()) + (record_id,)

    def build_delete(self, record_id: Any) -> Query:
        return f"DELETE FROM {self.table_name} WHERE id = %s", (record_id,)
