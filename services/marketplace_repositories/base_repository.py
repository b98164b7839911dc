"""
MODULE: services.marketplace_repositories.base_repository
RESPONSIBILITY: Generic CRUD over one entity table with typed results.
ALLOWED: typing, loguru, core.database, core.contracts, core.exceptions, query_builder.
FORBIDDEN: Business rules and validation (services/validators own them).
ERRORS: None escape: every failure becomes RepositoryResult.error.

Базовый репозиторий сущности маркетплейса.

Выборка строится в фиксированном порядке: фильтры -> сортировки -> пагинация.
Ошибки БД переводятся в ServiceErrorCode по коду SQLSTATE, исходные
подробности сохраняются в details. Повторов нет.
"""

from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from loguru import logger

from core.contracts import (
    FilterOptions, QueryOptions, RepositoryResult, ServiceError, ServiceErrorCode,
)
from core.exceptions import DatabaseConnectionError, DatabaseQueryError, QueryBuildError
from core.interfaces import IDatabaseManager
from core.models import record_columns
from services.marketplace_repositories.query_builder import MarketplaceQueryBuilder

T = TypeVar("T")

PG_ERROR_CODE_MAPPINGS: Dict[str, ServiceErrorCode] = {
    "23505": ServiceErrorCode.CONFLICT,          # unique_violation
    "23503": ServiceErrorCode.VALIDATION_ERROR,  # foreign_key_violation
    "23502": ServiceErrorCode.VALIDATION_ERROR,  # not_null_violation
    "23514": ServiceErrorCode.VALIDATION_ERROR,  # check_violation
    "22P02": ServiceErrorCode.VALIDATION_ERROR,  # invalid_text_representation
    "22001": ServiceErrorCode.VALIDATION_ERROR,  # string_data_right_truncation
    "22007": ServiceErrorCode.VALIDATION_ERROR,  # invalid_datetime_format
    "42703": ServiceErrorCode.VALIDATION_ERROR,  # undefined_column
    "42501": ServiceErrorCode.FORBIDDEN,         # insufficient_privilege
    "28000": ServiceErrorCode.UNAUTHORIZED,      # invalid_authorization_specification
    "28P01": ServiceErrorCode.UNAUTHORIZED,      # invalid_password
    "08000": ServiceErrorCode.NETWORK_ERROR,
    "08003": ServiceErrorCode.NETWORK_ERROR,
    "08006": ServiceErrorCode.NETWORK_ERROR,
    "57P01": ServiceErrorCode.NETWORK_ERROR,     # admin_shutdown
    "42P01": ServiceErrorCode.DATABASE_ERROR,    # undefined_table
    "42601": ServiceErrorCode.DATABASE_ERROR,    # syntax_error
    "40001": ServiceErrorCode.DATABASE_ERROR,    # serialization_failure
    "40P01": ServiceErrorCode.DATABASE_ERROR,    # deadlock_detected
}


def like_pattern(text: str) -> str:
    """Шаблон подстроки для ILIKE с экранированием спецсимволов"""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BaseRepository(Generic[T]):
    """
    Репозиторий таблицы сущности

    Attributes:
        db_manager: Менеджер БД (execute_query / execute_update)
        table_name: Имя таблицы
        query_builder: Билдер SQL с проверкой колонок по записи T
    """

    table_name: str = ""
    record_type: Optional[Type[Any]] = None

    def __init__(self, db_manager: IDatabaseManager, table_name: Optional[str] = None,
                 record_type: Optional[Type[Any]] = None):
        self.db_manager = db_manager
        self.table_name = table_name or self.table_name
        self.record_type = record_type or self.record_type
        columns = record_columns(self.record_type) if self.record_type else ()
        self.query_builder = MarketplaceQueryBuilder(self.table_name, columns)

    # Обработка ошибок

    def handle_error(self, error: Exception, operation: str) -> RepositoryResult:
        """Перевод исключения слоя данных в типизированный результат"""
        if isinstance(error, QueryBuildError):
            code = ServiceErrorCode.VALIDATION_ERROR
            details = {"message": str(error), "column": error.column, "code": None}
        elif isinstance(error, DatabaseConnectionError):
            code = ServiceErrorCode.NETWORK_ERROR
            details = {"message": str(error), "code": None}
        elif isinstance(error, DatabaseQueryError):
            code = PG_ERROR_CODE_MAPPINGS.get(error.pgcode, ServiceErrorCode.INTERNAL_ERROR)
            original = error.original_error
            diag = getattr(original, "diag", None)
            details = {
                "message": str(error),
                "details": getattr(diag, "message_detail", None),
                "hint": getattr(diag, "message_hint", None),
                "code": error.pgcode,
            }
        else:
            code = ServiceErrorCode.INTERNAL_ERROR
            details = {"message": str(error), "code": None}

        logger.error(f"Ошибка {operation} в {self.table_name}: {error}")
        return RepositoryResult(
            data=None,
            error=ServiceError(code=code, message=f"Ошибка {operation} в {self.table_name}", details=details),
            count=None,
        )

    def _not_found(self, record_id: Any) -> RepositoryResult:
        return RepositoryResult(error=ServiceError(
            code=ServiceErrorCode.NOT_FOUND,
            message=f"Запись {record_id} не найдена в {self.table_name}",
            details={"id": record_id},
        ))

    def _run(self, operation: str, action: Callable[[], RepositoryResult]) -> RepositoryResult:
        try:
            return action()
        except (QueryBuildError, DatabaseConnectionError, DatabaseQueryError) as e:
            return self.handle_error(e, operation)
        except Exception as e:
            logger.exception(f"Неожиданная ошибка {operation} в {self.table_name}")
            return self.handle_error(e, operation)

    def _fetch(self, operation: str, query: str, params: Sequence[Any] = ()) -> RepositoryResult[List[T]]:
        """Выполнение готового SELECT (для запросов с JOIN и агрегатов)"""
        def action() -> RepositoryResult:
            rows = self.db_manager.execute_query(query, tuple(params))
            return RepositoryResult(data=rows, count=len(rows))
        return self._run(operation, action)

    # CRUD

    def find_all(self, options: Optional[QueryOptions] = None) -> RepositoryResult[List[T]]:
        """
        Выборка с фильтрами, сортировкой и пагинацией

        Returns:
            Строки страницы и общее число строк, подходящих под фильтры
        """
        options = options or QueryOptions()

        def action() -> RepositoryResult:
            query, params = self.query_builder.build_select(options)
            count_query, count_params = self.query_builder.build_count(options.filters)
            rows = self.db_manager.execute_query(query, params)
            total = self.db_manager.execute_query(count_query, count_params)
            count = int(total[0]["count"]) if total else 0
            logger.debug(f"{self.table_name}: выбрано {len(rows)} из {count}")
            return RepositoryResult(data=rows, count=count)

        return self._run("выборки", action)

    def find_by_id(self, record_id: Any) -> RepositoryResult[T]:
        def action() -> RepositoryResult:
            query, params = self.query_builder.build_select(
                QueryOptions(filters=[FilterOptions("id", "eq", record_id)])
            )
            rows = self.db_manager.execute_query(query, params)
            if not rows:
                return self._not_found(record_id)
            return RepositoryResult(data=rows[0], count=1)

        return self._run("поиска по id", action)

    def find_where(self, filters: Sequence[FilterOptions],
                   options: Optional[QueryOptions] = None) -> RepositoryResult[List[T]]:
        """Выборка по фильтрам (дополнительно к фильтрам из options)"""
        options = options or QueryOptions()
        return self.find_all(QueryOptions(
            filters=list(filters) + list(options.filters),
            sorts=options.sorts,
            pagination=options.pagination,
            select=options.select,
        ))

    def query(self, select: Sequence[str],
              filters: Sequence[FilterOptions] = ()) -> RepositoryResult[List[Dict[str, Any]]]:
        """Выборка произвольного набора колонок"""
        return self.find_all(QueryOptions(filters=list(filters), select=list(select)))

    def create(self, data: Mapping[str, Any]) -> RepositoryResult[T]:
        def action() -> RepositoryResult:
            query, params = self.query_builder.build_insert(data)
            rows = self.db_manager.execute_query(query, params)
            logger.debug(f"{self.table_name}: создана запись {rows[0].get('id') if rows else None}")
            return RepositoryResult(data=rows[0] if rows else None, count=len(rows))

        return self._run("создания", action)

    def update(self, record_id: Any, data: Mapping[str, Any]) -> RepositoryResult[T]:
        """Обновление по id без проверки версии (последняя запись побеждает)"""
        def action() -> RepositoryResult:
            query, params = self.query_builder.build_update(record_id, data)
            rows = self.db_manager.execute_query(query, params)
            if not rows:
                return self._not_found(record_id)
            return RepositoryResult(data=rows[0], count=1)

        return self._run("обновления", action)

    def delete(self, record_id: Any) -> RepositoryResult[int]:
        """Безусловное удаление, data - число удаленных строк"""
        def action() -> RepositoryResult:
            query, params = self.query_builder.build_delete(record_id)
            affected = self.db_manager.execute_update(query, params)
            return RepositoryResult(data=affected, count=affected)

        return self._run("удаления", action)

    def count(self, filters: Sequence[FilterOptions] = ()) -> RepositoryResult[int]:
        def action() -> RepositoryResult:
            query, params = self.query_builder.build_count(filters)
            rows = self.db_manager.execute_query(query, params)
            total = int(rows[0]["count"]) if rows else 0
            return RepositoryResult(data=total, count=total)

        return self._run("подсчета", action)
