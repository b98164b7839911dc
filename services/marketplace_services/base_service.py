"""
MODULE: services.marketplace_services.base_service
RESPONSIBILITY: Service envelope over one repository and one validator.
ALLOWED: loguru, core.contracts, core.interfaces, validators.
FORBIDDEN: SQL (use repositories), raising exceptions to callers.
ERRORS: None escape: every outcome is a ServiceResponse.

Базовый сервис сущности.

Каждый публичный метод логирует бизнес-событие, проверяет данные валидатором
до обращения к хранилищу и возвращает ServiceResponse: данные либо
типизированную ошибку.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

from loguru import logger

from core.contracts import (
    FilterOptions, QueryOptions, RepositoryResult, ServiceError, ServiceErrorCode,
    ServiceResponse, ValidationResult,
)
from core.interfaces import IRepository, IValidator
from validators.primitives import utc_now

T = TypeVar("T")


class BaseService(Generic[T]):
    """
    Сервис сущности

    Attributes:
        repository: Репозиторий таблицы сущности
        validator: Валидатор сущности
        clock: Источник текущего времени (наивный UTC)
    """

    def __init__(self, repository: IRepository, validator: IValidator,
                 clock: Callable[[], datetime] = utc_now):
        self.repository = repository
        self.validator = validator
        self.clock = clock

    @property
    def entity_type(self) -> str:
        return self.validator.entity_type

    # Конверт ответа

    def log_business_event(self, event: str, **details: Any) -> None:
        """Структурированное бизнес-событие (метод и ключевые аргументы)"""
        logger.bind(event=event, entity=self.entity_type, **details).info(
            f"{self.entity_type}.{event}"
        )

    def handle_repository_error(self, error: ServiceError, operation: str) -> ServiceResponse:
        logger.error(f"{self.entity_type}.{operation}: {error.code.value} - {error.message}")
        return ServiceResponse(data=None, error=error)

    @staticmethod
    def create_response(data: Any) -> ServiceResponse:
        return ServiceResponse(data=data, error=None)

    @staticmethod
    def create_error(code: ServiceErrorCode, message: str,
                     details: Optional[Dict[str, Any]] = None) -> ServiceResponse:
        return ServiceResponse(data=None, error=ServiceError(code=code, message=message, details=details))

    def validation_error(self, result: ValidationResult, message: Optional[str] = None) -> ServiceResponse:
        logger.warning(f"{self.entity_type}: данные не прошли проверку: {result.codes()}")
        return self.create_error(
            ServiceErrorCode.VALIDATION_ERROR,
            message or f"Некорректные данные {self.entity_type}",
            {"errors": [error.to_dict() for error in result.errors]},
        )

    def require(self, **values: Any) -> Optional[ServiceResponse]:
        """Ответ VALIDATION_ERROR, если хотя бы один аргумент пуст"""
        missing = [name for name, value in values.items() if value is None or value == ""]
        if missing:
            return self.create_error(
                ServiceErrorCode.VALIDATION_ERROR,
                f"Не указаны обязательные параметры: {', '.join(missing)}",
                {"fields": missing},
            )
        return None

    def from_result(self, result: RepositoryResult, operation: str) -> ServiceResponse:
        if result.error is not None:
            return self.handle_repository_error(result.error, operation)
        return self.create_response(result.data)

    # Операции

    def get_all(self, options: Optional[QueryOptions] = None) -> ServiceResponse:
        self.log_business_event("get_all", options=repr(options))
        return self.from_result(self.repository.find_all(options), "get_all")

    def get_by_id(self, record_id: Any) -> ServiceResponse:
        self.log_business_event("get_by_id", id=record_id)
        missing = self.require(id=record_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_id(record_id), "get_by_id")

    def find_where(self, filters: Sequence[FilterOptions],
                   options: Optional[QueryOptions] = None) -> ServiceResponse:
        self.log_business_event("find_where", filters=repr(list(filters)))
        return self.from_result(self.repository.find_where(filters, options), "find_where")

    def count(self, filters: Sequence[FilterOptions] = ()) -> ServiceResponse:
        self.log_business_event("count", filters=repr(list(filters)))
        return self.from_result(self.repository.count(filters), "count")

    def create(self, data: Mapping[str, Any]) -> ServiceResponse:
        self.log_business_event("create", fields=sorted(data))
        validation = self.validator.validate_create(data)
        if not validation.is_valid:
            return self.validation_error(validation)
        return self.from_result(self.repository.create(data), "create")

    def update(self, record_id: Any, data: Mapping[str, Any]) -> ServiceResponse:
        """
        Частичное обновление

        Переданные поля проверяются validate_update. Если меняется статус
        или сущность ограничивает правки по статусу, текущая запись читается
        и обновление сверяется с ней. Проверки версии нет.
        """
        self.log_business_event("update", id=record_id, fields=sorted(data))
        missing = self.require(id=record_id)
        if missing:
            return missing
        if not data:
            return self.create_error(ServiceErrorCode.VALIDATION_ERROR, "Нет полей для обновления")

        validation = self.validator.validate_update(data)
        if not validation.is_valid:
            return self.validation_error(validation)

        if self.validator.requires_current_record(data):
            current = self.repository.find_by_id(record_id)
            if current.error is not None:
                return self.handle_repository_error(current.error, "update")
            against_current = self.validator.validate_against_current(current.data, data)
            if not against_current.is_valid:
                return self.validation_error(against_current)

        return self.from_result(self.repository.update(record_id, data), "update")

    def update_status(self, record_id: Any, status: str,
                      extra: Optional[Mapping[str, Any]] = None) -> ServiceResponse:
        """Смена статуса по графу переходов (с дополнительными полями)"""
        self.log_business_event("update_status", id=record_id, status=status)
        missing = self.require(id=record_id, status=status)
        if missing:
            return missing

        current = self.repository.find_by_id(record_id)
        if current.error is not None:
            return self.handle_repository_error(current.error, "update_status")

        changes = dict(extra or {}, status=status)
        validation = self.validator.validate_status_transition(current.data.get("status"), status)
        validation = validation.merge(self.validator.validate_update(changes))
        validation = validation.merge(self.validator.validate_record(current.data, changes))
        if not validation.is_valid:
            return self.validation_error(validation, f"Недопустимая смена статуса {self.entity_type}")

        return self.from_result(self.repository.update(record_id, changes), "update_status")

    def delete(self, record_id: Any) -> ServiceResponse:
        self.log_business_event("delete", id=record_id)
        missing = self.require(id=record_id)
        if missing:
            return missing
        return self.from_result(self.repository.delete(record_id), "delete")

    def first_or_none(self, response: ServiceResponse) -> ServiceResponse:
        """Первая строка списка или None"""
        if not response.success:
            return response
        rows: List[Any] = response.data or []
        return self.create_response(rows[0] if rows else None)
