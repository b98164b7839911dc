"""
MODULE: core.contracts
RESPONSIBILITY: Data contracts shared by repositories, services and validators.
ALLOWED: Dataclasses, Enums, Typing.
FORBIDDEN: Business logic, database operations.
ERRORS: None.

Контракты обмена данными между слоями:
- параметры выборки (фильтры, сортировка, пагинация);
- результат репозитория и ответ сервиса с типизированной ошибкой;
- результат валидации.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class FilterOperator(Enum):
    """Поддерживаемые операторы фильтрации"""
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    LIKE = "like"
    ILIKE = "ilike"
    IN = "in"
    IS = "is"


@dataclass(frozen=True)
class FilterOptions:
    """Условие фильтрации: колонка, оператор, значение"""
    column: str
    operator: str
    value: Any


@dataclass(frozen=True)
class SortOptions:
    """Условие сортировки"""
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class Pagination:
    """
    Пагинация с нумерацией страниц с нуля

    Страница `page` при размере `limit` покрывает строки
    [page * limit, page * limit + limit - 1] включительно.
    """
    page: int = 0
    limit: int = 20

    @property
    def offset(self) -> int:
        return self.page * self.limit

    def row_range(self):
        """Включительный диапазон строк страницы"""
        start = self.page * self.limit
        return start, start + self.limit - 1


@dataclass(frozen=True)
class QueryOptions:
    """Полный набор параметров выборки"""
    filters: List[FilterOptions] = field(default_factory=list)
    sorts: List[SortOptions] = field(default_factory=list)
    pagination: Optional[Pagination] = None
    select: Optional[List[str]] = None


class ServiceErrorCode(Enum):
    """Закрытый набор кодов ошибок сервисного слоя"""
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    DATABASE_ERROR = "DATABASE_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ServiceError:
    """Типизированная ошибка с исходными подробностями"""
    code: ServiceErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


@dataclass
class RepositoryResult(Generic[T]):
    """Результат операции репозитория: данные или ошибка, плюс общее число строк"""
    data: Optional[T] = None
    error: Optional[ServiceError] = None
    count: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ServiceResponse(Generic[T]):
    """Ответ сервиса: ровно одно из data / error заполнено по смыслу"""
    data: Optional[T] = None
    error: Optional[ServiceError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ValidationError:
    """Нарушение одного правила"""
    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass
class ValidationResult:
    """Результат валидации: валиден тогда и только тогда, когда ошибок нет"""
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def codes(self) -> List[str]:
        return [error.code for error in self.errors]

    def has_code(self, code: str) -> bool:
        return any(error.code == code for error in self.errors)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(self.errors + other.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": [error.to_dict() for error in self.errors]}
