"""
MODULE: core.interfaces
RESPONSIBILITY: Define Protocols for dependency injection.
ALLOWED: Typing imports, Protocol.
FORBIDDEN: Implementation details, concrete classes (except data structures).
ERRORS: None.

Интерфейсы (Protocol) для модульного проектирования

Определяет контракты для взаимодействия между слоями,
обеспечивая слабую связанность и возможность тестирования.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from core.contracts import FilterOptions, QueryOptions, RepositoryResult, ValidationResult


class IDatabaseManager(Protocol):
    """Интерфейс менеджера базы данных"""

    def execute_query(self, query: str, params: Optional[Tuple] = None) -> List[Dict[str, Any]]:
        """Выполнение запроса, возвращающего строки"""
        ...

    def execute_update(self, query: str, params: Optional[Tuple] = None) -> int:
        """Выполнение DML, возвращает число затронутых строк"""
        ...


class IRepository(Protocol):
    """Интерфейс репозитория сущности"""

    table_name: str

    def find_all(self, options: Optional[QueryOptions] = None) -> RepositoryResult:
        ...

    def find_by_id(self, record_id: Any) -> RepositoryResult:
        ...

    def find_where(self, filters: Sequence[FilterOptions],
                   options: Optional[QueryOptions] = None) -> RepositoryResult:
        ...

    def create(self, data: Mapping[str, Any]) -> RepositoryResult:
        ...

    def update(self, record_id: Any, data: Mapping[str, Any]) -> RepositoryResult:
        ...

    def delete(self, record_id: Any) -> RepositoryResult:
        ...

    def count(self, filters: Sequence[FilterOptions] = ()) -> RepositoryResult:
        ...


class IValidator(Protocol):
    """Интерфейс валидатора сущности"""

    entity_type: str

    def validate_create(self, data: Mapping[str, Any]) -> ValidationResult:
        ...

    def validate_update(self, data: Mapping[str, Any]) -> ValidationResult:
        ...

    def validate_status_transition(self, current: str, target: str) -> ValidationResult:
        ...

    def requires_current_record(self, changes: Mapping[str, Any]) -> bool:
        ...

    def validate_against_current(self, current: Mapping[str, Any],
                                 changes: Mapping[str, Any]) -> ValidationResult:
        ...

    def validate_record(self, current: Mapping[str, Any],
                        changes: Mapping[str, Any]) -> ValidationResult:
        ...
