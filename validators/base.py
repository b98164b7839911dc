"""
MODULE: validators.base
RESPONSIBILITY: Base entity validator composing field rules, required fields and status graphs.
ALLOWED: validators.rules, validators.transitions, core.contracts.
FORBIDDEN: I/O, database access.
ERRORS: None (all violations are collected into ValidationResult).

Базовый валидатор сущности.

Наследник описывает сущность данными: список обязательных полей,
полевые правила, межполевые правила, правила только для создания
и граф статусов. Все нарушения собираются без прерывания.

Обновление проверяет только переданные поля, поэтому любой набор полей,
прошедший validate_create, проходит и validate_update.
"""

from datetime import datetime
from typing import Any, Callable, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from core.contracts import ValidationError, ValidationResult
from validators.primitives import utc_now
from validators.rules import Rule, error, run_rules
from validators.transitions import StatusTransitionGraph


class EntityValidator:
    """
    Валидатор сущности

    Attributes:
        entity_type: Ключ сущности в реестре
        required_fields: Поля, обязательные при создании
        transitions: Граф статусов (None, если у сущности нет статуса)
        editable_statuses: Статусы, в которых разрешено менять нестатусные поля
    """

    entity_type: str = "generic"
    required_fields: Tuple[str, ...] = ()
    status_field: str = "status"
    transitions: Optional[StatusTransitionGraph] = None
    editable_statuses: Optional[FrozenSet[str]] = None

    def __init__(self, rules: Any = None, clock: Callable[[], datetime] = utc_now):
        """
        Args:
            rules: Бизнес-лимиты сущности (frozen dataclass из config.settings)
            clock: Источник текущего времени (наивный UTC)
        """
        self.rules = rules
        self.clock = clock

    # Описание сущности (переопределяется наследниками)

    def field_rules(self) -> List[Rule]:
        """Правила отдельных полей"""
        return []

    def cross_rules(self) -> List[Rule]:
        """Правила, связывающие несколько полей (срабатывают, когда поля переданы)"""
        return []

    def create_rules(self) -> List[Rule]:
        """Правила, применяемые только при создании"""
        return []

    def record_rules(self) -> List[Rule]:
        """
        Правила над записью целиком

        При создании проверяются переданные данные, при обновлении -
        текущая запись с наложенными изменениями.
        """
        return []

    # Операции

    def validate_required(self, data: Mapping[str, Any],
                          fields: Optional[Sequence[str]] = None) -> ValidationResult:
        fields = self.required_fields if fields is None else fields
        return ValidationResult([
            error(field, f"Поле {field} обязательно", "REQUIRED")
            for field in fields
            if data.get(field) is None or data.get(field) == ""
        ])

    def validate_create(self, data: Mapping[str, Any]) -> ValidationResult:
        errors: List[ValidationError] = []
        errors.extend(self.validate_required(data).errors)
        errors.extend(run_rules(self.field_rules(), data))
        errors.extend(run_rules(self.cross_rules(), data))
        errors.extend(run_rules(self.create_rules(), data))
        errors.extend(run_rules(self.record_rules(), data))
        return ValidationResult(errors)

    def validate_update(self, data: Mapping[str, Any]) -> ValidationResult:
        """Частичная проверка: только переданные поля"""
        errors: List[ValidationError] = []
        # Обязательное поле нельзя очистить обновлением
        cleared = [field for field in self.required_fields if field in data]
        errors.extend(self.validate_required(data, cleared).errors)
        errors.extend(run_rules(self.field_rules(), data))
        errors.extend(run_rules(self.cross_rules(), data))
        return ValidationResult(errors)

    def validate(self, data: Mapping[str, Any]) -> ValidationResult:
        return self.validate_create(data)

    def validate_status_transition(self, current: str, target: str) -> ValidationResult:
        if self.transitions is None:
            return ValidationResult([error(
                self.status_field, f"У сущности {self.entity_type} нет статусов", "INVALID_STATUS"
            )])
        return self.transitions.validate(current, target)

    def validate_record(self, current: Mapping[str, Any],
                        changes: Mapping[str, Any]) -> ValidationResult:
        """Правила записи над текущей записью с изменениями"""
        return ValidationResult(run_rules(self.record_rules(), dict(current or {}, **changes)))

    def is_editable(self, status: Optional[str]) -> bool:
        return self.editable_statuses is None or status in self.editable_statuses

    def requires_current_record(self, changes: Mapping[str, Any]) -> bool:
        """Нужна ли текущая запись для проверки обновления"""
        if self.transitions is not None and self.status_field in changes:
            return True
        if self.record_rules():
            return True
        return self.editable_statuses is not None and self._has_content_changes(changes)

    def validate_against_current(self, current: Mapping[str, Any],
                                 changes: Mapping[str, Any]) -> ValidationResult:
        """
        Проверка обновления относительно сохраненной записи

        Смена статуса проверяется по графу. Изменение остальных полей
        запрещено вне editable_statuses.
        Правила записи проверяются над текущей записью с изменениями.
        """
        errors: List[ValidationError] = []
        current_status = current.get(self.status_field)
        target_status = changes.get(self.status_field)

        if (self.transitions is not None and target_status is not None
                and target_status != current_status):
            errors.extend(self.validate_status_transition(current_status, target_status).errors)

        if self._has_content_changes(changes) and not self.is_editable(current_status):
            errors.append(error(
                self.status_field,
                f"Запись {self.entity_type} в статусе {current_status} нельзя изменять",
                "UPDATE_NOT_ALLOWED",
            ))
        errors.extend(self.validate_record(current, changes).errors)
        return ValidationResult(errors)

    def _has_content_changes(self, changes: Mapping[str, Any]) -> bool:
        return any(key != self.status_field for key in changes)
