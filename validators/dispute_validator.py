"""
MODULE: validators.dispute_validator
RESPONSIBILITY: Validate order disputes and their resolution.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор споров по заказам.
Решение (resolution) обязательно при переводе в resolved.
"""

from typing import Any, List, Mapping

from config.settings import DisputeRules
from core.contracts import ValidationResult
from core.models import DisputeType, enum_values
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, date_field, distinct_fields, enum_field, error, max_length_field,
    non_negative_field, not_future_field, status_field, string_field, url_list_field,
    uuid_fields,
)
from validators.transitions import DISPUTE_TRANSITIONS


class DisputeValidator(EntityValidator):
    entity_type = "disputes"
    required_fields = ("order_id", "raised_by", "against_id", "dispute_type", "reason")
    transitions = DISPUTE_TRANSITIONS
    editable_statuses = frozenset({"open", "under_review"})

    def __init__(self, rules: DisputeRules = None, **kwargs):
        super().__init__(rules or DisputeRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        rules = self.rules
        return [
            *uuid_fields("order_id", "raised_by", "against_id"),
            enum_field("dispute_type", enum_values(DisputeType), code="INVALID_TYPE"),
            string_field("reason", rules.min_reason_length, rules.max_description_length),
            max_length_field("description", rules.max_description_length),
            url_list_field("evidence_urls", rules.max_evidence, count_code="MAX_COUNT"),
            non_negative_field("amount_claimed"),
            string_field("resolution", 1, rules.max_resolution_length),
            date_field("resolved_at"),
            not_future_field("resolved_at", self.clock),
            status_field(DISPUTE_TRANSITIONS.statuses),
        ]

    def cross_rules(self) -> List[Rule]:
        return [
            distinct_fields("raised_by", "against_id", "Нельзя открыть спор против самого себя"),
            self._resolution_required,
        ]

    @staticmethod
    def _resolution_required(data: Mapping[str, Any]):
        if data.get("status") == "resolved" and not p.is_valid_string(data.get("resolution")):
            return [error("resolution", "Для статуса resolved нужно описание решения", "REQUIRED")]
        return []

    def validate_resolution(self, data: Mapping[str, Any]) -> ValidationResult:
        """Проверка данных закрытия спора решением"""
        errors = []
        if not p.is_valid_string(data.get("resolution"), 1, self.rules.max_resolution_length):
            errors.append(error("resolution", "Описание решения обязательно", "REQUIRED"))
        amount = data.get("amount_claimed")
        if amount is not None and not p.is_non_negative_number(amount):
            errors.append(error("amount_claimed", "Сумма не может быть отрицательной", "INVALID_NUMBER"))
        return ValidationResult(errors)
