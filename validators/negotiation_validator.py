"""
MODULE: validators.negotiation_validator
RESPONSIBILITY: Validate price negotiations between farmers and buyers.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор переговоров о цене.

Скидка = (original - proposed) / original * 100.
Скидка выше лимита дает MAX_DISCOUNT_EXCEEDED, изменение цены меньше
минимального процента (но не нулевое) дает MIN_PRICE_DIFFERENCE.
"""

from datetime import timedelta
from typing import Any, List, Mapping

from config.settings import NegotiationRules
from core.contracts import ValidationResult
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, date_field, distinct_fields, error, max_length_field, positive_field,
    present, search_rules, run_rules, status_field, uuid_fields,
)
from validators.transitions import NEGOTIATION_TRANSITIONS


def discount_percent(original_price: float, proposed_price: float) -> float:
    return (original_price - proposed_price) / original_price * 100


class NegotiationValidator(EntityValidator):
    """Валидатор переговоров"""

    entity_type = "negotiations"
    required_fields = ("order_id", "farmer_id", "buyer_id", "product_id",
                       "original_price", "proposed_price")
    transitions = NEGOTIATION_TRANSITIONS

    def __init__(self, rules: NegotiationRules = None, **kwargs):
        super().__init__(rules or NegotiationRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            *uuid_fields("order_id", "farmer_id", "buyer_id", "product_id"),
            positive_field("original_price"),
            positive_field("proposed_price"),
            positive_field("final_price"),
            max_length_field("notes", self.rules.max_notes_length, code="MAX_LENGTH"),
            date_field("expires_at"),
            self._expiry_window,
            status_field(NEGOTIATION_TRANSITIONS.statuses),
        ]

    def cross_rules(self) -> List[Rule]:
        return [
            self._price_difference,
            distinct_fields("farmer_id", "buyer_id", "Фермер и покупатель должны различаться"),
        ]

    def _price_difference(self, data: Mapping[str, Any]):
        original, proposed = data.get("original_price"), data.get("proposed_price")
        if not (p.is_positive_number(original) and p.is_positive_number(proposed)):
            return []
        return self.validate_price_change(original, proposed).errors

    def _expiry_window(self, data: Mapping[str, Any]):
        expires_at = p.parse_date(data.get("expires_at"))
        if expires_at is None:
            return []
        now = self.clock()
        if expires_at <= now:
            return [error("expires_at", "Срок действия предложения должен быть в будущем",
                          "INVALID_DATE_RANGE")]
        if expires_at > now + timedelta(days=self.rules.max_expiry_days):
            return [error("expires_at",
                          f"Срок действия не может превышать {self.rules.max_expiry_days} дней",
                          "INVALID_DATE_RANGE")]
        return []

    def validate_price_change(self, original_price: Any, new_price: Any) -> ValidationResult:
        """Проверка изменения цены против лимитов скидки и минимального шага"""
        if not (p.is_positive_number(original_price) and p.is_positive_number(new_price)):
            return ValidationResult([error("proposed_price", "Цены должны быть положительными",
                                           "INVALID_NUMBER")])
        errors = []
        discount = discount_percent(original_price, new_price)
        if abs(discount) < self.rules.min_price_difference_percent and original_price != new_price:
            errors.append(error(
                "proposed_price",
                f"Изменение цены должно быть не менее {self.rules.min_price_difference_percent}%",
                "MIN_PRICE_DIFFERENCE",
            ))
        if discount > self.rules.max_discount_percent:
            errors.append(error(
                "proposed_price",
                f"Скидка не может превышать {self.rules.max_discount_percent}%",
                "MAX_DISCOUNT_EXCEEDED",
            ))
        return ValidationResult(errors)

    def validate_counter_offer(self, data: Mapping[str, Any], current_count: int,
                               original_price: float) -> ValidationResult:
        """
        Проверка встречного предложения

        Args:
            data: proposed_price, notes, expires_at
            current_count: Сколько встречных предложений уже сделано
            original_price: Исходная цена переговоров
        """
        errors = []
        if current_count >= self.rules.max_counter_offers:
            errors.append(error("counter_offer_count",
                                f"Допускается не более {self.rules.max_counter_offers} встречных предложений",
                                "MAX_COUNTER_OFFERS_EXCEEDED"))
        if not present(data, "proposed_price"):
            errors.append(error("proposed_price", "Поле proposed_price обязательно", "REQUIRED"))
        priced = dict(data, original_price=original_price)
        errors.extend(run_rules([
            positive_field("proposed_price"),
            max_length_field("notes", self.rules.max_notes_length, code="MAX_LENGTH"),
            date_field("expires_at"),
            self._expiry_window,
            self._price_difference,
        ], priced))
        return ValidationResult(errors)

    def validate_acceptance(self, data: Mapping[str, Any]) -> ValidationResult:
        if not p.is_positive_number(data.get("final_price")):
            return ValidationResult([error("final_price", "Итоговая цена должна быть положительной",
                                           "INVALID_NUMBER")])
        return ValidationResult()

    def validate_search(self, data: Mapping[str, Any]) -> ValidationResult:
        return ValidationResult(run_rules(search_rules(NEGOTIATION_TRANSITIONS.statuses), data))
