"""
MODULE: validators.shipment_validator
RESPONSIBILITY: Validate shipments, tracking numbers and delivery status updates.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор отправок.
Отправка в статусе delivered всегда имеет фактическую дату доставки.
"""

from typing import Any, List, Mapping

from config.settings import ShipmentRules
from core.contracts import ValidationResult
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, address_field, date_field, error, field_check, max_length_field, max_value_field,
    non_negative_field, not_before_today_field, not_future_field, positive_field,
    run_rules, search_rules, status_field, string_field, uuid_field,
)
from validators.transitions import SHIPMENT_TRANSITIONS


def _valid_dimensions(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    return all(p.is_positive_number(value.get(side)) for side in ("length", "width", "height"))


class ShipmentValidator(EntityValidator):
    """Валидатор отправок"""

    entity_type = "shipments"
    required_fields = ("order_id", "carrier_name", "shipping_address")
    transitions = SHIPMENT_TRANSITIONS

    def __init__(self, rules: ShipmentRules = None, **kwargs):
        super().__init__(rules or ShipmentRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            uuid_field("order_id"),
            string_field("carrier_name", 2, 100),
            address_field("shipping_address"),
            address_field("pickup_address"),
            field_check("tracking_number", p.is_valid_tracking_number,
                        "Некорректный формат номера отслеживания", "INVALID_FORMAT"),
            status_field(SHIPMENT_TRANSITIONS.statuses),
            date_field("estimated_delivery_date"),
            not_before_today_field("estimated_delivery_date", self.clock, code="INVALID_DATE_RANGE"),
            date_field("actual_delivery_date"),
            not_future_field("actual_delivery_date", self.clock, code="INVALID_DATE_RANGE"),
            positive_field("weight_kg"),
            max_value_field("weight_kg", self.rules.max_weight_kg),
            non_negative_field("shipping_cost"),
            non_negative_field("insurance_value"),
            max_length_field("special_instructions", self.rules.max_instructions_length),
            field_check("dimensions", _valid_dimensions,
                        "Длина, ширина и высота должны быть положительными", "INVALID_DIMENSIONS"),
        ]

    def record_rules(self) -> List[Rule]:
        return [self._delivery_date_required]

    @staticmethod
    def _delivery_date_required(data: Mapping[str, Any]):
        if data.get("status") == "delivered" and not data.get("actual_delivery_date"):
            return [error("actual_delivery_date",
                          "Для статуса delivered нужна фактическая дата доставки", "REQUIRED")]
        return []

    def validate_tracking(self, tracking_number: Any) -> ValidationResult:
        if not p.is_valid_string(tracking_number):
            return ValidationResult([error("tracking_number", "Номер отслеживания обязателен", "REQUIRED")])
        if not p.is_valid_tracking_number(tracking_number):
            return ValidationResult([error("tracking_number", "Некорректный формат номера отслеживания",
                                           "INVALID_FORMAT")])
        return ValidationResult()

    def validate_status_update(self, data: Mapping[str, Any]) -> ValidationResult:
        """Статус обязателен; для delivered нужна фактическая дата доставки"""
        errors = []
        status = data.get("status")
        if not status:
            errors.append(error("status", "Статус обязателен", "REQUIRED"))
        elif status not in SHIPMENT_TRANSITIONS.statuses:
            errors.append(error("status", f"Неизвестный статус отправки: {status}", "INVALID_STATUS"))
        errors.extend(self._delivery_date_required(data))
        errors.extend(run_rules([
            date_field("actual_delivery_date"),
            not_future_field("actual_delivery_date", self.clock, code="INVALID_DATE_RANGE"),
        ], data))
        return ValidationResult(errors)

    def validate_search(self, data: Mapping[str, Any]) -> ValidationResult:
        return ValidationResult(run_rules(search_rules(SHIPMENT_TRANSITIONS.statuses), data))
