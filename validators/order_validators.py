"""
MODULE: validators.order_validators
RESPONSIBILITY: Validate orders, order items and payments.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидаторы заказа, позиции заказа и платежа.
Суммы ограничены снизу и сверху (AMOUNT_TOO_LOW / AMOUNT_TOO_HIGH).
"""

from typing import Any, List, Mapping

from config.settings import OrderRules, PaymentRules
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, address_field, error, field_check, max_value_field, positive_field,
    status_field, uuid_field, uuid_fields,
)
from validators.transitions import ORDER_TRANSITIONS, PAYMENT_TRANSITIONS


def amount_bounds(field: str, minimum: float, maximum: float) -> Rule:
    """Сумма в пределах [minimum, maximum] для положительного числа"""
    def check(data: Mapping[str, Any]):
        value = data.get(field)
        if not p.is_positive_number(value):
            return []
        if value < minimum:
            return [error(field, f"Сумма не может быть меньше {minimum}", "AMOUNT_TOO_LOW")]
        if value > maximum:
            return [error(field, f"Сумма не может превышать {maximum}", "AMOUNT_TOO_HIGH")]
        return []
    return check


class OrderValidator(EntityValidator):
    entity_type = "orders"
    required_fields = ("buyer_id", "total_amount")
    transitions = ORDER_TRANSITIONS

    def __init__(self, rules: OrderRules = None, **kwargs):
        super().__init__(rules or OrderRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            *uuid_fields("buyer_id", "seller_id"),
            positive_field("total_amount", code="INVALID_AMOUNT"),
            amount_bounds("total_amount", self.rules.min_amount, self.rules.max_amount),
            address_field("shipping_address"),
            status_field(ORDER_TRANSITIONS.statuses),
        ]


class OrderItemValidator(EntityValidator):
    entity_type = "order_items"
    required_fields = ("order_id", "listing_id", "quantity", "price_at_purchase")

    def __init__(self, rules: OrderRules = None, **kwargs):
        super().__init__(rules or OrderRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            *uuid_fields("order_id", "listing_id"),
            positive_field("quantity", code="INVALID_QUANTITY"),
            max_value_field("quantity", self.rules.max_quantity_per_item, code="QUANTITY_TOO_HIGH"),
            positive_field("price_at_purchase", code="INVALID_PRICE"),
            max_value_field("price_at_purchase", self.rules.max_price_per_unit, code="PRICE_TOO_HIGH"),
        ]


class PaymentValidator(EntityValidator):
    """Платеж по заказу через Stripe"""

    entity_type = "payments"
    required_fields = ("order_id", "amount")
    transitions = PAYMENT_TRANSITIONS

    def __init__(self, rules: PaymentRules = None, **kwargs):
        super().__init__(rules or PaymentRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            uuid_field("order_id"),
            positive_field("amount", code="INVALID_AMOUNT"),
            amount_bounds("amount", self.rules.min_amount, self.rules.max_amount),
            status_field(PAYMENT_TRANSITIONS.statuses),
            field_check("stripe_charge_id", p.is_valid_stripe_id,
                        "Идентификатор Stripe должен начинаться с ch_ или pi_", "INVALID_STRIPE_ID"),
        ]
