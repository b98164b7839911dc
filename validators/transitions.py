"""
MODULE: validators.transitions
RESPONSIBILITY: Status transition graphs of entity lifecycles.
ALLOWED: core.contracts, typing.
FORBIDDEN: I/O, database access.
ERRORS: None (violations are returned as ValidationError).

Граф переходов статусов.

Переход разрешен, только если целевой статус достижим из текущего за один шаг.
Переход в тот же статус разрешен, только если в графе есть петля.
"""

from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

from core.contracts import ValidationError, ValidationResult


class StatusTransitionGraph:
    """
    Конечный автомат статусов сущности

    Attributes:
        entity: Имя сущности (для сообщений)
        edges: Статус -> множество статусов, достижимых за один шаг
    """

    def __init__(self, entity: str, edges: Mapping[str, Iterable[str]], field: str = "status"):
        self.entity = entity
        self.field = field
        self.edges: Dict[str, FrozenSet[str]] = {
            status: frozenset(targets) for status, targets in edges.items()
        }
        unknown = {target for targets in self.edges.values() for target in targets} - set(self.edges)
        if unknown:
            raise ValueError(f"Граф {entity}: переходы в необъявленные статусы {sorted(unknown)}")

    @property
    def statuses(self) -> Tuple[str, ...]:
        return tuple(self.edges)

    def next_statuses(self, current: str) -> FrozenSet[str]:
        return self.edges.get(current, frozenset())

    def is_terminal(self, status: str) -> bool:
        return status in self.edges and not self.edges[status]

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.next_statuses(current)

    def validate(self, current: str, target: str) -> ValidationResult:
        """
        Проверка перехода current -> target

        Все нарушения собираются: неизвестный текущий и неизвестный целевой
        статус дают по ошибке INVALID_STATUS, недостижимый целевой -
        INVALID_TRANSITION.
        """
        errors: List[ValidationError] = []
        if current not in self.edges:
            errors.append(ValidationError(
                self.field, f"Неизвестный текущий статус {self.entity}: {current}", "INVALID_STATUS"
            ))
        if target not in self.edges:
            errors.append(ValidationError(
                self.field, f"Неизвестный статус {self.entity}: {target}", "INVALID_STATUS"
            ))
        if not errors and not self.can_transition(current, target):
            allowed = ", ".join(sorted(self.next_statuses(current))) or "нет"
            errors.append(ValidationError(
                self.field,
                f"Переход {self.entity} из {current} в {target} запрещен (допустимо: {allowed})",
                "INVALID_TRANSITION",
            ))
        return ValidationResult(errors)

    def describe(self) -> List[str]:
        return [
            f"{status} -> {', '.join(sorted(targets)) if targets else '(конечный)'}"
            for status, targets in self.edges.items()
        ]


FARM_TASK_TRANSITIONS = StatusTransitionGraph("farm_task", {
    "pending": {"in_progress", "completed"},
    "in_progress": {"completed", "pending"},
    "completed": {"in_progress"},
})

LISTING_TRANSITIONS = StatusTransitionGraph("product_listing", {
    "available": {"sold_out", "delisted"},
    "sold_out": {"available", "delisted"},
    "delisted": {"available"},
})

ORDER_TRANSITIONS = StatusTransitionGraph("order", {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
})

PAYMENT_TRANSITIONS = StatusTransitionGraph("payment", {
    "pending": {"succeeded", "failed"},
    "failed": {"pending"},
    "succeeded": set(),
})

REVIEW_TRANSITIONS = StatusTransitionGraph("review", {
    "pending": {"approved", "rejected", "flagged"},
    "approved": {"flagged"},
    "flagged": {"approved", "rejected"},
    "rejected": {"pending"},
})

CERTIFICATION_TRANSITIONS = StatusTransitionGraph("certification", {
    "pending": {"verified", "rejected"},
    "verified": {"expired", "suspended"},
    "rejected": {"pending"},
    "expired": {"pending"},
    "suspended": {"verified", "rejected"},
})

QUALITY_REPORT_TRANSITIONS = StatusTransitionGraph("quality_report", {
    "pending": {"under_review", "rejected"},
    "under_review": {"approved", "rejected", "pending"},
    "approved": set(),
    "rejected": {"pending"},
})

_NEGOTIATION_OPEN = {"accepted", "rejected", "counter_offered", "expired"}

NEGOTIATION_TRANSITIONS = StatusTransitionGraph("negotiation", {
    "pending": _NEGOTIATION_OPEN,
    "counter_offered": _NEGOTIATION_OPEN,
    "accepted": set(),
    "rejected": set(),
    "expired": {"pending"},
})

SHIPMENT_TRANSITIONS = StatusTransitionGraph("shipment", {
    "pending": {"picked_up", "cancelled"},
    "picked_up": {"in_transit", "cancelled"},
    "in_transit": {"out_for_delivery", "delivered", "failed"},
    "out_for_delivery": {"delivered", "failed"},
    "failed": {"in_transit", "returned"},
    "delivered": set(),
    "returned": set(),
    "cancelled": set(),
})

MESSAGE_TRANSITIONS = StatusTransitionGraph("message", {
    "sent": {"delivered", "read", "deleted"},
    "delivered": {"read", "deleted"},
    "read": {"deleted"},
    "deleted": set(),
})

DISPUTE_TRANSITIONS = StatusTransitionGraph("dispute", {
    "open": {"under_review", "closed"},
    "under_review": {"resolved", "rejected", "escalated"},
    "escalated": {"resolved", "rejected"},
    "resolved": {"closed"},
    "rejected": {"closed", "open"},
    "closed": set(),
})

INVENTORY_TRANSITIONS = StatusTransitionGraph("retailer_inventory", {
    "active": {"low_stock", "out_of_stock", "discontinued"},
    "low_stock": {"active", "out_of_stock", "discontinued"},
    "out_of_stock": {"active", "low_stock", "discontinued"},
    "discontinued": {"active"},
})

BLOCKCHAIN_TX_TRANSITIONS = StatusTransitionGraph("blockchain_tx_reference", {
    "pending": {"confirmed", "failed"},
    "failed": {"pending"},
    "confirmed": set(),
})
