"""
MODULE: validators.farm_task_validator
RESPONSIBILITY: Validate farm tasks and derive task priority from the due date.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор полевых задач фермера.

Приоритет задачи не хранится, а вычисляется из due_date:
срок не позже завтрашнего дня (включая просроченные) - high,
в пределах недели - medium, позже - low.
"""

from datetime import date
from typing import Any, List, Mapping, Optional

from config.settings import CatalogRules
from core.models import TaskPriority
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import Rule, error, max_length_field, status_field, string_field, uuid_field
from validators.transitions import FARM_TASK_TRANSITIONS

DUE_DATE_FORMATS = (
    (r"\d{4}-\d{2}-\d{2}", "%Y-%m-%d"),
    (r"\d{2}/\d{2}/\d{4}", "%m/%d/%Y"),
    (r"\d{2},\d{2},\d{4}", "%m,%d,%Y"),
    (r"\d{2}-\d{2}-\d{4}", "%m-%d-%Y"),
)


def parse_due_date(value: Any) -> Optional[date]:
    return p.parse_day(value, DUE_DATE_FORMATS)


def task_priority(due_date: Any, today: date) -> Optional[TaskPriority]:
    """Приоритет задачи относительно `today` (None, если срок не задан или не разобран)"""
    due = parse_due_date(due_date)
    if due is None:
        return None
    if due <= p.days_from(today, 1):
        return TaskPriority.HIGH
    if due <= p.days_from(today, 7):
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


class FarmTaskValidator(EntityValidator):
    """Валидатор задач"""

    entity_type = "farm_tasks"
    required_fields = ("farmer_id", "title")
    transitions = FARM_TASK_TRANSITIONS

    def __init__(self, rules: CatalogRules = None, **kwargs):
        super().__init__(rules or CatalogRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            uuid_field("farmer_id"),
            string_field("title", 1, self.rules.name_max_length),
            max_length_field("description", self.rules.description_max_length),
            status_field(FARM_TASK_TRANSITIONS.statuses),
            self._due_date,
        ]

    def _due_date(self, data: Mapping[str, Any]):
        value = data.get("due_date")
        if value is None or value == "":
            return []
        due = parse_due_date(value)
        if due is None:
            return [error("due_date", "Срок: YYYY-MM-DD, MM/DD/YYYY, MM,DD,YYYY или MM-DD-YYYY",
                          "INVALID_DATE")]
        if due < self.clock().date():
            return [error("due_date", "Срок задачи не может быть в прошлом", "INVALID_DATE")]
        return []
