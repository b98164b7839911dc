"""
MODULE: validators.message_validator
RESPONSIBILITY: Validate direct messages between marketplace participants.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор сообщений.
"""

from typing import Any, List, Mapping

from config.settings import MessageRules
from core.contracts import ValidationResult
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, clean_content_field, distinct_fields, error, status_field, string_field,
    url_list_field, uuid_fields,
)
from validators.transitions import MESSAGE_TRANSITIONS

BULK_OPERATIONS = ("read", "delete", "archive")


def _limit_offset_errors(data: Mapping[str, Any]):
    errors = []
    limit = data.get("limit")
    if limit is not None and not p.is_within_range(limit, 1, 100):
        errors.append(error("limit", "Лимит должен быть от 1 до 100", "RANGE"))
    offset = data.get("offset")
    if offset is not None and not p.is_non_negative_number(offset):
        errors.append(error("offset", "Смещение не может быть отрицательным", "INVALID"))
    return errors


class MessageValidator(EntityValidator):
    """Валидатор сообщений"""

    entity_type = "messages"
    required_fields = ("sender_id", "receiver_id", "content")
    transitions = MESSAGE_TRANSITIONS

    def __init__(self, rules: MessageRules = None, **kwargs):
        super().__init__(rules or MessageRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            *uuid_fields("sender_id", "receiver_id", "order_id"),
            string_field("content", self.rules.min_content_length, self.rules.max_content_length),
            clean_content_field("content", code="SPAM"),
            url_list_field("attachment_urls", self.rules.max_attachments, count_code="MAX_COUNT"),
            status_field(MESSAGE_TRANSITIONS.statuses),
        ]

    def cross_rules(self) -> List[Rule]:
        return [distinct_fields("sender_id", "receiver_id", "Нельзя отправить сообщение самому себе",
                                code="INVALID")]

    def validate_search(self, data: Mapping[str, Any]) -> ValidationResult:
        errors = []
        query = data.get("query")
        if query is not None:
            if not isinstance(query, str) or len(query) < 2:
                errors.append(error("query", "Строка поиска короче 2 символов", "MIN_LENGTH"))
            elif len(query) > 100:
                errors.append(error("query", "Строка поиска длиннее 100 символов", "MAX_LENGTH"))
        errors.extend(_limit_offset_errors(data))
        return ValidationResult(errors)

    def validate_conversation(self, data: Mapping[str, Any]) -> ValidationResult:
        """Параметры переписки двух пользователей"""
        errors = []
        first, second = data.get("user_id_1"), data.get("user_id_2")
        if not first:
            errors.append(error("user_id_1", "Не указан первый пользователь", "REQUIRED"))
        if not second:
            errors.append(error("user_id_2", "Не указан второй пользователь", "REQUIRED"))
        if first and second and first == second:
            errors.append(error("user_id_2", "Нельзя открыть переписку с самим собой", "INVALID"))
        errors.extend(_limit_offset_errors(data))
        return ValidationResult(errors)

    def validate_bulk_operation(self, data: Mapping[str, Any]) -> ValidationResult:
        errors = []
        message_ids = data.get("message_ids") or []
        if not message_ids:
            errors.append(error("message_ids", "Не указаны сообщения", "REQUIRED"))
        elif len(message_ids) > self.rules.max_bulk_ids:
            errors.append(error("message_ids",
                                f"Не более {self.rules.max_bulk_ids} сообщений за раз", "MAX_COUNT"))
        operation = data.get("operation")
        if not operation:
            errors.append(error("operation", "Не указана операция", "REQUIRED"))
        elif operation not in BULK_OPERATIONS:
            errors.append(error("operation", f"Операция должна быть одной из: {', '.join(BULK_OPERATIONS)}",
                                "INVALID"))
        return ValidationResult(errors)
