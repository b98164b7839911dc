"""
MODULE: validators.rules
RESPONSIBILITY: Composable field rules built from primitives.
ALLOWED: validators.primitives, core.contracts, typing.
FORBIDDEN: I/O, database access.
ERRORS: None.

Правило - функция `(data) -> List[ValidationError]`.

Полевые правила срабатывают только если поле передано и не None:
так одно и то же правило работает и для создания, и для частичного
обновления. Обязательность проверяется отдельно
(EntityValidator.validate_required).
"""

import re
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from core.contracts import ValidationError
from validators import primitives as p

Rule = Callable[[Mapping[str, Any]], List[ValidationError]]
Clock = Callable[[], datetime]


def error(field: str, message: str, code: str) -> ValidationError:
    return ValidationError(field=field, message=message, code=code)


def present(data: Mapping[str, Any], field: str) -> bool:
    """Поле передано и не равно None"""
    return data.get(field) is not None


def run_rules(rules: Iterable[Rule], data: Mapping[str, Any]) -> List[ValidationError]:
    """Запуск всех правил без прерывания на первой ошибке"""
    errors: List[ValidationError] = []
    for rule in rules:
        errors.extend(rule(data))
    return errors


def field_check(field: str, predicate: Callable[[Any], bool], message: str, code: str) -> Rule:
    """Базовый конструктор: ошибка, если значение передано и предикат ложен"""
    def check(data: Mapping[str, Any]) -> List[ValidationError]:
        if present(data, field) and not predicate(data[field]):
            return [error(field, message, code)]
        return []
    return check


def uuid_field(field: str) -> Rule:
    return field_check(field, p.is_valid_uuid, f"Поле {field} должно быть UUID", "INVALID_UUID")


def uuid_fields(*fields: str) -> List[Rule]:
    return [uuid_field(field) for field in fields]


def string_field(field: str, min_length: int = 1, max_length: Optional[int] = None,
                 code: str = "INVALID_LENGTH") -> Rule:
    if max_length is None:
        message = f"Поле {field} должно содержать не менее {min_length} символов"
    else:
        message = f"Длина поля {field} должна быть от {min_length} до {max_length} символов"
    return field_check(
        field,
        lambda value: p.is_valid_string(value, min_length, max_length),
        message,
        code,
    )


def max_length_field(field: str, max_length: int, code: str = "INVALID_LENGTH") -> Rule:
    """Ограничение сверху без требования непустоты"""
    return field_check(
        field,
        lambda value: isinstance(value, str) and len(value) <= max_length,
        f"Поле {field} не должно превышать {max_length} символов",
        code,
    )


def enum_field(field: str, allowed: Sequence[str], code: str = "INVALID_VALUE") -> Rule:
    return field_check(
        field,
        lambda value: p.is_valid_enum(value, allowed),
        f"Поле {field} должно быть одним из: {', '.join(allowed)}",
        code,
    )


def status_field(allowed: Sequence[str], field: str = "status") -> Rule:
    return enum_field(field, allowed, code="INVALID_STATUS")


def positive_field(field: str, code: str = "INVALID_NUMBER") -> Rule:
    return field_check(field, p.is_positive_number, f"Поле {field} должно быть положительным числом", code)


def non_negative_field(field: str, code: str = "INVALID_NUMBER") -> Rule:
    return field_check(
        field, p.is_non_negative_number, f"Поле {field} не может быть отрицательным", code
    )


def range_field(field: str, minimum: Optional[float], maximum: Optional[float],
                code: str = "INVALID_VALUE") -> Rule:
    return field_check(
        field,
        lambda value: p.is_within_range(value, minimum, maximum),
        f"Поле {field} должно быть в диапазоне от {minimum} до {maximum}",
        code,
    )


def max_value_field(field: str, maximum: float, code: str = "MAX_VALUE_EXCEEDED") -> Rule:
    """Проверка верхней границы для уже корректного числа"""
    return field_check(
        field,
        lambda value: not p.is_number(value) or value <= maximum,
        f"Поле {field} не может превышать {maximum}",
        code,
    )


def integer_field(field: str, code: str = "INVALID_TYPE") -> Rule:
    return field_check(field, p.is_integer, f"Поле {field} должно быть целым числом", code)


def date_field(field: str, code: str = "INVALID_DATE") -> Rule:
    return field_check(field, p.is_valid_date, f"Поле {field} должно быть корректной датой", code)


def not_future_field(field: str, clock: Clock, code: str = "INVALID_DATE") -> Rule:
    """Дата не позже текущего момента (некорректная дата отсекается date_field)"""
    def predicate(value: Any) -> bool:
        parsed = p.parse_date(value)
        return parsed is None or parsed <= clock()
    return field_check(field, predicate, f"Поле {field} не может быть в будущем", code)


def not_before_today_field(field: str, clock: Clock, code: str = "INVALID_DATE") -> Rule:
    """Календарная дата не раньше сегодняшнего дня"""
    def predicate(value: Any) -> bool:
        parsed = p.parse_date(value)
        return parsed is None or parsed.date() >= clock().date()
    return field_check(field, predicate, f"Поле {field} не может быть в прошлом", code)


def url_field(field: str, code: str = "INVALID_URL") -> Rule:
    return field_check(field, p.is_valid_url, f"Поле {field} должно быть корректным URL", code)


def url_list_field(field: str, max_items: int, count_code: str = "MAX_COUNT") -> Rule:
    """Список URL: ограничение количества и формат каждого элемента"""
    def check(data: Mapping[str, Any]) -> List[ValidationError]:
        if not present(data, field):
            return []
        value = data[field]
        if not p.is_valid_array(value):
            return [error(field, f"Поле {field} должно быть списком", "INVALID_TYPE")]
        errors = []
        if not p.is_valid_array(value, max_items=max_items):
            errors.append(error(field, f"Не более {max_items} элементов в {field}", count_code))
        for index, url in enumerate(value):
            if not p.is_valid_url(url):
                errors.append(error(f"{field}[{index}]", "Некорректный URL", "INVALID_URL"))
        return errors
    return check


def email_field(field: str) -> Rule:
    return field_check(field, p.is_valid_email, "Некорректный адрес электронной почты", "INVALID_EMAIL")


def phone_field(field: str) -> Rule:
    return field_check(field, p.is_valid_phone, "Некорректный номер телефона", "INVALID_PHONE")


def pattern_field(field: str, pattern: "re.Pattern", message: str, code: str = "INVALID_FORMAT") -> Rule:
    return field_check(field, lambda value: p.matches_pattern(value, pattern), message, code)


def clean_content_field(field: str, code: str = "INAPPROPRIATE") -> Rule:
    return field_check(
        field,
        lambda value: not p.contains_inappropriate_content(value),
        f"Поле {field} содержит недопустимое содержимое",
        code,
    )


def distinct_fields(first: str, second: str, message: str, code: str = "INVALID_RELATIONSHIP") -> Rule:
    """Два идентификатора не должны совпадать"""
    def check(data: Mapping[str, Any]) -> List[ValidationError]:
        if present(data, first) and present(data, second) and data[first] == data[second]:
            return [error(second, message, code)]
        return []
    return check


def address_field(field: str, parts: Sequence[str] = ("street", "city", "state", "country", "postal_code")) -> Rule:
    def check(data: Mapping[str, Any]) -> List[ValidationError]:
        if not present(data, field):
            return []
        value = data[field]
        if not isinstance(value, Mapping):
            return [error(field, f"Поле {field} должно быть объектом адреса", "INVALID_ADDRESS")]
        missing = [part for part in parts if not p.is_valid_string(value.get(part))]
        if missing:
            return [error(field, f"В адресе не заполнены: {', '.join(missing)}", "INVALID_ADDRESS")]
        return []
    return check


def search_rules(statuses: Optional[Sequence[str]] = None, max_limit: int = 100,
                 min_query_length: int = 2) -> List[Rule]:
    """Правила параметров поиска: строка запроса, лимит, фильтр статуса"""
    def query(data: Mapping[str, Any]) -> List[ValidationError]:
        text = data.get("query")
        if not isinstance(text, str) or not text.strip():
            return [error("query", "Строка поиска обязательна", "REQUIRED")]
        if len(text.strip()) < min_query_length:
            return [error("query", f"Строка поиска короче {min_query_length} символов", "MIN_LENGTH")]
        return []

    def limit(data: Mapping[str, Any]) -> List[ValidationError]:
        if "limit" not in data:
            return []
        value = data["limit"]
        if not p.is_positive_number(value):
            return [error("limit", "Лимит должен быть положительным числом", "INVALID_NUMBER")]
        if value > max_limit:
            return [error("limit", f"Лимит не может превышать {max_limit}", "MAX_VALUE_EXCEEDED")]
        return []

    rules = [query, limit]
    if statuses:
        rules.append(enum_field("status", statuses))
    return rules
