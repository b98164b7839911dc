"""
MODULE: validators.primitives
RESPONSIBILITY: Pure predicate functions shared by all entity validators.
ALLOWED: re, datetime, urllib.parse, typing.
FORBIDDEN: I/O, database access, logging of payload data.
ERRORS: None (predicates return bool / None, never raise).

Примитивы валидации.

Все функции чистые: одинаковый вход дает одинаковый результат.
Функции, зависящие от текущего времени, принимают `now` / `today`
для детерминированных проверок.
"""

import re
from datetime import date, datetime, timedelta, timezone
from numbers import Real
from typing import Any, Iterable, Optional, Tuple
from urllib.parse import urlparse

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
STRIPE_ID_PATTERN = re.compile(r"^(ch_|pi_)[a-zA-Z0-9_]+$")
TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

TRACKING_NUMBER_PATTERNS = (
    re.compile(r"^[A-Z0-9]{10,35}$"),
    re.compile(r"^[0-9]{12,22}$"),
    re.compile(r"^1Z[A-Z0-9]{16}$"),  # UPS
    re.compile(r"^[0-9]{14}$"),
    re.compile(r"^[0-9]{12}$"),  # FedEx
    re.compile(r"^9[0-9]{21}$"),  # USPS
    re.compile(r"^[A-Z]{2}[0-9]{9}[A-Z]{2}$"),  # UPU S10
)

INAPPROPRIATE_WORDS = re.compile(r"\b(spam|scam|fraud|fake)\b", re.IGNORECASE)
PROFANITY = re.compile(r"\b(fuck|shit|damn|bitch)\b", re.IGNORECASE)
REPEATED_CHARS = re.compile(r"(.)\1{4,}")
SUSPICIOUS_CHARS = re.compile(r"[^\w\s.,!?\-]")
SUSPICIOUS_CHAR_DENSITY = 0.3


def is_required(value: Any) -> bool:
    """Значение присутствует: не None и не пустая строка"""
    return value is not None and value != ""


def is_number(value: Any) -> bool:
    """Число, но не bool"""
    return isinstance(value, Real) and not isinstance(value, bool)


def is_valid_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(UUID_PATTERN.match(value))


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def is_valid_phone(value: Any) -> bool:
    """Телефон в формате E.164, пробелы, дефисы и скобки игнорируются"""
    if not isinstance(value, str):
        return False
    cleaned = re.sub(r"[\s\-()]", "", value)
    return bool(PHONE_PATTERN.match(cleaned))


def is_valid_url(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_string(value: Any, min_length: int = 1, max_length: Optional[int] = None) -> bool:
    """Строка, длина которой после обрезки пробелов лежит в [min_length, max_length]"""
    if not isinstance(value, str):
        return False
    length = len(value.strip())
    if length < min_length:
        return False
    return max_length is None or length <= max_length


def is_within_range(value: Any, minimum: Optional[float] = None, maximum: Optional[float] = None) -> bool:
    if not is_number(value):
        return False
    if minimum is not None and value < minimum:
        return False
    return maximum is None or value <= maximum


def is_positive_number(value: Any) -> bool:
    return is_number(value) and value > 0


def is_non_negative_number(value: Any) -> bool:
    return is_number(value) and value >= 0


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def is_valid_array(value: Any, min_items: int = 0, max_items: Optional[int] = None) -> bool:
    if not isinstance(value, (list, tuple)):
        return False
    if len(value) < min_items:
        return False
    return max_items is None or len(value) <= max_items


def is_valid_enum(value: Any, allowed: Iterable[str]) -> bool:
    return isinstance(value, str) and value in tuple(allowed)


def matches_pattern(value: Any, pattern: "re.Pattern") -> bool:
    return isinstance(value, str) and bool(pattern.match(value))


def is_valid_stripe_id(value: Any) -> bool:
    return matches_pattern(value, STRIPE_ID_PATTERN)


def is_valid_tx_hash(value: Any) -> bool:
    return matches_pattern(value, TX_HASH_PATTERN)


def is_valid_tracking_number(value: Any) -> bool:
    """Номер отслеживания известного перевозчика (6..35 символов)"""
    if not isinstance(value, str) or not 6 <= len(value) <= 35:
        return False
    return any(pattern.match(value) for pattern in TRACKING_NUMBER_PATTERNS)


def utc_now() -> datetime:
    """Текущее время UTC без tzinfo (все даты сравниваются в наивном UTC)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Разбор даты/времени в наивный UTC datetime

    Принимает datetime, date и ISO 8601 строки (включая суффикс Z).
    Неразбираемые значения дают None.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_day(value: Any, formats: Iterable[Tuple[str, str]]) -> Optional[date]:
    """
    Разбор календарной даты по строгим форматам

    formats - пары (регулярное выражение, формат strptime). Строка должна
    целиком совпасть с выражением, иначе формат не пробуется.
    Объекты date и datetime принимаются как есть.
    """
    if isinstance(value, date):
        return parse_date(value).date()
    if not isinstance(value, str):
        return None
    text = value.strip()
    for pattern, fmt in formats:
        if re.fullmatch(pattern, text):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                return None
    return None


def is_valid_date(value: Any) -> bool:
    return parse_date(value) is not None


def is_future_date(value: Any, now: Optional[datetime] = None) -> bool:
    parsed = parse_date(value)
    return parsed is not None and parsed > (now or utc_now())


def is_past_date(value: Any, now: Optional[datetime] = None) -> bool:
    parsed = parse_date(value)
    return parsed is not None and parsed < (now or utc_now())


def months_between(start: datetime, end: datetime) -> int:
    """Разница в календарных месяцах без учета дней"""
    return (end.year - start.year) * 12 + (end.month - start.month)


def days_from(today: date, days: int) -> date:
    return today + timedelta(days=days)


def contains_inappropriate_content(text: Any) -> bool:
    """
    Эвристика спама / неприемлемого содержимого

    Срабатывает на стоп-слова, ненормативную лексику, символ, повторенный
    пять и более раз подряд, и на высокую долю подозрительных спецсимволов.
    """
    if not isinstance(text, str) or not text:
        return False
    if INAPPROPRIATE_WORDS.search(text) or PROFANITY.search(text):
        return True
    if REPEATED_CHARS.search(text):
        return True
    visible = [ch for ch in text if not ch.isspace()]
    if not visible:
        return False
    suspicious = len(SUSPICIOUS_CHARS.findall(text))
    return suspicious / len(visible) > SUSPICIOUS_CHAR_DENSITY
