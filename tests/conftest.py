"""
Общие фикстуры тестов.

База данных заменяется MagicMock с методами execute_query / execute_update,
время фиксировано, поэтому PostgreSQL для тестов не нужен.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from loguru import logger

from validators.registry import ValidatorRegistry

FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def registry():
    return ValidatorRegistry(clock=fixed_clock)


@pytest.fixture
def db_manager():
    """Менеджер БД, записывающий запросы; результаты задаются в тесте"""
    manager = MagicMock()
    manager.execute_query.return_value = []
    manager.execute_update.return_value = 0
    return manager


@pytest.fixture
def log_messages():
    """Сообщения loguru, записанные во время теста"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)
