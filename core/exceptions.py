"""
MODULE: core.exceptions
RESPONSIBILITY: Define core-specific exception classes.
ALLOWED: Inheriting from MarketplaceError.
FORBIDDEN: Business logic.
ERRORS: None.

Пользовательские исключения приложения.
Исключения живут только внутри слоя доступа к данным: репозитории
переводят их в типизированные результаты и наружу не пробрасывают.
"""
from typing import Optional


class MarketplaceError(Exception):
    """Базовое исключение приложения"""
    pass


class DatabaseConnectionError(MarketplaceError):
    """Ошибка подключения к базе данных"""
    pass


class DatabaseQueryError(MarketplaceError):
    """Ошибка выполнения запроса к базе данных"""

    def __init__(self, message: str, pgcode: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        super().__init__(message)
        self.pgcode = pgcode
        self.original_error = original_error


class QueryBuildError(MarketplaceError):
    """Ошибка построения SQL запроса (неизвестная колонка или оператор)"""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column


class ConfigurationError(MarketplaceError):
    """Ошибка конфигурации приложения"""
    pass
