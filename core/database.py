"""
MODULE: core.database
RESPONSIBILITY: Low-level PostgreSQL connection management.
ALLOWED: psycopg2, loguru.
FORBIDDEN: Business logic, entity-specific operations (use repositories).
ERRORS: DatabaseConnectionError, DatabaseQueryError.

Менеджер базы данных маркетплейса.

Один экземпляр на процесс создается контейнером зависимостей.
Каждый запрос выполняется в своей транзакции: commit при успехе,
rollback при ошибке psycopg2.
"""

from typing import List, Dict, Any, Optional, Tuple

import psycopg2
from psycopg2.extras import RealDictCursor
from loguru import logger

from config.settings import DatabaseConfig
from core.exceptions import DatabaseConnectionError, DatabaseQueryError


class DatabaseManager:
    """
    Менеджер для работы с PostgreSQL базой данных

    Attributes:
        db_config: Конфигурация подключения к БД
        connection: Активное подключение к PostgreSQL
    """

    def __init__(self, db_config: DatabaseConfig):
        self.db_config = db_config
        self.connection: Optional[psycopg2.extensions.connection] = None

    def connect(self) -> None:
        """
        Установка соединения с базой данных

        Raises:
            DatabaseConnectionError: При ошибке подключения
        """
        try:
            self.connection = psycopg2.connect(
                host=self.db_config.host,
                database=self.db_config.database,
                user=self.db_config.user,
                password=self.db_config.password,
                port=self.db_config.port,
                cursor_factory=RealDictCursor
            )
            logger.info(f"Успешное подключение к БД: {self.db_config.database}")

        except psycopg2.OperationalError as e:
            error_msg = f"Ошибка подключения к БД {self.db_config.database}: {e}"
            logger.error(error_msg)
            raise DatabaseConnectionError(error_msg) from e

    def _ensure_connection(self) -> None:
        if self.connection is None or self.connection.closed:
            raise DatabaseConnectionError("Нет активного подключения к БД")

    def execute_query(self, query: str, params: Optional[Tuple] = None) -> List[Dict[str, Any]]:
        """
        Выполнение SQL запроса

        SELECT и запросы с RETURNING возвращают строки, остальные - пустой список.

        Args:
            query: SQL запрос
            params: Параметры для запроса

        Returns:
            Список словарей с результатами

        Raises:
            DatabaseConnectionError: Если подключения нет
            DatabaseQueryError: При ошибке выполнения запроса
        """
        self._ensure_connection()

        try:
            with self.connection.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query, params or ())

                # description не None, значит запрос вернул строки
                if cursor.description is not None:
                    result = [dict(row) for row in cursor.fetchall()]
                else:
                    result = []
                self.connection.commit()
                logger.debug(f"Выполнен запрос, возвращено {len(result)} строк")
                return result

        except psycopg2.OperationalError as e:
            self.connection.rollback()
            error_msg = f"Потеряно соединение с БД: {e}"
            logger.error(error_msg)
            raise DatabaseConnectionError(error_msg) from e
        except psycopg2.Error as e:
            self.connection.rollback()
            error_msg = f"Ошибка выполнения запроса: {e}\nЗапрос: {query}"
            logger.error(error_msg)
            raise DatabaseQueryError(error_msg, pgcode=e.pgcode, original_error=e) from e

    def execute_update(self, query: str, params: Optional[Tuple] = None) -> int:
        """
        Выполнение INSERT/UPDATE/DELETE запроса

        Returns:
            Количество затронутых строк

        Raises:
            DatabaseQueryError: При ошибке выполнения запроса
        """
        self._ensure_connection()

        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query, params or ())
                affected_rows = cursor.rowcount
                self.connection.commit()
                logger.debug(f"Выполнен DML запрос, затронуто строк: {affected_rows}")
                return affected_rows

        except psycopg2.OperationalError as e:
            self.connection.rollback()
            error_msg = f"Потеряно соединение с БД: {e}"
            logger.error(error_msg)
            raise DatabaseConnectionError(error_msg) from e
        except psycopg2.Error as e:
            self.connection.rollback()
            error_msg = f"Ошибка выполнения DML запроса: {e}"
            logger.error(error_msg)
            raise DatabaseQueryError(error_msg, pgcode=e.pgcode, original_error=e) from e

    def execute_single_value(self, query: str, params: Optional[Tuple] = None) -> Any:
        """
        Выполнение запроса, возвращающего одно значение

        Returns:
            Единичное значение из первой строки первого столбца
        """
        results = self.execute_query(query, params)
        if results and results[0]:
            return list(results[0].values())[0]
        return None

    def check_connection(self) -> bool:
        """Проверка активности соединения"""
        try:
            if self.connection and not self.connection.closed:
                self.execute_query("SELECT 1")
                return True
            return False
        except (DatabaseConnectionError, DatabaseQueryError):
            return False

    def close(self) -> None:
        """Закрытие соединения с БД"""
        try:
            if self.connection and not self.connection.closed:
                self.connection.close()
                logger.info("Соединение с БД закрыто")
        except psycopg2.Error as e:
            logger.warning(f"Ошибка при закрытии соединения с БД: {e}")
        finally:
            self.connection = None

    def __enter__(self):
        """Поддержка контекстного менеджера"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Автоматическое закрытие соединения"""
        self.close()
