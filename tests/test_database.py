"""
Тесты DatabaseManager на подмененном соединении psycopg2.
"""

from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from config.settings import DatabaseConfig
from core.database import DatabaseManager
from core.exceptions import DatabaseConnectionError, DatabaseQueryError

DB_CONFIG = DatabaseConfig(host="localhost", database="marketplace", user="postgres", password="", port=5432)


@pytest.fixture
def connected():
    """Менеджер с MagicMock-соединением и курсором"""
    manager = DatabaseManager(DB_CONFIG)
    connection = MagicMock()
    connection.closed = 0
    cursor = connection.cursor.return_value.__enter__.return_value
    manager.connection = connection
    return manager, connection, cursor


class TestExecuteQuery:
    def test_rows_are_returned_as_dicts(self, connected):
        manager, connection, cursor = connected
        cursor.description = [("id",)]
        cursor.fetchall.return_value = [{"id": "o-1"}]
        assert manager.execute_query("SELECT id FROM orders WHERE id = %s", ("o-1",)) == [{"id": "o-1"}]
        cursor.execute.assert_called_once_with("SELECT id FROM orders WHERE id = %s", ("o-1",))
        connection.commit.assert_called_once()

    def test_statement_without_rows(self, connected):
        manager, _, cursor = connected
        cursor.description = None
        assert manager.execute_query("SET TIME ZONE 'UTC'") == []
        cursor.fetchall.assert_not_called()

    def test_lost_connection(self, connected):
        manager, connection, cursor = connected
        cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")
        with pytest.raises(DatabaseConnectionError):
            manager.execute_query("SELECT 1")
        connection.rollback.assert_called_once()

    def test_query_error_keeps_sqlstate(self, connected):
        manager, connection, cursor = connected
        cursor.execute.side_effect = psycopg2.Error("duplicate key")
        with pytest.raises(DatabaseQueryError) as excinfo:
            manager.execute_query("INSERT INTO orders (id) VALUES (%s)", ("o-1",))
        assert excinfo.value.pgcode is None
        assert isinstance(excinfo.value.original_error, psycopg2.Error)
        connection.rollback.assert_called_once()

    def test_without_connection(self):
        with pytest.raises(DatabaseConnectionError):
            DatabaseManager(DB_CONFIG).execute_query("SELECT 1")


class TestConnectionLifecycle:
    def test_execute_update_returns_rowcount(self, connected):
        manager, _, cursor = connected
        cursor.rowcount = 3
        assert manager.execute_update("DELETE FROM messages WHERE status = %s", ("deleted",)) == 3

    def test_single_value(self, connected):
        manager, _, cursor = connected
        cursor.description = [("count",)]
        cursor.fetchall.return_value = [{"count": 12}]
        assert manager.execute_single_value("SELECT COUNT(*) AS count FROM orders") == 12

    def test_connect_failure(self):
        with patch("core.database.psycopg2.connect",
                   side_effect=psycopg2.OperationalError("could not connect")):
            with pytest.raises(DatabaseConnectionError):
                DatabaseManager(DB_CONFIG).connect()

    def test_close_forgets_connection(self, connected):
        manager, connection, _ = connected
        manager.close()
        connection.close.assert_called_once()
        assert manager.connection is None
        assert not manager.check_connection()
