"""Unit tests for connection string handling and DatabaseConnection."""

from unittest.mock import MagicMock, patch

import pytest

from src.sqlbackup.arguments import resolve_connection_alias
from src.sqlbackup.core.database import (
    DatabaseConnection,
    build_connection_url,
    split_connection_string,
    to_odbc_connection_string,
)


class TestConnectionStrings:
    """Test translation of command line connection strings."""

    def test_split_keeps_braced_values(self):
        pairs = split_connection_string("Driver={ODBC Driver 18 for SQL Server};PWD={a;b};Server=x")
        assert pairs == [
            ('Driver', '{ODBC Driver 18 for SQL Server}'),
            ('PWD', '{a;b}'),
            ('Server', 'x'),
        ]

    def test_ado_keywords_translated(self):
        result = to_odbc_connection_string(
            "Data Source=db1;Initial Catalog=master;User Id=backup;Password=pw"
        )
        assert result == (
            "Driver={ODBC Driver 18 for SQL Server};Server=db1;Database=master;UID=backup;PWD=pw"
        )

    def test_integrated_security(self):
        result = to_odbc_connection_string("Server=.;Integrated Security=SSPI", 'SQL Server')
        assert result == "Driver={SQL Server};Server=.;Trusted_Connection=yes"

    def test_explicit_driver_kept(self):
        value = "Driver={FreeTDS};Server=db1;Port=1433"
        assert to_odbc_connection_string(value) == value

    def test_alias_builds_odbc_url(self):
        url = build_connection_url(resolve_connection_alias('LOCAL'))
        assert url.drivername == 'mssql+pyodbc'
        assert 'MSSQLLocalDB' in url.query['odbc_connect']
        assert url.query['odbc_connect'].startswith('Driver={ODBC Driver 18 for SQL Server}')

    def test_sqlalchemy_url_passed_through(self):
        url = build_connection_url('mssql+pyodbc://sa:pw@db1/master?driver=FreeTDS')
        assert url.host == 'db1'
        assert url.username == 'sa'
        assert url.database == 'master'


class TestDatabaseConnection:
    """Test engine creation and statement execution with a mocked engine."""

    @pytest.fixture
    def engine(self):
        with patch('src.sqlbackup.core.database.create_engine') as create_engine:
            yield create_engine

    def test_connect_uses_autocommit(self, engine):
        connection = DatabaseConnection('Server=x', {'connect_timeout': 7})
        connection.connect()

        _, kwargs = engine.call_args
        assert kwargs['isolation_level'] == 'AUTOCOMMIT'
        assert kwargs['connect_args'] == {'timeout': 7}
        engine.return_value.connect.assert_called_once()

    def test_connect_is_idempotent(self, engine):
        connection = DatabaseConnection('Server=x')
        assert connection.connect() is connection.connect()
        assert engine.call_count == 1

    def test_close_disposes_engine(self, engine):
        with DatabaseConnection('Server=x') as connection:
            sql_connection = connection.connection
        sql_connection.close.assert_called_once()
        engine.return_value.dispose.assert_called_once()
        assert connection.engine is None

    def test_fetch_all_returns_dicts(self, engine):
        connection = DatabaseConnection('Server=x')
        result = MagicMock()
        result.mappings.return_value = [{'name': 'a'}, {'name': 'b'}]
        engine.return_value.connect.return_value.execute.return_value = result

        assert connection.fetch_all("SELECT name FROM t WHERE x = :x", {'x': 1}) == [
            {'name': 'a'}, {'name': 'b'}
        ]
        assert connection.stats['query_count'] == 1

    def test_fetch_one_without_rows(self, engine):
        connection = DatabaseConnection('Server=x')
        result = MagicMock()
        result.mappings.return_value.first.return_value = None
        engine.return_value.connect.return_value.execute.return_value = result

        assert connection.fetch_one("SELECT 1") is None

    def test_execute_to_completion_drains_result_sets(self, engine):
        connection = DatabaseConnection('Server=x')
        cursor = engine.return_value.connect.return_value.connection.cursor.return_value
        cursor.nextset.side_effect = [True, True, False]

        connection.execute_to_completion("BACKUP DATABASE [a] TO DISK = ?", ['a.bak'])

        cursor.execute.assert_called_once_with("BACKUP DATABASE [a] TO DISK = ?", ('a.bak',))
        assert cursor.nextset.call_count == 3
        cursor.close.assert_called_once()

    def test_execute_to_completion_without_params(self, engine):
        connection = DatabaseConnection('Server=x')
        cursor = engine.return_value.connect.return_value.connection.cursor.return_value
        cursor.nextset.return_value = False

        connection.execute_to_completion("ALTER DATABASE [a] SET ONLINE")

        cursor.execute.assert_called_once_with("ALTER DATABASE [a] SET ONLINE")

    def test_cursor_closed_on_error(self, engine):
        connection = DatabaseConnection('Server=x')
        cursor = engine.return_value.connect.return_value.connection.cursor.return_value
        cursor.execute.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            connection.execute_to_completion("RESTORE DATABASE [a] FROM DISK = ?", ['x'])
        cursor.close.assert_called_once()
