"""
Database connection management for SQL Server with query utilities
"""

import logging
import re
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, URL, make_url

logger = logging.getLogger(__name__)

SQLSERVER_DIALECT = 'mssql+pyodbc'
DEFAULT_ODBC_DRIVER = 'ODBC Driver 18 for SQL Server'

# ADO.NET style keywords accepted on the command line, mapped to ODBC keywords
ODBC_KEYWORDS: Dict[str, str] = {
    'data source': 'Server',
    'address': 'Server',
    'addr': 'Server',
    'initial catalog': 'Database',
    'user id': 'UID',
    'user': 'UID',
    'password': 'PWD',
    'integrated security': 'Trusted_Connection',
    'trustservercertificate': 'TrustServerCertificate',
    'trust server certificate': 'TrustServerCertificate',
}

_PAIR = re.compile(r'\s*([^=;]+?)\s*=\s*(\{(?:[^}]|\}\})*\}|[^;]*)\s*(?:;|$)')


def split_connection_string(connection_string: str) -> List[Tuple[str, str]]:
    """Split 'key=value;key={va;lue}' into ordered pairs, keeping braced values intact."""
    return [(m.group(1), m.group(2).strip()) for m in _PAIR.finditer(connection_string)
            if m.group(1).strip()]


def to_odbc_connection_string(connection_string: str, odbc_driver: str = DEFAULT_ODBC_DRIVER) -> str:
    """Translate ADO.NET keywords to ODBC ones and add a driver when none is named."""
    pairs = []
    has_driver = False
    for key, value in split_connection_string(connection_string):
        lowered = key.strip().lower()
        if lowered == 'driver':
            has_driver = True
        odbc_key = ODBC_KEYWORDS.get(lowered, key.strip())
        if odbc_key == 'Trusted_Connection' and value.lower() in ('sspi', 'true'):
            value = 'yes'
        pairs.append(f"{odbc_key}={value}")

    if not has_driver:
        pairs.insert(0, f"Driver={{{odbc_driver}}}")
    return ';'.join(pairs)


def build_connection_url(connection_string: str, odbc_driver: str = DEFAULT_ODBC_DRIVER) -> URL:
    """Build the SQLAlchemy URL for a command line connection string.

    Values containing '://' are SQLAlchemy URLs already; anything else is an
    ODBC (or ADO.NET style) connection string handed to pyodbc.
    """
    value = connection_string.strip()
    if '://' in value:
        return make_url(value)
    return URL.create(
        SQLSERVER_DIALECT,
        query={'odbc_connect': to_odbc_connection_string(value, odbc_driver)}
    )


class DatabaseConnection:
    """Manages the single SQL Server connection of an invocation."""

    def __init__(self, connection_string: str, settings: Optional[Dict[str, Any]] = None):
        """Initialize database connection.

        Args:
            connection_string: ODBC connection string or SQLAlchemy URL
            settings: Connection settings (odbc_driver, connect_timeout, echo)
        """
        self.connection_string = connection_string
        self.settings = settings or {}
        self.engine: Optional[Engine] = None
        self.connection: Optional[Connection] = None
        self._query_count = 0
        self._total_query_time = 0.0

    def connect(self) -> Connection:
        """Establish the database connection.

        The connection runs in autocommit mode because BACKUP, RESTORE and
        ALTER DATABASE cannot run inside a user transaction.
        """
        if self.connection is None:
            url = build_connection_url(
                self.connection_string,
                self.settings.get('odbc_driver', DEFAULT_ODBC_DRIVER)
            )
            engine_args: Dict[str, Any] = {
                'echo': self.settings.get('echo', False),
                'isolation_level': 'AUTOCOMMIT',
            }
            if url.get_driver_name() == 'pyodbc':
                engine_args['connect_args'] = {'timeout': self.settings.get('connect_timeout', 30)}

            self.engine = create_engine(url, **engine_args)
            self.connection = self.engine.connect()
            logger.info(f"Opened {url.get_backend_name()} connection")

        return self.connection

    def close(self) -> None:
        """Close the connection and dispose of the engine."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            logger.info(
                f"Closed connection after {self._query_count} statements "
                f"({self._total_query_time:.3f}s)"
            )

    def __enter__(self) -> 'DatabaseConnection':
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a query with named parameters and return the result.

        Args:
            query: SQL text using :name placeholders
            params: Optional query parameters

        Returns:
            SQLAlchemy result
        """
        conn = self.connect()
        start_time = time.time()
        result = conn.execute(text(query), params or {})
        self._record(query, start_time)
        return result

    def fetch_one(self, query: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and fetch one row as a mapping."""
        row = self.execute(query, params).mappings().first()
        return dict(row) if row is not None else None

    def fetch_all(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and fetch all rows as mappings."""
        return [dict(row) for row in self.execute(query, params).mappings()]

    def execute_to_completion(self, statement: str, params: Sequence[Any] = ()) -> None:
        """Run a long running statement and wait until the server finishes it.

        BACKUP and RESTORE report progress as a series of informational result
        sets; the statement only completes once all of them are consumed.

        Args:
            statement: T-SQL using '?' placeholders
            params: Positional parameters
        """
        conn = self.connect()
        start_time = time.time()
        cursor = conn.connection.cursor()
        try:
            if params:
                cursor.execute(statement, tuple(params))
            else:
                cursor.execute(statement)
            while cursor.nextset():
                pass
        finally:
            cursor.close()
        self._record(statement, start_time)

    def _record(self, query: str, start_time: float) -> None:
        duration = time.time() - start_time
        self._query_count += 1
        self._total_query_time += duration
        logger.debug(f"Statement executed in {duration:.3f}s: {' '.join(query.split())}")

    @property
    def stats(self) -> Dict[str, Any]:
        """Get connection statistics."""
        return {
            'query_count': self._query_count,
            'total_query_time': self._total_query_time,
            'avg_query_time': self._total_query_time / max(1, self._query_count)
        }
