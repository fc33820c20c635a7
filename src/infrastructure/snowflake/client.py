"""
Snowflake database connection management.

Provides connection factory and context manager for Snowflake operations.
Includes mock mode with in-memory storage for local development.

Using the repository pattern means most code never touches this module
directly - it goes through AthleteRepository and PerformanceRepository,
which handle the translation between domain models and database rows.
"""

import base64
import logging
import re
from contextlib import contextmanager
from typing import Any, Generator, Optional

from .repositories.base import SnowflakeConfig, SnowflakeConnection

logger = logging.getLogger(__name__)


class SnowflakeConnectionError(Exception):
    """Raised when Snowflake connection fails."""
    pass


def _load_private_key(key_bytes: bytes) -> bytes:
    """
    Convert a PEM private key into the DER bytes Snowflake expects.

    Snowflake requires the private key as a bytes object, not a file path.
    """
    from cryptography.hazmat.backends import default_backend
    from cryptography.hazmat.primitives import serialization

    private_key = serialization.load_pem_private_key(
        key_bytes,
        password=None,  # No password on the key
        backend=default_backend()
    )

    return private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )


def _read_private_key(config: SnowflakeConfig) -> Optional[bytes]:
    """Private key from base64 setting or key file, whichever is configured."""
    if config.private_key_base64:
        return _load_private_key(base64.b64decode(config.private_key_base64))
    if config.private_key_path:
        with open(config.private_key_path, 'rb') as key_file:
            return _load_private_key(key_file.read())
    return None


@contextmanager
def get_snowflake_connection(config: SnowflakeConfig) -> Generator[SnowflakeConnection, None, None]:
    """
    Provide Snowflake connection with automatic cleanup.

    Supports both password and key-pair authentication:
    - If a private key (base64 or file) is set, uses key-pair auth
    - Otherwise, uses password auth

    Usage:
        with get_snowflake_connection(config) as conn:
            cursor = conn.cursor()
            # do work
            conn.commit()
    """
    try:
        import snowflake.connector
    except ImportError:
        raise ImportError(
            "snowflake-connector-python is required. "
            "Install with: pip install snowflake-connector-python"
        )

    conn = None
    try:
        connect_params = {
            'account': config.account,
            'user': config.user,
            'database': config.database,
            'schema': config.schema,
            'warehouse': config.warehouse,
            'role': config.role,
            'client_session_keep_alive': True,
        }

        private_key = _read_private_key(config)
        if private_key:
            logger.info("Using key-pair authentication for Snowflake")
            connect_params['private_key'] = private_key
        elif config.password:
            logger.info("Using password authentication for Snowflake")
            connect_params['password'] = config.password
        else:
            raise SnowflakeConnectionError(
                "Either password or a private key must be provided"
            )

        conn = snowflake.connector.connect(**connect_params)

        logger.debug(
            "Established Snowflake connection",
            extra={
                "account": config.account,
                "database": config.database,
                "schema": config.schema,
            }
        )

        yield conn

    except snowflake.connector.errors.DatabaseError as e:
        logger.error(
            "Snowflake connection failed",
            extra={"error": str(e), "account": config.account}
        )
        raise SnowflakeConnectionError(f"Database connection failed: {e}")

    finally:
        if conn:
            try:
                conn.close()
                logger.debug("Closed Snowflake connection")
            except Exception as e:
                logger.warning(
                    "Error closing Snowflake connection",
                    extra={"error": str(e)}
                )


# ---------------------------------------------------------------------------
# Mock Connection for Local Development
# ---------------------------------------------------------------------------

_INSERT_RE = re.compile(
    r"INSERT\s+INTO\s+(\w+)\s*\((.*?)\)\s*VALUES", re.IGNORECASE | re.DOTALL
)
_SELECT_RE = re.compile(
    r"SELECT\s+(.*?)\s+FROM\s+(\w+)(.*)$", re.IGNORECASE | re.DOTALL
)
_DELETE_RE = re.compile(r"DELETE\s+FROM\s+(\w+)(.*)$", re.IGNORECASE | re.DOTALL)
_UPDATE_RE = re.compile(
    r"UPDATE\s+(\w+)\s+SET\s+(.*?)\s+(WHERE\s+.*)$", re.IGNORECASE | re.DOTALL
)
_CLAUSES_RE = re.compile(
    r"^\s*(?:WHERE\s+(?P<where>.*?))?"
    r"\s*(?:ORDER\s+BY\s+(?P<order>.*?))?"
    r"\s*(?:LIMIT\s+(?P<limit>%s))?\s*$",
    re.IGNORECASE | re.DOTALL,
)
_CONDITION_RE = re.compile(r"^(\w+)\s*(<=|=)\s*%s$")
_ASSIGNMENT_RE = re.compile(r"^(\w+)\s*=\s*%s$")


class MockSnowflakeCursor:
    """
    Mock Snowflake cursor for testing.

    Implements just enough of the cursor interface to support the
    repositories without a real database: INSERT with a column list,
    UPDATE with `col = %s` assignments, AND-ed `col = %s` / `col <= %s`
    conditions on SELECT/UPDATE/DELETE, ORDER BY on plain columns, and
    LIMIT.
    """

    def __init__(self, storage: dict[str, list[dict[str, Any]]]) -> None:
        self._storage = storage
        self._results: list[tuple] = []
        self._rowcount: int = 0

    def execute(self, query: str, params: Optional[tuple] = None) -> 'MockSnowflakeCursor':
        """Execute a query against mock storage by pattern matching."""
        logger.debug(
            "Mock cursor execute",
            extra={"query": query[:100], "params": params}
        )

        params = tuple(params or ())
        statement = query.strip()
        keyword = statement.split(None, 1)[0].upper() if statement else ""

        if keyword == 'INSERT':
            self._handle_insert(statement, params)
        elif keyword == 'SELECT':
            self._handle_select(statement, params)
        elif keyword == 'UPDATE':
            self._handle_update(statement, params)
        elif keyword == 'DELETE':
            self._handle_delete(statement, params)
        else:
            raise ValueError(f"Mock cursor cannot execute: {statement[:40]}")

        return self

    def _handle_insert(self, query: str, params: tuple) -> None:
        match = _INSERT_RE.search(query)
        if not match:
            raise ValueError("Unsupported INSERT statement")

        table = match.group(1).lower()
        columns = [c.strip().lower() for c in match.group(2).split(',')]
        if len(columns) != len(params):
            raise ValueError("INSERT column count does not match parameters")

        self._storage.setdefault(table, []).append(dict(zip(columns, params)))
        self._results = []
        self._rowcount = 1

    def _handle_select(self, query: str, params: tuple) -> None:
        match = _SELECT_RE.search(query)
        if not match:
            # SELECT without FROM, e.g. the readiness ping
            self._results = [(1,)]
            self._rowcount = 1
            return

        columns = [c.strip().lower() for c in match.group(1).split(',')]
        table = match.group(2).lower()
        where, order, has_limit = self._parse_clauses(match.group(3))

        rows, remaining = self._matching_rows(table, where, params)
        if order:
            rows = sorted(rows, key=lambda row: tuple(row.get(col) for col in order))
        if has_limit:
            rows = rows[:int(remaining[0])]

        self._results = [tuple(row.get(col) for col in columns) for row in rows]
        self._rowcount = len(self._results)

    def _handle_update(self, query: str, params: tuple) -> None:
        match = _UPDATE_RE.search(query)
        if not match:
            raise ValueError("Unsupported UPDATE statement")

        table = match.group(1).lower()
        columns = []
        for assignment in match.group(2).split(','):
            assign = _ASSIGNMENT_RE.match(assignment.strip())
            if not assign:
                raise ValueError(f"Unsupported assignment: {assignment.strip()}")
            columns.append(assign.group(1).lower())

        # SET parameters come first, then the WHERE parameters
        values, where_params = params[:len(columns)], params[len(columns):]
        where, _, _ = self._parse_clauses(match.group(3))
        rows, _ = self._matching_rows(table, where, where_params)

        for row in rows:
            row.update(zip(columns, values))
        self._results = []
        self._rowcount = len(rows)

    def _handle_delete(self, query: str, params: tuple) -> None:
        match = _DELETE_RE.search(query)
        if not match:
            raise ValueError("Unsupported DELETE statement")

        table = match.group(1).lower()
        where, _, _ = self._parse_clauses(match.group(2))
        doomed, _ = self._matching_rows(table, where, params)

        doomed_ids = {id(row) for row in doomed}
        self._storage[table] = [
            row for row in self._storage.get(table, [])
            if id(row) not in doomed_ids
        ]
        self._results = []
        self._rowcount = len(doomed)

    def _parse_clauses(self, tail: str) -> tuple[list[tuple[str, str]], list[str], bool]:
        match = _CLAUSES_RE.match(tail)
        if not match:
            raise ValueError(f"Unsupported clause: {tail.strip()[:60]}")

        where: list[tuple[str, str]] = []
        if match.group('where'):
            for condition in re.split(r"\s+AND\s+", match.group('where').strip(), flags=re.IGNORECASE):
                cond = _CONDITION_RE.match(condition.strip())
                if not cond:
                    raise ValueError(f"Unsupported condition: {condition.strip()}")
                where.append((cond.group(1).lower(), cond.group(2)))

        order = []
        if match.group('order'):
            order = [c.strip().lower() for c in match.group('order').split(',')]

        return where, order, match.group('limit') is not None

    def _matching_rows(
        self,
        table: str,
        where: list[tuple[str, str]],
        params: tuple,
    ) -> tuple[list[dict[str, Any]], tuple]:
        """Rows satisfying every condition, plus the parameters left over."""
        bound = list(zip(where, params))
        remaining = params[len(where):]

        def matches(row: dict[str, Any]) -> bool:
            for (column, op), value in bound:
                current = row.get(column)
                if op == '=' and current != value:
                    return False
                if op == '<=' and (current is None or current > value):
                    return False
            return True

        return [row for row in self._storage.get(table, []) if matches(row)], remaining

    def fetchone(self):
        """Fetch one row from results."""
        if not self._results:
            return None
        return self._results[0]

    def fetchall(self) -> list:
        """Fetch all rows from results."""
        return self._results

    def close(self) -> None:
        """Close cursor (no-op for mock)."""
        pass

    @property
    def rowcount(self) -> int:
        """Return number of rows affected."""
        return self._rowcount


class MockSnowflakeConnection:
    """
    Mock Snowflake connection for local development.

    Stores data in memory as `{table_name: [row_dict, ...]}` in insertion
    order. This enables running the full API without a real database.

    Not suitable for production, but perfect for:
    - Local development
    - Unit tests
    - CI/CD environments
    """

    def __init__(self) -> None:
        self._storage: dict[str, list[dict[str, Any]]] = {
            'athlete_profiles': [],
            'performance_records': [],
        }
        self._committed = True

        logger.info("Initialized mock Snowflake connection (in-memory)")

    def cursor(self) -> MockSnowflakeCursor:
        """Create a mock cursor."""
        return MockSnowflakeCursor(self._storage)

    def commit(self) -> None:
        """Commit transaction (no-op for mock, always auto-commits)."""
        self._committed = True
        logger.debug("Mock connection commit")

    def rollback(self) -> None:
        """Rollback transaction (no-op for mock)."""
        logger.debug("Mock connection rollback")

    def close(self) -> None:
        """Close connection (no-op for mock)."""
        logger.debug("Mock connection close")

    # Helper methods for testing
    def _rows(self, table: str) -> list[dict[str, Any]]:
        """Raw rows of a table (for test assertions)."""
        return list(self._storage.get(table, []))

    def _clear(self) -> None:
        """Clear all mock storage (for test cleanup)."""
        for table in self._storage.values():
            table.clear()


@contextmanager
def get_mock_snowflake_connection() -> Generator[MockSnowflakeConnection, None, None]:
    """Provide mock Snowflake connection for local development."""
    conn = MockSnowflakeConnection()
    try:
        yield conn
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

@contextmanager
def create_snowflake_connection(
    config: Optional[SnowflakeConfig] = None,
    mock_mode: bool = False,
) -> Generator[SnowflakeConnection, None, None]:
    """
    Create Snowflake connection based on configuration.

    Factory function that returns either a real or mock connection
    depending on mock_mode flag.

    Args:
        config: Snowflake configuration (required if not mock_mode)
        mock_mode: If True, return mock connection for testing

    Yields:
        SnowflakeConnection implementation (real or mock)
    """
    if mock_mode:
        with get_mock_snowflake_connection() as conn:
            yield conn
    else:
        if config is None:
            raise ValueError("config is required when not in mock mode")

        with get_snowflake_connection(config) as conn:
            yield conn
