"""
Shared pieces for the Snowflake repositories.

The connection protocol lives here so that repositories, the real
connection factory and the in-memory mock all agree on one interface
without importing snowflake-connector-python.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol


class SnowflakeConnection(Protocol):
    """
    Protocol for Snowflake connections.

    Using a protocol means tests can provide a mock without
    importing the actual snowflake-connector-python.
    """

    def cursor(self): ...
    def commit(self) -> None: ...


@dataclass
class SnowflakeConfig:
    """Configuration for Snowflake connection."""
    account: str
    user: str
    password: Optional[str] = None
    private_key_path: Optional[str] = None
    private_key_base64: Optional[str] = None
    database: str = "TALENTTRACK"
    schema: str = "PERFORMANCE"
    warehouse: str = "COMPUTE_WH"
    role: Optional[str] = None


class RepositoryError(Exception):
    """Base class for record store errors."""
    pass


def build_where_clause(criteria: dict[str, Any]) -> tuple[str, tuple]:
    """
    Turn `{column: value}` equality criteria into a WHERE clause.

    Keys ending in `__lte` become inclusive upper bounds, e.g.
    `{"age__lte": 18}` -> `age <= %s`. Conditions are joined with AND
    in the mapping's order, matching the returned parameter tuple.
    """
    conditions = []
    params = []
    for key, value in criteria.items():
        if key.endswith("__lte"):
            conditions.append(f"{key[:-len('__lte')]} <= %s")
        else:
            conditions.append(f"{key} = %s")
        params.append(value)

    if not conditions:
        return "", ()
    return "WHERE " + " AND ".join(conditions), tuple(params)
