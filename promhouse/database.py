#!/usr/bin/env python3
"""
promhouse Database Module
ClickHouse connection setup and row streaming
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, ContextManager, Iterable, Optional, Sequence

import clickhouse_connect
from clickhouse_connect.driver import httputil

logger = logging.getLogger("promhouse.db")

# ClickHouse syntax reference: "Non-quoted identifiers must match the regex"
CLICKHOUSE_IDENTIFIER = re.compile(r"^[a-zA-Z_][0-9a-zA-Z_.]*$")


def validate_table_name(table: str) -> str:
    """Return the table name if it is a non-quoted ClickHouse identifier."""
    if not CLICKHOUSE_IDENTIFIER.match(table or ""):
        raise ValueError("invalid table name: use non-quoted identifier")
    return table


class RowSource(ABC):
    """Execution surface the read path runs its statements against"""

    @abstractmethod
    def stream_rows(self, sql: str, args: Sequence[Any],
                    query_id: Optional[str] = None) -> ContextManager[Iterable[Sequence[Any]]]:
        """
        Execute a statement with positional arguments.

        Returns a context manager yielding an iterable of row tuples;
        leaving the context releases the connection and aborts any
        pending fetch. query_id tags the statement so cancel() can find it.
        """

    def cancel(self, query_id: str) -> None:
        """Stop a statement started with this query_id, if still running"""

    def close(self) -> None:
        """Release pooled connections"""


class ClickHouseAdapter(RowSource):
    """ClickHouse over HTTP via clickhouse-connect"""

    def __init__(self, host: str, port: int = 8123, database: str = "default",
                 username: str = "default", password: str = "", tls: bool = False,
                 connect_timeout: int = 5, max_connections: int = 16,
                 client: Optional[Any] = None):
        self.host = host
        self.port = port
        self.database = database
        self.tls = tls

        if client is None:
            # The pool manager is shared by all in-flight requests
            pool_mgr = httputil.get_pool_manager(maxsize=max_connections, num_pools=1, verify=False)
            client = clickhouse_connect.get_client(
                host=host,
                port=port,
                username=username,
                password=password,
                database=database,
                secure=tls,
                verify=False,
                connect_timeout=connect_timeout,
                pool_mgr=pool_mgr,
            )
        self.client = client

        # Immediately try to talk to the server, fail fast
        if not self.client.ping():
            raise ConnectionError(f"ClickHouse at {host}:{port} is not reachable")

        logger.info(f"Connected to ClickHouse {host}:{port}/{database} (tls={tls})")

    @classmethod
    def from_config(cls, cfg) -> "ClickHouseAdapter":
        """Build an adapter from a ClickHouseConfig"""
        return cls(
            host=cfg.host,
            port=cfg.port,
            database=cfg.database,
            username=cfg.username,
            password=cfg.password,
            tls=cfg.tls,
            connect_timeout=cfg.connect_timeout,
            max_connections=cfg.max_connections,
        )

    def stream_rows(self, sql: str, args: Sequence[Any], query_id: Optional[str] = None):
        # A sequence of parameters selects client-side %s binding
        settings = {"query_id": query_id} if query_id else None
        return self.client.query_rows_stream(sql, parameters=list(args), settings=settings)

    def cancel(self, query_id: str) -> None:
        try:
            self.client.command("KILL QUERY WHERE query_id = %s ASYNC", parameters=[query_id])
            logger.info(f"Killed query {query_id}")
        except Exception as e:
            # The statement may already be gone; the read fails either way
            logger.warning(f"Failed to kill query {query_id}: {e}")

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("ClickHouse client closed")
