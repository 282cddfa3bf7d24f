"""
Remote read orchestration.

Runs every query of a request in order and pairs results with queries by
position. The first error aborts the whole request.
"""

import logging
import threading
from typing import List, Optional, Sequence

from ...database import RowSource
from ...models import Query, QueryResult, ReadSettings
from .assembler import assemble_timeseries
from .executor import execute_query

logger = logging.getLogger("promhouse.server")


def read_query(
    query: Query,
    source: RowSource,
    settings: ReadSettings,
    cancel: Optional[threading.Event] = None,
) -> QueryResult:
    """Execute one query and assemble its time series."""
    rows = execute_query(query, source, settings, cancel)
    return QueryResult(timeseries=assemble_timeseries(rows))


def read_request(
    queries: Sequence[Query],
    source: RowSource,
    settings: ReadSettings,
    cancel: Optional[threading.Event] = None,
) -> List[QueryResult]:
    """
    Serve all queries of a remote read request.

    Args:
        queries: Queries in request order
        source: Execution surface of the backing store
        settings: Configuration snapshot for this request
        cancel: Set when the enclosing request goes away

    Returns:
        One QueryResult per query, in the same order
    """
    results = []
    for i, query in enumerate(queries):
        result = read_query(query, source, settings, cancel)
        logger.debug(
            f"Query {i}: [{query.start_ms}, {query.end_ms}] "
            f"{len(query.matchers)} matchers -> {len(result.timeseries)} series"
        )
        results.append(result)
    return results
