"""
Remote read statement assembly and execution.

Builds the fixed-shape SELECT for one query and streams its rows back as
StorageRow values, sorted by (metric_name, labels, time).
"""

import logging
import queue
import threading
import uuid
from datetime import datetime
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from ...database import RowSource
from ...models import Query, ReadSettings, StorageRow
from .clauses import ClauseBuilder
from .constants import (
    CANCEL_POLL_INTERVAL,
    LABELS_COLUMN,
    METRIC_NAME_COLUMN,
    PLACEHOLDER,
    ROW_BUFFER_SIZE,
    VALUE_COLUMN,
)
from .errors import QueryCancelledError, QueryExecutionError, RowDecodeError
from .hints import time_expression
from .matchers import add_matcher_clauses

logger = logging.getLogger("promhouse.server")


def build_read_statement(query: Query, settings: ReadSettings) -> Tuple[str, List[Any]]:
    """
    Build the SQL and positional arguments for one query.

    Time bounds are compared in whole seconds against the (possibly
    bucketed) timestamp alias. The end bound is only applied when set.

    Raises:
        UnsupportedMatcherError: a matcher type cannot be translated
    """
    sb = ClauseBuilder()
    sb.clause(f"t >= {PLACEHOLDER}", query.start_ms // 1000)
    if query.end_ms > 0:
        sb.clause(f"t <= {PLACEHOLDER}", query.end_ms // 1000)

    add_matcher_clauses(query.matchers, sb, settings.ignore_label)

    time_field = time_expression(query.hints, settings.ignore_hints)

    sql = (
        f"SELECT {METRIC_NAME_COLUMN}, arraySort({LABELS_COLUMN}) AS slb, {time_field} AS t, "
        f"max({VALUE_COLUMN}) AS max_0 FROM {settings.table} "
        f"WHERE {sb.where()} "
        f"GROUP BY {METRIC_NAME_COLUMN}, slb, t "
        f"ORDER BY {METRIC_NAME_COLUMN}, slb, t"
    )
    return sql, sb.args()


def decode_row(row: Sequence[Any]) -> StorageRow:
    """Read one (metric_name, labels, t, value) tuple."""
    try:
        name, labels, timestamp, value = row
    except (TypeError, ValueError) as e:
        raise RowDecodeError(f"expected 4 columns, got {row!r}") from e

    if not isinstance(name, str):
        raise RowDecodeError(f"metric name is not a string: {name!r}")
    if isinstance(labels, (str, bytes)) or not all(isinstance(label, str) for label in labels):
        raise RowDecodeError(f"labels are not an array of strings: {labels!r}")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (datetime, int, float)):
        raise RowDecodeError(f"unsupported timestamp value: {timestamp!r}")
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise RowDecodeError(f"value is not numeric: {value!r}") from e

    return StorageRow(metric_name=name, labels=list(labels), timestamp=timestamp, value=value)


def _check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise QueryCancelledError("read request cancelled")


class _Failure:
    def __init__(self, error: Exception):
        self.error = error


_DONE = object()


class _RowPump(threading.Thread):
    """
    Runs the statement and copies its rows into a bounded queue.

    The reading side only ever blocks on the queue, so it can give up as soon
    as the request is cancelled even while the store has not answered yet.
    """

    def __init__(self, source: RowSource, sql: str, args: List[Any], query_id: str):
        super().__init__(name=f"read-{query_id[:8]}", daemon=True)
        self.source = source
        self.sql = sql
        self.args = args
        self.query_id = query_id
        self.rows: queue.Queue = queue.Queue(maxsize=ROW_BUFFER_SIZE)
        self.opened = threading.Event()
        self.stop = threading.Event()

    def run(self):
        try:
            with self.source.stream_rows(self.sql, self.args, query_id=self.query_id) as rows:
                self.opened.set()
                for row in rows:
                    if not self._put(row):
                        break
        except Exception as e:
            self._put(_Failure(e))
        finally:
            self._put(_DONE)

    def _put(self, item) -> bool:
        while not self.stop.is_set():
            try:
                self.rows.put(item, timeout=CANCEL_POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False


def _stream(sql: str, args: List[Any], source: RowSource, cancel: Optional[threading.Event]) -> Iterator[StorageRow]:
    _check_cancelled(cancel)

    query_id = uuid.uuid4().hex
    pump = _RowPump(source, sql, args, query_id)
    pump.start()

    finished = False
    try:
        while True:
            try:
                item = pump.rows.get(timeout=CANCEL_POLL_INTERVAL)
            except queue.Empty:
                _check_cancelled(cancel)
                continue
            if item is _DONE:
                finished = True
                return
            if isinstance(item, _Failure):
                finished = True
                _check_cancelled(cancel)
                raise QueryExecutionError(f"read query failed: {item.error}") from item.error
            _check_cancelled(cancel)
            yield decode_row(item)
    finally:
        pump.stop.set()
        if not finished:
            logger.debug(f"Abandoning read query {query_id}")
            source.cancel(query_id)
        # Once rows flow the pump exits promptly; before that it may still be
        # waiting on the store and cleans up on its own
        if pump.opened.is_set():
            pump.join()
