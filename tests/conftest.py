"""Pytest configuration and shared fixtures"""
import pytest
import os
import sys
import threading
from contextlib import contextmanager

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from promhouse.database import RowSource
from promhouse.models import LabelMatcher, MatcherType, Query, ReadHints, ReadSettings


class FakeRowSource(RowSource):
    """Records executed statements and replays canned rows"""

    def __init__(self, rows=None, error=None):
        self.rows = list(rows or [])
        self.error = error
        self.statements = []
        self.query_ids = []
        self.killed = []
        self.closed_streams = 0
        self.closed = False

    @contextmanager
    def stream_rows(self, sql, args, query_id=None):
        self.statements.append((sql, list(args)))
        self.query_ids.append(query_id)
        self._execute()
        if self.error is not None:
            raise self.error
        try:
            yield iter(self.rows)
        finally:
            self.closed_streams += 1

    def _execute(self):
        pass

    def cancel(self, query_id):
        self.killed.append(query_id)

    def close(self):
        self.closed = True


class BlockingRowSource(FakeRowSource):
    """Statement stays running until killed or the hold time runs out"""

    def __init__(self, rows=None, hold=2.0):
        super().__init__(rows=rows)
        self.hold = hold
        self.started = threading.Event()
        self.released = threading.Event()

    def _execute(self):
        self.started.set()
        self.released.wait(self.hold)

    def cancel(self, query_id):
        super().cancel(query_id)
        self.released.set()


@pytest.fixture
def settings():
    """Read settings with no ignore label and hints enabled"""
    return ReadSettings(table="metrics.samples")


@pytest.fixture
def make_source():
    """Factory for FakeRowSource instances"""
    return FakeRowSource


@pytest.fixture
def blocking_source():
    """Source whose statement blocks until cancelled"""
    return BlockingRowSource(rows=[("a", ["l=1"], 0, 1.0)])


@pytest.fixture
def sample_rows():
    """Rows for two series of metric "a", sorted as the store returns them"""
    return [
        ("a", ["l=1"], 0, 1.0),
        ("a", ["l=1"], 1, 2.0),
        ("a", ["l=2"], 2, 3.0),
    ]


@pytest.fixture
def sample_query():
    """Query over one hour selecting http_requests_total{job="api"}"""
    return Query(
        start_ms=1_700_000_000_000,
        end_ms=1_700_003_600_000,
        matchers=[
            LabelMatcher(name="__name__", type=MatcherType.EQ, value="http_requests_total"),
            LabelMatcher(name="job", type=MatcherType.EQ, value="api"),
        ],
        hints=ReadHints(step_ms=15000, range_ms=0),
    )
