"""
Remote Read Query Modules

Read path split by concern:
- clauses.py: WHERE clause accumulation
- matchers.py: Label matcher translation
- hints.py: Sampling hint resolution
- executor.py: Statement assembly and row streaming
- assembler.py: Row stream to time series
- reader.py: Per-request orchestration
"""

from .clauses import ClauseBuilder
from .matchers import add_matcher_clause, add_matcher_clauses, encode_label
from .hints import resolve_interval, time_expression
from .executor import build_read_statement, decode_row, execute_query
from .assembler import SeriesAssembler, assemble_timeseries, decode_labels, to_millis
from .reader import read_query, read_request
from .errors import (
    QueryCancelledError,
    QueryExecutionError,
    ReadError,
    RowDecodeError,
    UnsupportedMatcherError,
)

__all__ = [
    # Clause building
    'ClauseBuilder',

    # Matcher translation
    'add_matcher_clause',
    'add_matcher_clauses',
    'encode_label',

    # Sampling hints
    'resolve_interval',
    'time_expression',

    # Execution
    'build_read_statement',
    'decode_row',
    'execute_query',

    # Assembly
    'SeriesAssembler',
    'assemble_timeseries',
    'decode_labels',
    'to_millis',

    # Orchestration
    'read_query',
    'read_request',

    # Errors
    'ReadError',
    'UnsupportedMatcherError',
    'QueryExecutionError',
    'RowDecodeError',
    'QueryCancelledError',
]
