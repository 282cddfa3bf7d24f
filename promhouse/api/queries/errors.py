"""
Read path errors.

None of these are retried or downgraded to partial results.
"""


class ReadError(Exception):
    """Base class for failures while serving a remote read."""


class UnsupportedMatcherError(ReadError):
    """A label matcher type outside EQ, NEQ, RE and NRE."""

    def __init__(self, matcher_type):
        self.matcher_type = matcher_type
        super().__init__(f"unsupported label matcher type {matcher_type}")


class QueryExecutionError(ReadError):
    """The backing store rejected or failed to run the statement."""


class RowDecodeError(ReadError):
    """A row could not be read into the expected column types."""


class QueryCancelledError(ReadError):
    """The enclosing request was cancelled while the query was running."""
