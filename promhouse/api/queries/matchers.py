"""
Label matcher translation.

Maps Prometheus label matchers onto predicates over the backing table.
The metric name lives in its own column; every other label is stored as a
"name=value" string inside the labels array.
"""

import logging
from typing import Iterable, Optional

from ...models import LabelMatcher, MatcherType
from .clauses import ClauseBuilder
from .constants import (
    LABELS_COLUMN,
    METRIC_NAME_COLUMN,
    NAME_LABEL,
    PLACEHOLDER,
    REGEX_END,
    REGEX_START,
)
from .errors import UnsupportedMatcherError

logger = logging.getLogger("promhouse.server")

# match() is anchored through concat() so regexes cover the full string,
# as Prometheus expects
_ANCHORED = f"concat({PLACEHOLDER}, {PLACEHOLDER}, {PLACEHOLDER})"

NAME_CLAUSES = {
    MatcherType.EQ: f"{METRIC_NAME_COLUMN} = {PLACEHOLDER}",
    MatcherType.NEQ: f"{METRIC_NAME_COLUMN} != {PLACEHOLDER}",
    MatcherType.RE: f"match({METRIC_NAME_COLUMN}, {_ANCHORED})",
    MatcherType.NRE: f"NOT match({METRIC_NAME_COLUMN}, {_ANCHORED})",
}

LABEL_CLAUSES = {
    MatcherType.EQ: f"has({LABELS_COLUMN}, {PLACEHOLDER})",
    MatcherType.NEQ: f"NOT has({LABELS_COLUMN}, {PLACEHOLDER})",
    MatcherType.RE: f"arrayExists(x -> match(x, {_ANCHORED}), {LABELS_COLUMN})",
    MatcherType.NRE: f"NOT arrayExists(x -> match(x, {_ANCHORED}), {LABELS_COLUMN})",
}

_REGEX_TYPES = (MatcherType.RE, MatcherType.NRE)


def encode_label(name: str, value: str) -> str:
    """Stored encoding of a single label."""
    return f"{name}={value}"


def _check_type(matcher: LabelMatcher) -> None:
    if matcher.type not in NAME_CLAUSES:
        raise UnsupportedMatcherError(matcher.type)


def add_matcher_clause(matcher: LabelMatcher, sb: ClauseBuilder, ignore_label: Optional[str] = None) -> None:
    """
    Append the predicate for one matcher, or nothing for the ignore label.

    Raises:
        UnsupportedMatcherError: matcher type is not EQ, NEQ, RE or NRE
    """
    _check_type(matcher)

    if matcher.name == NAME_LABEL:
        fragment = NAME_CLAUSES[matcher.type]
        operand = matcher.value
    else:
        operand = encode_label(matcher.name, matcher.value)
        if matcher.type == MatcherType.EQ and ignore_label and operand == ignore_label:
            logger.debug(f"Skipping ignored label matcher {operand}")
            return
        fragment = LABEL_CLAUSES[matcher.type]

    if matcher.type in _REGEX_TYPES:
        sb.clause(fragment, REGEX_START, operand, REGEX_END)
    else:
        sb.clause(fragment, operand)


def add_matcher_clauses(matchers: Iterable[LabelMatcher], sb: ClauseBuilder, ignore_label: Optional[str] = None) -> None:
    """
    Translate matchers in the order supplied.

    Every matcher is validated before anything is appended, so a rejected
    matcher list leaves the builder untouched.
    """
    matchers = list(matchers)
    for m in matchers:
        _check_type(m)

    for m in matchers:
        add_matcher_clause(m, sb, ignore_label)
