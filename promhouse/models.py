#!/usr/bin/env python3
"""
promhouse Models
Request-scoped value types shared by the codec, the query layer and the routes
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union


class MatcherType(IntEnum):
    """Label matcher kinds, numbered as on the wire"""
    EQ = 0
    NEQ = 1
    RE = 2
    NRE = 3


@dataclass(frozen=True)
class LabelMatcher:
    """One Prometheus label constraint"""
    name: str
    type: int  # raw wire value, may be outside MatcherType
    value: str


@dataclass(frozen=True)
class ReadHints:
    """Advisory sampling hints sent by Prometheus/Grafana"""
    step_ms: int = 0
    range_ms: int = 0
    func: str = ""
    start_ms: int = 0
    end_ms: int = 0


@dataclass
class Query:
    """One series selection of a remote read request"""
    start_ms: int
    end_ms: int
    matchers: List[LabelMatcher] = field(default_factory=list)
    hints: Optional[ReadHints] = None


@dataclass
class StorageRow:
    """Row returned by the backing table"""
    metric_name: str
    labels: Sequence[str]  # "key=value", already sorted
    timestamp: Union[datetime, int, float]
    value: float


@dataclass
class Sample:
    value: float
    timestamp_ms: int


@dataclass
class TimeSeries:
    labels: List[Tuple[str, str]] = field(default_factory=list)
    samples: List[Sample] = field(default_factory=list)


@dataclass
class QueryResult:
    timeseries: List[TimeSeries] = field(default_factory=list)


@dataclass(frozen=True)
class ReadSettings:
    """Configuration snapshot consumed by the read path"""
    table: str
    ignore_label: Optional[str] = None
    ignore_hints: bool = False
