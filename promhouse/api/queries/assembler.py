"""
Time series reassembly.

Turns the flat row stream of a read query into Prometheus time series.
Relies on rows arriving sorted by (metric_name, labels, time); rows are
neither re-sorted nor buffered, so unsorted input yields fragmented series.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ...models import Sample, StorageRow, TimeSeries
from .constants import NAME_LABEL


def to_millis(ts: Union[datetime, int, float]) -> int:
    """Milliseconds since the epoch; naive datetimes and numbers are UTC seconds."""
    if isinstance(ts, datetime):
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return int(ts.timestamp() * 1000)
    return int(ts * 1000)


def decode_labels(metric_name: str, labels: Sequence[str]) -> List[Tuple[str, str]]:
    """Label pairs with the synthetic metric name first, stored order after."""
    pairs = [(NAME_LABEL, metric_name)]
    for label in labels:
        # Only the first "=" separates name from value
        name, _, value = label.partition("=")
        pairs.append((name, value))
    return pairs


class SeriesAssembler:
    """
    Groups contiguous rows sharing a series identity.

    Idle until the first row; then one series is active at a time. finish()
    is the terminal transition that flushes the active series.
    """

    def __init__(self):
        self._series: List[TimeSeries] = []
        self._current: Optional[TimeSeries] = None
        self._identity: Optional[Tuple[str, Tuple[str, ...]]] = None
        self._finished = False

    def add(self, row: StorageRow) -> None:
        if self._finished:
            raise RuntimeError("assembler already finished")

        identity = (row.metric_name, tuple(row.labels))
        if self._current is None or identity != self._identity:
            self._flush()
            self._identity = identity
            self._current = TimeSeries(labels=decode_labels(row.metric_name, row.labels))

        self._current.samples.append(Sample(value=row.value, timestamp_ms=to_millis(row.timestamp)))

    def finish(self) -> List[TimeSeries]:
        """Close the active series and return all series in stream order."""
        if not self._finished:
            self._flush()
            self._finished = True
        return self._series

    def _flush(self) -> None:
        if self._current is not None:
            self._series.append(self._current)
            self._current = None
            self._identity = None


def assemble_timeseries(rows: Iterable[StorageRow]) -> List[TimeSeries]:
    """Consume a row stream to exhaustion and return its series."""
    assembler = SeriesAssembler()
    for row in rows:
        assembler.add(row)
    return assembler.finish()
