#!/usr/bin/env python3
"""
Remote read wire codec - snappy-compressed protobuf to models and back
"""

from typing import List, Sequence

import snappy
from google.protobuf.message import DecodeError

from ..models import LabelMatcher, Query, QueryResult, ReadHints
from . import prompb

CONTENT_TYPE = "application/x-protobuf"
CONTENT_ENCODING = "snappy"


class InvalidReadRequestError(Exception):
    """Request body is not a snappy-compressed ReadRequest"""


def decode_read_request(body: bytes) -> List[Query]:
    """Decode a compressed ReadRequest body into queries, in request order."""
    try:
        raw = snappy.uncompress(body)
    except snappy.UncompressError as e:
        raise InvalidReadRequestError(f"snappy decode failed: {e}") from e

    req = prompb.ReadRequest()
    try:
        req.ParseFromString(raw)
    except DecodeError as e:
        raise InvalidReadRequestError(f"protobuf decode failed: {e}") from e

    return [query_from_proto(q) for q in req.queries]


def query_from_proto(q) -> Query:
    hints = None
    if q.HasField("hints"):
        hints = ReadHints(
            step_ms=q.hints.step_ms,
            range_ms=q.hints.range_ms,
            func=q.hints.func,
            start_ms=q.hints.start_ms,
            end_ms=q.hints.end_ms,
        )
    return Query(
        start_ms=q.start_timestamp_ms,
        end_ms=q.end_timestamp_ms,
        matchers=[LabelMatcher(name=m.name, type=int(m.type), value=m.value) for m in q.matchers],
        hints=hints,
    )


def encode_read_response(results: Sequence[QueryResult]) -> bytes:
    """Encode query results as a compressed ReadResponse."""
    resp = prompb.ReadResponse()
    for result in results:
        qr = resp.results.add()
        for series in result.timeseries:
            ts = qr.timeseries.add()
            for name, value in series.labels:
                ts.labels.add(name=name, value=value)
            for sample in series.samples:
                ts.samples.add(value=sample.value, timestamp=sample.timestamp_ms)
    return snappy.compress(resp.SerializeToString())
