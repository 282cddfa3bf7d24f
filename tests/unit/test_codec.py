"""Unit tests for the remote read wire codec"""
import pytest
import sys
import os

import snappy

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from promhouse.api import prompb
from promhouse.api.codec import InvalidReadRequestError, decode_read_request, encode_read_response
from promhouse.models import MatcherType, QueryResult, ReadHints, Sample, TimeSeries


def make_request_body():
    req = prompb.ReadRequest()
    q = req.queries.add(start_timestamp_ms=1000, end_timestamp_ms=61000)
    q.matchers.add(type=MatcherType.EQ, name="__name__", value="up")
    q.matchers.add(type=MatcherType.NRE, name="job", value="test.*")
    q.hints.step_ms = 15000
    q.hints.range_ms = 5000
    q.hints.func = "rate"
    req.queries.add(start_timestamp_ms=2000)
    return snappy.compress(req.SerializeToString())


class TestDecodeReadRequest:

    def test_queries_and_matchers(self):
        queries = decode_read_request(make_request_body())

        assert len(queries) == 2
        q = queries[0]
        assert (q.start_ms, q.end_ms) == (1000, 61000)
        assert [(m.name, m.type, m.value) for m in q.matchers] == [
            ("__name__", MatcherType.EQ, "up"),
            ("job", MatcherType.NRE, "test.*"),
        ]
        assert q.hints == ReadHints(step_ms=15000, range_ms=5000, func="rate")

    def test_missing_hints_are_none(self):
        queries = decode_read_request(make_request_body())
        assert queries[1].hints is None
        assert queries[1].end_ms == 0
        assert queries[1].matchers == []

    def test_not_snappy(self):
        with pytest.raises(InvalidReadRequestError):
            decode_read_request(b"\xff\xff\xff\xff\xff")

    def test_not_protobuf(self):
        with pytest.raises(InvalidReadRequestError):
            decode_read_request(snappy.compress(b"\x0a\xff\xff"))


class TestEncodeReadResponse:

    def test_round_trips_through_protobuf(self):
        results = [
            QueryResult(timeseries=[
                TimeSeries(labels=[("__name__", "up"), ("job", "api")],
                           samples=[Sample(1.0, 1000), Sample(0.0, 2000)]),
            ]),
            QueryResult(),
        ]

        resp = prompb.ReadResponse()
        resp.ParseFromString(snappy.uncompress(encode_read_response(results)))

        assert len(resp.results) == 2
        ts = resp.results[0].timeseries[0]
        assert [(l.name, l.value) for l in ts.labels] == [("__name__", "up"), ("job", "api")]
        assert [(s.value, s.timestamp) for s in ts.samples] == [(1.0, 1000), (0.0, 2000)]
        assert len(resp.results[1].timeseries) == 0
