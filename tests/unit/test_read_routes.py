"""Unit tests for the remote read HTTP endpoint

Tests the FastAPI surface including:
- Successful reads
- Malformed bodies
- Unsupported matchers
- Backing store failures
"""
import pytest
import asyncio
import sys
import os
import time

import snappy
from fastapi.testclient import TestClient
from starlette.requests import Request

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from promhouse.api import prompb
from promhouse.core.config import ServerConfig
from promhouse.api.routes.read_routes import create_read_routes
from promhouse.core.server import create_app


@pytest.fixture
def server_config():
    return ServerConfig(clickhouse={"table": "metrics.samples"}, read_ignore_label="replica=a")


def read_body(*matchers):
    req = prompb.ReadRequest()
    q = req.queries.add(start_timestamp_ms=0, end_timestamp_ms=10000)
    for mtype, name, value in matchers:
        q.matchers.add(type=mtype, name=name, value=value)
    return snappy.compress(req.SerializeToString())


def post_read(client, body):
    return client.post(
        "/read",
        content=body,
        headers={"Content-Type": "application/x-protobuf", "Content-Encoding": "snappy"},
    )


class TestRemoteRead:

    def test_read_returns_series(self, server_config, make_source, sample_rows):
        source = make_source(rows=sample_rows)
        client = TestClient(create_app(server_config, source=source))

        response = post_read(client, read_body((0, "__name__", "a"), (0, "replica", "a")))

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/x-protobuf"
        assert response.headers["content-encoding"] == "snappy"

        resp = prompb.ReadResponse()
        resp.ParseFromString(snappy.uncompress(response.content))
        assert len(resp.results) == 1
        assert len(resp.results[0].timeseries) == 2
        assert [s.timestamp for s in resp.results[0].timeseries[0].samples] == [0, 1000]

        # ignore label from config is not part of the statement
        sql, args = source.statements[0]
        assert args == [0, 10, "a"]
        assert "has(labels" not in sql

    def test_invalid_body(self, server_config, make_source):
        client = TestClient(create_app(server_config, source=make_source()))
        response = post_read(client, b"not snappy at all")
        assert response.status_code == 400

    def test_unsupported_matcher(self, server_config, make_source):
        source = make_source()
        client = TestClient(create_app(server_config, source=source))

        # 7 is not a known LabelMatcher.Type but survives on the wire
        response = post_read(client, read_body((0, "__name__", "up"), (7, "job", "x")))

        assert response.status_code == 400
        assert "unsupported" in response.json()["detail"]
        assert source.statements == []

    def test_store_failure(self, server_config, make_source):
        source = make_source(error=RuntimeError("Code: 241. Memory limit exceeded"))
        client = TestClient(create_app(server_config, source=source))

        response = post_read(client, read_body((0, "__name__", "up")))
        assert response.status_code == 500
        assert "Memory limit" in response.json()["detail"]


class TestCancelledRead:
    """The request task goes away while the statement is running"""

    def test_cancel_stops_running_statement(self, server_config, blocking_source):
        router = create_read_routes(blocking_source, server_config.read_settings())
        endpoint = router.routes[0].endpoint
        body = read_body((0, "__name__", "a"))

        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        async def run():
            request = Request({"type": "http", "method": "POST", "path": "/read", "headers": []}, receive)
            task = asyncio.create_task(endpoint(request))
            while not blocking_source.started.is_set():
                await asyncio.sleep(0.01)

            start = time.monotonic()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return time.monotonic() - start

        elapsed = asyncio.run(run())

        # asyncio.run waits for the worker thread, which only returns once
        # it has seen the cancel flag and killed the statement
        assert elapsed < 0.5
        assert blocking_source.killed == blocking_source.query_ids
        assert blocking_source.released.is_set()


class TestHealth:

    def test_health(self, server_config, make_source):
        client = TestClient(create_app(server_config, source=make_source()))
        assert client.get("/health").json() == {"status": "ok"}


class TestLifespan:

    def test_source_closed_on_shutdown(self, server_config, make_source):
        source = make_source()
        with TestClient(create_app(server_config, source=source)):
            assert not source.closed
        assert source.closed
