"""Tests for the status dashboard endpoints"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from logsink.core.constants import Severity
from logsink.dashboard.app import create_app
from logsink.router.message_router import LogContext, MessageRouter
from logsink.sink.file_sink import FileSink


@pytest.fixture
def sink(tmp_path):
    s = FileSink(max_bytes=2048, scheduler=MagicMock())
    s.set_path(str(tmp_path), "app.log")
    yield s
    s.close()


@pytest.fixture
def router(sink):
    return MessageRouter(sink, min_severity=Severity.INFO)


class TestStatus:
    def test_without_sink(self):
        client = TestClient(create_app())
        body = client.get("/api/status").json()
        assert body["sink"] is None
        assert body["router"] is None
        assert body["min_level"] is None
        assert "timestamp" in body

    def test_reports_sink_and_router(self, sink, router):
        router.route(Severity.INFO, LogContext(function="f", line=1), "hello")
        router.route(Severity.DEBUG, None, "filtered")

        client = TestClient(create_app(sink=sink, router=router))
        body = client.get("/api/status").json()

        assert body["sink"]["opened"] is True
        assert body["sink"]["path"] == sink.path
        assert body["sink"]["max_bytes"] == 2048
        assert body["sink"]["writes"] == 1
        assert body["router"] == {"routed": 1, "filtered": 1, "dropped": 0}
        assert body["min_level"] == "INFO"


class TestHealth:
    def test_unknown_without_sink(self):
        client = TestClient(create_app())
        assert client.get("/api/health").json() == {"status": "unknown"}

    def test_healthy(self, sink):
        client = TestClient(create_app(sink=sink))
        body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["opened"] is False
        assert body["open_failures"] == 0

    def test_degraded_after_open_failure(self):
        # No path configured, so the lazy open fails
        unconfigured = FileSink(scheduler=MagicMock())
        assert not unconfigured.write("lost\n")

        client = TestClient(create_app(sink=unconfigured))
        body = client.get("/api/health").json()
        assert body["status"] == "degraded"
        assert body["open_failures"] == 1

    def test_degraded_when_directory_missing(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        s = FileSink(scheduler=MagicMock())
        s.set_path(str(blocker / "logs"), "app.log")

        client = TestClient(create_app(sink=s))
        body = client.get("/api/health").json()
        assert body["status"] == "degraded"
        assert body["directory_ready"] is False
