"""Tests for application startup and logging setup."""

import logging

import pytest
from fastapi.testclient import TestClient

from tidewaves import config, logging_utils
from tidewaves.clients.coops import CoopsApi
from tidewaves.clients.nominatim import NominatimApi
from tidewaves.main import NO_CACHE_HEADERS, create_app


def test_lifespan_creates_clients() -> None:
    settings = config.Settings(
        application="timewaves-test",
        user_agent="TimeWavesTest/1.0",
        max_retries=2,
        search_limit=3,
    )
    app = create_app(settings)

    with TestClient(app) as client:
        coops = app.state.coops_client
        nominatim = app.state.nominatim_client
        assert isinstance(coops, CoopsApi)
        assert isinstance(nominatim, NominatimApi)
        assert coops.base_params["application"] == "timewaves-test"
        assert coops.max_retries == 2
        assert nominatim.user_agent == "TimeWavesTest/1.0"
        assert nominatim.limit == 3
        assert not app.state.http_session.closed

        response = client.get("/api/healthy")
        assert response.status_code == 200
        for name, value in NO_CACHE_HEADERS.items():
            assert response.headers[name] == value

    assert app.state.http_session.closed


def test_non_api_routes_are_cacheable() -> None:
    app = create_app(config.Settings())
    with TestClient(app) as client:
        response = client.get("/docs")
    assert response.status_code == 200
    assert "Pragma" not in response.headers


def test_setup_logging_local(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("K_SERVICE", raising=False)
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        logging_utils.setup_logging()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert any(
            isinstance(f, logging_utils.RelativePathFilter) for f in handler.filters
        )
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_relative_path_filter() -> None:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=f"{logging_utils.PROJECT_ROOT}/tidewaves/api.py",
        lineno=10,
        msg="hello",
        args=None,
        exc_info=None,
    )
    assert logging_utils.RelativePathFilter().filter(record)
    assert record.relativepath == "tidewaves/api.py"  # type: ignore[attr-defined]
