"""Unit tests for the request context and request logging middleware."""

import itertools
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient, Response
from pytest_mock import MockerFixture

from src.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.core.config import LogConfig
from src.core.context import RequestContext


def build_app(log_config: LogConfig) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, log_config=log_config)
    app.add_middleware(RequestContextMiddleware)

    @app.get("/ping")
    async def ping() -> dict[str, str | None]:
        return {"correlation_id": RequestContext.get_correlation_id()}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


async def call(
    app: FastAPI, path: str, headers: dict[str, str] | None = None
) -> Response:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, headers=headers)


@pytest.mark.unit
class TestRequestContextMiddleware:
    """Test correlation id handling."""

    async def test_generates_correlation_id(self) -> None:
        """Verify a correlation id is generated and echoed."""
        response = await call(build_app(LogConfig()), "/ping")

        correlation_id = response.headers[CORRELATION_ID_HEADER]
        assert len(correlation_id) == 36
        assert response.json() == {"correlation_id": correlation_id}

    async def test_propagates_incoming_correlation_id(self) -> None:
        """Verify a client-supplied correlation id is kept."""
        incoming = str(uuid4())

        response = await call(
            build_app(LogConfig()), "/ping", {CORRELATION_ID_HEADER: incoming}
        )

        assert response.headers[CORRELATION_ID_HEADER] == incoming
        assert response.json()["correlation_id"] == incoming

    async def test_context_cleared_after_request(self) -> None:
        """Verify nothing leaks past the request."""
        await call(build_app(LogConfig()), "/ping")

        assert RequestContext.get_correlation_id() is None


@pytest.mark.unit
class TestRequestLoggingMiddleware:
    """Test request logging."""

    async def test_logs_completion_with_request_id(self, mocker: MockerFixture) -> None:
        """Verify completed requests are logged and tagged with a request id."""
        mock_logger = mocker.patch("src.api.middleware.request_logging.logger")

        response = await call(build_app(LogConfig()), "/ping")

        assert response.headers[REQUEST_ID_HEADER].startswith("req-")
        completed = [
            c for c in mock_logger.info.call_args_list if c.args[0] == "Request completed"
        ]
        assert completed
        assert completed[0].kwargs["status_code"] == 200

    async def test_excluded_paths_are_not_logged(self, mocker: MockerFixture) -> None:
        """Verify health checks stay out of the logs."""
        mock_logger = mocker.patch("src.api.middleware.request_logging.logger")

        response = await call(build_app(LogConfig()), "/health")

        assert REQUEST_ID_HEADER not in response.headers
        mock_logger.info.assert_not_called()

    async def test_slow_request_warning(self, mocker: MockerFixture) -> None:
        """Verify requests over the threshold are flagged."""
        mock_logger = mocker.patch("src.api.middleware.request_logging.logger")
        mocker.patch(
            "src.api.middleware.request_logging.time.perf_counter",
            side_effect=itertools.count(0.0, 5.0),
        )

        await call(build_app(LogConfig(slow_request_threshold_ms=10)), "/ping")

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["threshold_ms"] == 10
