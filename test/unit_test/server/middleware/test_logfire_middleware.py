"""
Unit tests for Logfire middleware.

This test suite covers:
- Request/response processing
- Request id propagation and generation
- Error handling and re-raising
- Slow request detection
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from qwiksale.server.middleware.logfire_middleware import LogfireMiddleware

MODULE = "qwiksale.server.middleware.logfire_middleware"


def _request(method: str = "GET", path: str = "/api/products", headers=None) -> MagicMock:
    request = MagicMock(spec=Request)
    request.method = method
    request.url.path = path
    request.headers = headers or {}
    request.state = MagicMock()
    return request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_logs_successful_request(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(content="ok", status_code=200)

        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_request(), call_next)

        assert response.status_code == 200
        mock_log.assert_called_once()
        kwargs = mock_log.call_args[1]
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/api/products"
        assert kwargs["status_code"] == 200
        assert kwargs["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_adds_timing_and_request_id_headers(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(content="ok")

        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(_request(), call_next)

        float(response.headers["X-Process-Time"])
        assert len(response.headers["X-Request-Id"]) == 32

    @pytest.mark.asyncio
    async def test_propagates_incoming_request_id(self):
        middleware = LogfireMiddleware(app=AsyncMock())
        request = _request(headers={"X-Request-Id": "edge-42"})

        async def call_next(req):
            return Response(content="ok")

        with patch(f"{MODULE}.log_api_request"):
            response = await middleware.dispatch(request, call_next)

        assert response.headers["X-Request-Id"] == "edge-42"
        assert request.state.request_id == "edge-42"


class TestLogfireMiddlewareErrors:
    """Test error handling in LogfireMiddleware."""

    @pytest.mark.asyncio
    async def test_exception_is_logged_as_500_and_reraised(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def call_next(request):
            raise ValueError("boom")

        with patch(f"{MODULE}.log_api_request") as mock_log, patch(f"{MODULE}.logger") as mock_logger:
            with pytest.raises(ValueError, match="boom"):
                await middleware.dispatch(_request("PATCH", "/api/admin/users/u1"), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["error"] == "boom"


class TestSlowRequestDetection:
    """Test slow request warnings."""

    @pytest.mark.asyncio
    async def test_slow_request_warns(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(content="ok")

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.time") as mock_time:
            mock_time.time.side_effect = [100.0, 102.5]
            await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[1]["extra"]["duration_ms"] == pytest.approx(2500.0)

    @pytest.mark.asyncio
    async def test_fast_request_does_not_warn(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def call_next(request):
            return Response(content="ok")

        with patch(f"{MODULE}.log_api_request"), patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.time") as mock_time:
            mock_time.time.side_effect = [100.0, 100.2]
            await middleware.dispatch(_request(), call_next)

        mock_logger.warning.assert_not_called()
