"""
Application Factory Tests
===========================

What we test:
    ✅ Production catch-all hides exception details
    ✅ Development catch-all names the exception type
    ✅ Process fault handlers log at CRITICAL and terminate
"""

import asyncio
import logging
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

import app.main as main_module
from app.main import (
    _handle_loop_exception,
    _handle_uncaught_exception,
    create_app,
    install_fault_handlers,
)


def failing_category_service():
    service = MagicMock()
    service.list_categories = AsyncMock(side_effect=RuntimeError("connection string postgres://secret"))
    return service


async def get_categories(application):
    # The catch-all response is sent before Starlette re-raises the exception
    transport = ASGITransport(app=application, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get("/api/categories")


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_production_body_is_generic(self, settings, fake_media_store):
        application = create_app(
            settings.model_copy(update={"environment": "production"}),
            media_store=fake_media_store,
        )
        application.state.category_service = failing_category_service()

        response = await get_categories(application)
        await application.state.database.dispose()

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "internal_server_error"
        assert body["error"] == "An unexpected error occurred. Please try again or contact support."
        assert "RuntimeError" not in response.text
        assert "secret" not in response.text

    @pytest.mark.asyncio
    async def test_development_body_names_exception_type(self, settings, fake_media_store):
        application = create_app(settings, media_store=fake_media_store)
        application.state.category_service = failing_category_service()

        response = await get_categories(application)
        await application.state.database.dispose()

        assert response.status_code == 500
        assert response.json()["error"] == "Unexpected error: RuntimeError"
        assert "secret" not in response.text


class TestFaultHandlers:

    @pytest.fixture
    def terminate(self, monkeypatch):
        mock = MagicMock()
        monkeypatch.setattr(main_module, "_terminate_process", mock)
        return mock

    def test_uncaught_exception_logs_critical_and_terminates(self, terminate, caplog):
        try:
            raise RuntimeError("worker crashed")
        except RuntimeError:
            exc_info = sys.exc_info()

        with caplog.at_level(logging.CRITICAL, logger="app.main"):
            _handle_uncaught_exception(*exc_info)

        terminate.assert_called_once_with()
        assert any(record.levelno == logging.CRITICAL for record in caplog.records)

    def test_loop_exception_logs_critical_and_terminates(self, terminate, caplog):
        with caplog.at_level(logging.CRITICAL, logger="app.main"):
            _handle_loop_exception(
                MagicMock(),
                {"message": "Task exception was never retrieved", "exception": ValueError("boom")},
            )

        terminate.assert_called_once_with()
        assert any(
            record.levelno == logging.CRITICAL and "Task exception was never retrieved" in record.getMessage()
            for record in caplog.records
        )

    def test_loop_exception_without_exception_object(self, terminate):
        _handle_loop_exception(MagicMock(), {"message": "callback failed"})
        terminate.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_install_registers_both_handlers(self, monkeypatch):
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        loop = asyncio.get_running_loop()
        try:
            install_fault_handlers()

            assert sys.excepthook is _handle_uncaught_exception
            assert loop.get_exception_handler() is _handle_loop_exception
        finally:
            loop.set_exception_handler(None)
