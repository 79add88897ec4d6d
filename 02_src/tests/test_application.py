"""Tests for Application."""

import asyncio

import pytest

from livedata.app import Application
from livedata.config import Settings


@pytest.fixture
def settings():
    return Settings(interval_seconds=0.05, minimum=10.0, maximum=20.0)


class TestApplicationStart:
    """Tests for Application.start()."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self, settings):
        app = Application(settings)
        await app.start()
        try:
            assert app._broker is not None
            assert app._generator is not None
            assert app._live_data_service is not None
            assert app.live_data_service.running
        finally:
            await app.stop()

    @pytest.mark.asyncio
    async def test_components_wired_from_settings(self, settings):
        app = Application(settings)
        await app.start()
        try:
            assert app._live_data_service._broker is app._broker
            assert app._live_data_service._generator is app._generator
            assert app._generator.minimum == 10.0
            assert app._generator.maximum == 20.0
            assert app.live_data_service.interval == 0.05
            assert app.live_data_service.topic == "/topic/live-data"
        finally:
            await app.stop()

    @pytest.mark.asyncio
    async def test_publishes_in_bounds(self, settings):
        app = Application(settings)
        await app.start()
        try:
            await asyncio.sleep(0.12)
            latest = app.live_data_service.latest
            assert latest is not None
            assert 10.0 <= latest.value < 20.0
        finally:
            await app.stop()


class TestApplicationStop:
    """Tests for Application.stop()."""

    @pytest.mark.asyncio
    async def test_stop_halts_broadcaster(self, settings):
        app = Application(settings)
        await app.start()
        await app.stop()

        assert not app.live_data_service.running
        assert app.broker.subscriber_count() == 0

    @pytest.mark.asyncio
    async def test_stop_before_start(self, settings):
        app = Application(settings)
        await app.stop()


class TestApplicationProperties:
    """Tests for Application properties."""

    def test_broker_property_raises_when_not_started(self, settings):
        app = Application(settings)
        with pytest.raises(RuntimeError, match="not started"):
            _ = app.broker

    def test_live_data_service_property_raises_when_not_started(self, settings):
        app = Application(settings)
        with pytest.raises(RuntimeError, match="not started"):
            _ = app.live_data_service

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("LIVE_DATA_INTERVAL_SECONDS", "2.5")
        app = Application()
        assert app.settings.interval_seconds == 2.5
