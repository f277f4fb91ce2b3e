"""
Logging tests

Tests that LOG() output follows the verbosity of the connected state and
that importing the package leaves loguru sinks alone.
"""

import importlib
from types import SimpleNamespace

import pytest
from loguru import logger

from vuegister.lib.log import (
    LOG,
    logger_configure,
    state_connectToLogger,
    state_disconnectFromLogger,
    verbosity_get,
)


@pytest.fixture
def messages():
    records = []
    sink = logger.add(lambda message: records.append(message.record["message"]), level="DEBUG")
    yield records
    logger.remove(sink)
    state_disconnectFromLogger()


class TestVerbosity:
    """Test gating of LOG() output"""

    def test_silent_without_state(self, messages):
        state_disconnectFromLogger()
        LOG("hidden", level=1)
        assert verbosity_get() == 0
        assert messages == []

    def test_level_gating(self, messages):
        state_connectToLogger(SimpleNamespace(verbosity=2))

        LOG("normal", level=1)
        LOG("verbose", level=2)
        LOG("debug", level=3)

        assert messages == ["normal", "verbose"]

    def test_disconnect(self, messages):
        state_connectToLogger(SimpleNamespace(verbosity=3))
        LOG("shown")
        state_disconnectFromLogger()
        LOG("hidden")

        assert messages == ["shown"]

    def test_library_calls_logged(self, messages):
        from vuegister.lib.extractor import extract

        state_connectToLogger(SimpleNamespace(verbosity=3))
        extract("<script>\nfoo()\n</script>", ["script"])

        assert "Extracted <script> section, offset 1" in messages


class TestSinks:
    """Test that only the CLI replaces loguru's sinks"""

    def test_import_keeps_application_sinks(self, messages):
        from vuegister.lib import log

        importlib.reload(log)
        log.state_connectToLogger(SimpleNamespace(verbosity=1))
        log.LOG("still delivered")

        assert messages == ["still delivered"]

    def test_configure_replaces_sinks(self):
        records = []
        logger.add(lambda message: records.append(message.record["message"]), level="DEBUG")

        sink = logger_configure()
        try:
            state_connectToLogger(SimpleNamespace(verbosity=1))
            LOG("to stderr only")
            assert records == []
        finally:
            logger.remove(sink)
            state_disconnectFromLogger()
