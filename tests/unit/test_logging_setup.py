import logging
import pytest

from voice_tracker.logging_setup import _parse_level, get_logger


@pytest.mark.unit
class TestLoggingSetup:

    @pytest.mark.parametrize("level,expected", [
        ("debug", logging.DEBUG),
        (" INFO ", logging.INFO),
        ("10", logging.DEBUG),
        (logging.ERROR, logging.ERROR),
        ("nonsense", logging.WARNING),
    ])
    def test_parse_level(self, level, expected: int):
        assert _parse_level(level) == expected

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("VOICE_TRACKER_LOG_LEVEL", "debug")

        assert _parse_level(None) == logging.DEBUG

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv("VOICE_TRACKER_LOG_LEVEL", raising=False)

        assert _parse_level(None) == logging.WARNING

    def test_get_logger_is_under_package_root(self):
        logger = get_logger("voice_tracker.extraction.amount")

        assert logger.name == "voice_tracker.extraction.amount"
        assert logging.getLogger("voice_tracker").handlers
