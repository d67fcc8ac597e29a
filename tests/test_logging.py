"""
Tests for the centralized logging system and the exception hierarchy.
"""
import logging

import pytest
from rich.logging import RichHandler

from anime_pulse.anime_pulse import logging as ap_logging
from anime_pulse.anime_pulse.logging import (
    AnimePulseError,
    APIError,
    ConfigError,
    ProtocolError,
    ShapeError,
    TransportError,
    get_logger,
    log_api_call,
    mask_url,
    set_log_level,
    setup_logging,
    temporary_log_level,
)


@pytest.fixture
def log_file(tmp_path, monkeypatch):
    """A fresh logging setup writing into a temp directory."""
    monkeypatch.setattr(ap_logging, "_logger_instance", None)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    path = tmp_path / "anime_pulse.log"
    yield path
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def _handler(cls):
    return next(h for h in logging.getLogger().handlers if isinstance(h, cls))


class TestLogging:

    def test_setup_logging(self, log_file):
        instance = setup_logging(str(log_file))

        assert instance.log_file == str(log_file)
        assert log_file.exists()
        assert _handler(RichHandler).level == logging.WARNING
        assert _handler(logging.FileHandler).level == logging.INFO

    def test_setup_is_idempotent(self, log_file):
        first = setup_logging(str(log_file))
        second = setup_logging(str(log_file))

        assert first is second
        assert len(logging.getLogger().handlers) == 2

    def test_get_logger(self):
        logger = get_logger("anime_pulse.test")

        assert logger.name == "anime_pulse.test"
        assert len(logger.handlers) == 0  # Should use root handlers

    def test_set_log_level(self, log_file):
        setup_logging(str(log_file))

        set_log_level("DEBUG", "console")
        assert _handler(RichHandler).level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

        set_log_level("ERROR", "file")
        assert _handler(logging.FileHandler).level == logging.ERROR
        assert _handler(RichHandler).level == logging.DEBUG

    def test_temporary_log_level(self, log_file):
        setup_logging(str(log_file))

        with temporary_log_level("DEBUG"):
            assert _handler(RichHandler).level == logging.DEBUG

        assert _handler(RichHandler).level == logging.WARNING

    def test_messages_reach_file(self, log_file):
        setup_logging(str(log_file))

        get_logger("anime_pulse.test").warning("[search] alpha failed (transport): refused")
        _handler(logging.FileHandler).flush()

        assert "alpha failed (transport)" in log_file.read_text(encoding="utf-8")

    def test_api_call_logged_masked(self, log_file):
        setup_logging(str(log_file))
        set_log_level("DEBUG", "file")

        log_api_call("https://x.test/top?token=s3cret&page=1", source="jikan")
        _handler(logging.FileHandler).flush()

        contents = log_file.read_text(encoding="utf-8")
        assert "API CALL: GET https://x.test/top?" in contents
        assert "s3cret" not in contents
        assert "Source: jikan" in contents


class TestExceptions:

    def test_hierarchy(self):
        assert issubclass(ConfigError, AnimePulseError)
        assert issubclass(APIError, AnimePulseError)
        for cls in (TransportError, ProtocolError, ShapeError):
            assert issubclass(cls, APIError)

    def test_protocol_error_carries_status(self):
        error = ProtocolError("HTTP 404: Not Found", 404)

        assert error.status_code == 404
        assert str(error) == "HTTP 404: Not Found"

    def test_raise_and_catch_as_api_error(self):
        with pytest.raises(APIError):
            raise ShapeError("Payload has no results")


def test_mask_url_leaves_plain_urls_alone():
    assert mask_url("https://x.test/info/one-piece") == "https://x.test/info/one-piece"
