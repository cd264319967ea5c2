"""Tests for configuration validation and logging setup."""

import logging
from logging.handlers import RotatingFileHandler

from app import configure_logging, create_app
from config import Config


def test_defaults_validate_in_test_mode(monkeypatch) -> None:
    monkeypatch.setattr(Config, "TEST_MODE", True)
    assert Config.validate() is True
    assert Config.max_upload_bytes() == Config.MRP_LOG_MAX_UPLOAD_MB * 1024 * 1024


def test_bad_settings_are_reported(monkeypatch, capsys) -> None:
    monkeypatch.setattr(Config, "TEST_MODE", False)
    monkeypatch.setattr(Config, "SECRET_KEY", "dev-key-change-in-production")
    monkeypatch.setattr(Config, "LOG_LEVEL", "CHATTY")
    monkeypatch.setattr(Config, "PORT", 70000)
    assert Config.validate() is False
    output = capsys.readouterr().out
    assert "SECRET_KEY" in output
    assert "LOG_LEVEL" in output
    assert "PORT" in output


def test_file_logging_outside_test_mode(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(Config, "TEST_MODE", False)
    monkeypatch.setattr(Config, "LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(Config, "LOG_LEVEL", "DEBUG")
    app = create_app()
    root = logging.getLogger()
    try:
        file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == Config.LOG_MAX_BYTES
        assert (tmp_path / "logs" / "portal.log").exists()
        assert root.level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
        monkeypatch.setattr(Config, "TEST_MODE", True)
        configure_logging(app)
