# tests/unit/test_logging_config.py
import logging

from zeroscan import logging_config


def test_format_names_the_thread():
    assert "%(threadName)s" in logging_config.LOG_FORMAT


def test_level_from_environment(monkeypatch):
    seen = {}
    monkeypatch.setenv("ZEROSCAN_LOG_LEVEL", "warning")
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    logging_config.setup_logging()
    assert seen["level"] == logging.WARNING
    assert seen["format"] == logging_config.LOG_FORMAT


def test_explicit_level_wins_and_unknown_falls_back(monkeypatch):
    seen = {}
    monkeypatch.setenv("ZEROSCAN_LOG_LEVEL", "error")
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
    logging_config.setup_logging("debug")
    assert seen["level"] == logging.DEBUG
    logging_config.setup_logging("chatty")
    assert seen["level"] == logging.INFO
