"""
Tests de la configuración de logging
"""
import logging

from order_dashboard.logging_config import setup_logging


def test_explicit_level():
    setup_logging("debug")
    assert logging.getLogger("order_dashboard").level == logging.DEBUG


def test_invalid_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    setup_logging()
    assert logging.getLogger("order_dashboard").level == logging.INFO
    assert logging.getLogger("urllib3").level == logging.WARNING
