"""Утилитарные тесты. Добавляйте новые тесты утилит сюда."""

import logging
from decimal import Decimal

import pytest

from config import Settings, get_settings
from utils.logging_config import PeeweeFilter, setup_logging
from utils.money import format_usd


def _record(msg: str, sql: str | None = None) -> logging.LogRecord:
    record = logging.LogRecord("peewee", logging.DEBUG, "", 0, msg, None, None)
    if sql is not None:
        record.sql = sql
    return record


def test_peewee_filter_hides_only_selects():
    filt = PeeweeFilter()

    assert not filt.filter(_record("SELECT * FROM client"))
    assert not filt.filter(_record("ignored", sql="   SELECT 1"))
    assert filt.filter(_record("INSERT INTO client VALUES (1)"))
    assert filt.filter(_record("ignored", sql="UPDATE building SET name='x'"))


def test_setup_logging_writes_housing_log(tmp_path):
    setup_logging(Settings(log_dir=str(tmp_path), log_level="WARNING"))

    logging.getLogger("services.imports").warning("⚠️ test message")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = tmp_path / "housing.log"
    assert log_file.exists()
    assert "test message" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_restores_select_queries(tmp_path):
    settings_off = Settings(log_dir=str(tmp_path), log_level="INFO", detailed_logging=False)
    setup_logging(settings_off)
    setup_logging(settings_off)

    peewee_logger = logging.getLogger("peewee")
    assert sum(isinstance(filt, PeeweeFilter) for filt in peewee_logger.filters) == 1

    class CollectHandler(logging.Handler):
        def __init__(self) -> None:
            super().__init__(level=logging.DEBUG)
            self.messages: list[str] = []

        def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - trivial
            self.messages.append(record.getMessage())

    collect_handler = CollectHandler()
    peewee_logger.addHandler(collect_handler)
    peewee_logger.setLevel(logging.DEBUG)

    try:
        peewee_logger.debug("SELECT 1")
        assert "SELECT 1" not in collect_handler.messages

        settings_on = Settings(log_dir=str(tmp_path), log_level="INFO", detailed_logging=True)
        setup_logging(settings_on)

        assert not any(isinstance(filt, PeeweeFilter) for filt in peewee_logger.filters)

        collect_handler.messages.clear()
        peewee_logger.debug("SELECT 1")
        assert "SELECT 1" in collect_handler.messages
    finally:
        peewee_logger.removeHandler(collect_handler)


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("1242.5"), "$1,242.50"),
        ("1000000", "$1,000,000.00"),
        (0, "$0.00"),
        (None, "$0.00"),
        (Decimal("-15.005"), "-$15.01"),
    ],
)
def test_format_usd(value, expected):
    assert format_usd(value) == expected


def test_get_settings_reads_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DETAILED_LOGGING", "yes")
    monkeypatch.setenv("DEFAULT_COMPANY_ID", "7")
    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()

    assert settings.database_url == "sqlite:///:memory:"
    assert settings.log_dir == str(tmp_path)
    assert settings.log_level == "DEBUG"
    assert settings.detailed_logging is True
    assert settings.default_company_id == 7
