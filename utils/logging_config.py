"""Логирование CLI импорта: файл ``housing.log`` с ротацией и консоль."""

import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

from config import Settings, get_settings

LOG_FILE_NAME = "housing.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s │ %(message)s"


class PeeweeFilter(logging.Filter):
    """Скрывает SELECT-запросы peewee."""

    def filter(self, record: logging.LogRecord) -> bool:
        sql = getattr(record, "sql", None) or record.getMessage()
        return not str(sql).lstrip().startswith("SELECT")


def _configure_peewee(detailed: bool) -> None:
    peewee_logger = logging.getLogger("peewee")
    for filt in [f for f in peewee_logger.filters if isinstance(f, PeeweeFilter)]:
        peewee_logger.removeFilter(filt)
    if not detailed:
        peewee_logger.addFilter(PeeweeFilter())


def setup_logging(settings: Settings | None = None) -> None:
    """Настраивает корневой логгер по ``LOG_LEVEL``/``DETAILED_LOGGING``.

    При подробном логировании уровень DEBUG и SELECT-запросы peewee видны.
    """
    settings = settings or get_settings()
    logs_dir = Path(settings.log_dir).expanduser()
    logs_dir.mkdir(parents=True, exist_ok=True)

    if settings.detailed_logging:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level, logging.INFO)

    file_h = RotatingFileHandler(
        logs_dir / LOG_FILE_NAME,
        maxBytes=2_000_000,  # 2 MB
        backupCount=3,
        encoding="utf-8",
    )
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers = [file_h, logging.StreamHandler()]
    for handler in handlers:
        handler.setFormatter(formatter)

    # force=True: повторный вызов заменяет обработчики, а не дублирует
    logging.basicConfig(level=level, handlers=handlers, force=True)
    _configure_peewee(settings.detailed_logging)
