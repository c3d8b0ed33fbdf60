"""
Estensioni Flask condivise: istanza ``db``, store SQLite transazionale e
logging JSON del logger ``locapilot``.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Istanza globale di SQLAlchemy, sarà inizializzata in create_app()
db = SQLAlchemy()

LOGGER_NAME = "locapilot"

# Attributi presenti in ogni LogRecord: il resto arriva da extra={...}
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

# Campi extra promossi al primo livello della riga
_TOP_LEVEL_FIELDS = ("action", "component", "table", "step")


class JsonFormatter(logging.Formatter):
    """
    Una riga JSON per record: timestamp UTC, livello, logger e messaggio.

    ``action``/``component`` (eventi dei servizi) e ``table``/``step`` (errori
    di import e di migrazione) stanno al primo livello; gli altri campi extra
    finiscono sotto ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
        for field in _TOP_LEVEL_FIELDS:
            if field in extra:
                entry[field] = extra.pop(field)
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def init_extensions(app: Flask) -> None:
    """
    Inizializza tutte le estensioni collegate all'app Flask.

    Questa funzione viene chiamata da create_app().
    """
    _ensure_sqlite_dir(app)
    db.init_app(app)
    with app.app_context():
        configure_transactional_sqlite(db.engine)
    _init_logging(app)


def configure_transactional_sqlite(engine: Engine) -> None:
    """
    Rende transazionali anche le istruzioni DDL su SQLite.

    Il driver pysqlite apre la transazione solo prima delle DML: disattiviamo
    la sua gestione ed emettiamo BEGIN noi, così CREATE/DROP e le bulk insert
    di un import vengono annullate insieme in caso di rollback.
    """
    if engine.dialect.name != "sqlite":
        return
    if event.contains(engine, "connect", _sqlite_on_connect):
        return
    event.listen(engine, "connect", _sqlite_on_connect)
    event.listen(engine, "begin", _sqlite_on_begin)


def _sqlite_on_connect(dbapi_connection, connection_record) -> None:
    dbapi_connection.isolation_level = None


def _sqlite_on_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def _ensure_sqlite_dir(app: Flask) -> None:
    uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    prefix = "sqlite:///"
    if uri.startswith(prefix) and len(uri) > len(prefix):
        os.makedirs(os.path.dirname(os.path.abspath(uri[len(prefix):])), exist_ok=True)


def _build_handlers(app: Flask, level: int) -> List[logging.Handler]:
    formatter = JsonFormatter()
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    log_dir = app.config.get("LOG_DIR")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                os.path.join(log_dir, app.config.get("LOG_FILE_NAME", "app.log")),
                maxBytes=app.config.get("LOG_MAX_BYTES", 5 * 1024 * 1024),
                backupCount=app.config.get("LOG_BACKUP_COUNT", 3),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _init_logging(app: Flask) -> None:
    """
    Collega gli handler JSON (console e, se LOG_DIR è impostato, file rotante)
    al logger ``locapilot``, che copre app.logger, servizi e gestore di schema.

    A ogni create_app gli handler installati in precedenza vengono chiusi e
    sostituiti, così la configurazione dell'ultima app è quella attiva.
    """
    level_name = app.config.get("LOG_LEVEL", "INFO")
    level = getattr(logging, level_name.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "locapilot_json", False):
            logger.removeHandler(handler)
            handler.close()

    handlers = _build_handlers(app, level)
    for handler in handlers:
        handler.locapilot_json = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(level)

    app.logger.debug(
        "Logging JSON inizializzato",
        extra={
            "component": "logging",
            "handlers": [type(handler).__name__ for handler in handlers],
            "level": level_name,
        },
    )
