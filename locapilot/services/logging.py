"""Eventi strutturati dei servizi (export, import, pagamenti, migrazioni...)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from locapilot.extensions import LOGGER_NAME
from locapilot.models.base import to_json_value

# Chiavi che LogRecord riserva a sé: passate in extra solleverebbero KeyError
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def _loggable(value: Any) -> Any:
    if isinstance(value, (list, tuple, set)):
        return [to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: to_json_value(item) for key, item in value.items()}
    return to_json_value(value)


def log_structured_event(
    action: str,
    *,
    message: Optional[str] = None,
    level: str = "info",
    **fields: Any,
) -> None:
    """
    Registra un evento sul logger ``locapilot`` con ``action`` e i campi dati.

    Date e importi sono resi come nel file di export (ISO 8601 e numeri), così
    una riga di log si confronta direttamente con le righe esportate.
    """
    logger = logging.getLogger(LOGGER_NAME)
    log_method = getattr(logger, level.lower(), logger.info)

    payload: Dict[str, Any] = {"action": action}
    for key, value in fields.items():
        name = f"field_{key}" if key in _RESERVED else key
        payload[name] = _loggable(value)

    log_method(message or action.replace("_", " "), extra=payload)
