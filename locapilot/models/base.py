"""
Utility comuni ai modelli: timestamp UTC e (de)serializzazione dizionari.

Gli attributi Python sono in snake_case, mentre il file di export e le API
JSON usano chiavi camelCase (``leaseId``, ``dueDate``...). ``SerializerMixin``
converte nei due sensi accettando in ingresso entrambe le forme.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping

from sqlalchemy import Date, DateTime, Numeric

from locapilot.errors import ValidationError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def utcnow() -> datetime:
    """Timestamp UTC naive, come salvato nelle colonne DateTime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def camelize(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)


def snakify(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def parse_date(value: Any) -> date:
    """Converte stringhe ISO (anche con orario) o datetime in ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Data non valida: {value!r}")


def parse_datetime(value: Any) -> datetime:
    """Converte stringhe ISO 8601 in ``datetime`` naive UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Timestamp non valido: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class SerializerMixin:
    """Conversione modello <-> dizionario per export, import e API."""

    @classmethod
    def column_names(cls) -> list[str]:
        return [column.key for column in cls.__table__.columns]

    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        skipped = set(exclude)
        return {
            camelize(name): to_json_value(getattr(self, name))
            for name in self.column_names()
            if name not in skipped
        }

    @classmethod
    def values_from_dict(cls, data: Mapping[str, Any], strict: bool = False) -> Dict[str, Any]:
        """
        Normalizza un dizionario (camelCase o snake_case) nei valori colonna.

        Con ``strict=True`` i campi sconosciuti sollevano ValidationError,
        altrimenti vengono ignorati (es. campi legacy di un vecchio export).
        """
        columns = {column.key: column for column in cls.__table__.columns}
        values: Dict[str, Any] = {}

        for key, raw in data.items():
            name = key if key in columns else snakify(key)
            column = columns.get(name)
            if column is None:
                if strict:
                    raise ValidationError(f"Campo sconosciuto per {cls.__tablename__}: {key}")
                continue
            values[name] = cls._coerce(column, raw)

        return values

    @classmethod
    def _coerce(cls, column, raw: Any) -> Any:
        if raw is None:
            return None
        try:
            if isinstance(column.type, DateTime):
                return parse_datetime(raw)
            if isinstance(column.type, Date):
                return parse_date(raw)
            if isinstance(column.type, Numeric) and column.type.asdecimal:
                return Decimal(str(raw))
        except (ValueError, TypeError, InvalidOperation) as exc:
            raise ValidationError(
                f"Valore non valido per {cls.__tablename__}.{column.key}: {raw!r}"
            ) from exc
        return raw
