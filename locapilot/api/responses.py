"""
Helper condivisi dalle API JSON: envelope di risposta e serializzazione.

Tutte le risposte hanno la forma {"success": bool, "message": str, "payload": ...}.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Union

from flask import jsonify, request

from locapilot.errors import ValidationError

_BINARY = (bytes, bytearray, memoryview)


def ok(payload: Any = None, message: str = "", status: int = 200):
    return jsonify({"success": True, "message": message, "payload": payload}), status


def serialize(entity: Any) -> Any:
    """Modello -> dizionario camelCase; i contenuti binari non vengono inclusi."""
    if entity is None:
        return None
    data = entity.to_dict()
    return {key: value for key, value in data.items() if not isinstance(value, _BINARY)}


def serialize_many(entities: Iterable[Any]) -> List[Any]:
    return [serialize(entity) for entity in entities]


def parse_entity_id(value: str) -> Union[int, str]:
    """Id numerico dall'URL; gli id virtuali delle scadenze restano stringhe."""
    if value.isdigit():
        return int(value)
    if value.startswith("virtual-"):
        return value
    raise ValidationError(f"Id non valido: {value!r}")


def json_body() -> dict:
    """Body JSON della richiesta (oggetto vuoto se assente)."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Body JSON non valido: atteso un oggetto")
    return data
