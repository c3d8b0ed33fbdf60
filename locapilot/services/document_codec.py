"""
Codifica dei contenuti binari dei documenti per i file di export.

Il payload viaggia come data URL ``data:<mimeType>;base64,<payload>``; ``None``
indica un contenuto che non è stato possibile serializzare (o deserializzare).
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URL = re.compile(r"^data:(.+?);base64,(.*)$", re.DOTALL)


def encode_data_url(payload: Any, mime_type: Optional[str]) -> Optional[str]:
    """Bytes -> data URL. Stringhe già codificate passano invariate."""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, (bytes, bytearray, memoryview)):
        b64 = base64.b64encode(bytes(payload)).decode("ascii")
        return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{b64}"
    return None


def parse_data_url(text: str) -> Optional[Tuple[str, str]]:
    """Restituisce (mime, base64) oppure None se la stringa non è un data URL."""
    if not isinstance(text, str):
        return None
    match = _DATA_URL.match(text)
    if not match:
        return None
    return match.group(1) or DEFAULT_MIME_TYPE, match.group(2)


def decode_data_url(text: Any) -> Optional[Tuple[str, bytes]]:
    """Data URL -> (mime, bytes); None se non decodificabile."""
    parsed = parse_data_url(text)
    if parsed is None:
        return None
    mime_type, b64 = parsed
    try:
        return mime_type, base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError):
        return None


def serialize_documents(documents: Iterable[Any]) -> List[Dict[str, Any]]:
    """Righe Document -> dizionari export con ``data`` come data URL."""
    serialized = []
    for document in documents:
        row = document.to_dict(exclude=("data",))
        row["data"] = encode_data_url(document.data, document.mime_type)
        serialized.append(row)
    return serialized


def deserialize_documents(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Dizionari export -> valori pronti per l'inserimento.

    Per i data URL validi ``mimeType`` e ``size`` vengono riallineati al
    contenuto decodificato; ogni altro valore diventa ``None``.
    """
    result = []
    for row in rows:
        copy = dict(row)
        decoded = decode_data_url(row.get("data"))
        if decoded is None:
            copy["data"] = None
        else:
            mime_type, payload = decoded
            copy.pop("mime_type", None)
            copy["data"] = payload
            copy["mimeType"] = mime_type
            copy["size"] = len(payload)
        result.append(copy)
    return result
