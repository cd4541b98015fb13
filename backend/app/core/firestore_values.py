# app/core/firestore_values.py
"""
Decoding of Firestore documents as delivered in JSON event payloads.

Eventarc sends documents in the REST representation, where every field is a typed
wrapper such as `{"integerValue": "3"}` or `{"mapValue": {"fields": {...}}}`. Handlers work
with plain Python values, so `decode_fields` unwraps them recursively.
"""
import base64
import re
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

_FRACTION = re.compile(r"\.(\d+)")
_DOCUMENT_NAME = re.compile(r"^(?:projects/[^/]+/databases/[^/]+/)?documents/(.+)$")


def parse_timestamp(value: str) -> datetime:
    """RFC 3339 with up to nanosecond precision -> aware datetime (microsecond precision)."""
    text = value.replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


def decode_value(value: Dict[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return parse_timestamp(value["timestampValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "bytesValue" in value:
        return base64.b64decode(value["bytesValue"])
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        point = value["geoPointValue"]
        return {"latitude": point.get("latitude", 0.0), "longitude": point.get("longitude", 0.0)}
    if "arrayValue" in value:
        return [decode_value(v) for v in (value["arrayValue"] or {}).get("values", [])]
    if "mapValue" in value:
        return decode_fields((value["mapValue"] or {}).get("fields"))
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def decode_fields(fields: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {key: decode_value(val) for key, val in (fields or {}).items()}


def split_document_name(name: str) -> Tuple[str, str]:
    """
    `projects/p/databases/(default)/documents/products/abc` or `documents/products/abc`
    -> ("products", "abc"). Nested paths keep the full collection path.
    """
    match = _DOCUMENT_NAME.match(name)
    if not match:
        raise ValueError(f"Not a document name: {name!r}")
    collection, _, doc_id = match.group(1).rstrip("/").rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Not a document name: {name!r}")
    return collection, doc_id
