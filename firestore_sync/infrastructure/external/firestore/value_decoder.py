"""
Decodificador de valores tipados de la API REST de Firestore.

Cada valor llega como un dict con un único wire tag:
{"stringValue": "a"}, {"integerValue": "29"}, {"mapValue": {"fields": {...}}}, ...
"""

from __future__ import annotations

from typing import Any


def decode_value(value: Any) -> Any:
    """
    Convierte un valor Firestore a un valor nativo.

    - integerValue llega como string decimal -> int
    - timestampValue se retorna como string, sin parsear
    - nullValue, tags no reconocidos (referenceValue, geoPointValue, bytesValue...)
      o entradas que no son dict -> None, sin error
    """
    if not isinstance(value, dict):
        return None

    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return value["booleanValue"]
    if "arrayValue" in value:
        return decode_array((value["arrayValue"] or {}).get("values") or [])
    if "mapValue" in value:
        return decode_map((value["mapValue"] or {}).get("fields") or {})
    if "timestampValue" in value:
        return value["timestampValue"]

    return None


def decode_array(values: list[Any]) -> list[Any]:
    return [decode_value(item) for item in values]


def decode_map(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(item) for key, item in fields.items()}
