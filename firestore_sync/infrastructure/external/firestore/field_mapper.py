"""
Extracción de paths anidados y mapeo de campos Firestore -> campos destino.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import ABSENT
from .value_decoder import decode_value


def extract_nested_field(fields: Mapping[str, Any], path: str) -> Any:
    """
    Resuelve un path con puntos (p.ej. "profile.address.city").

    El primer segmento se busca en los campos de nivel superior; los siguientes
    descienden solo a través de mapValue.fields. Si algún segmento no existe
    (o el intermedio no es un map) retorna ABSENT. La hoja se decodifica.
    """
    segments = path.split(".")
    current: Any = fields.get(segments[0], ABSENT) if isinstance(fields, Mapping) else ABSENT

    for segment in segments[1:]:
        if not isinstance(current, dict) or "mapValue" not in current:
            return ABSENT
        children = (current["mapValue"] or {}).get("fields") or {}
        if segment not in children:
            return ABSENT
        current = children[segment]

    if current is ABSENT:
        return ABSENT
    return decode_value(current)


def map_document_fields(
    fields: Mapping[str, Any],
    field_mappings: Mapping[str, str],
) -> dict[str, Any]:
    """
    Aplica la tabla source_path -> destino en orden.

    Los paths ausentes y los null explícitos de Firestore se omiten por igual:
    la clave destino no aparece en el resultado.
    """
    record: dict[str, Any] = {}
    for source_path, target_field in field_mappings.items():
        value = extract_nested_field(fields, source_path)
        if value is ABSENT or value is None:
            continue
        record[target_field] = value
    return record
