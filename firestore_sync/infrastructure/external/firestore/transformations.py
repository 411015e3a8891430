"""
Transformaciones por campo destino y merge de defaults.

Las transformaciones se resuelven por nombre en un registro explícito
(nombre -> función pura de un argumento). Un nombre no registrado es un no-op.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping, Optional

from loguru import logger

from .types import Transform

_WORD_START_RE = re.compile(r"(^|\s)(\S)")
_LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def title_case(value: Any) -> str:
    """Mayúscula inicial en cada palabra separada por espacios; el resto se respeta."""
    return _WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), str(value))


def lowercase(value: Any) -> str:
    return str(value).lower()


def uppercase(value: Any) -> str:
    return str(value).upper()


def trim(value: Any) -> str:
    return str(value).strip()


def integer_coerce(value: Any) -> int:
    """
    Entero con signo. Los float se truncan hacia cero y los strings toman su
    prefijo numérico, exponente incluido ("29" -> 29, "29.9" -> 29,
    "1e3" -> 1000, "abc" -> 0). Un prefijo no finito ("1e999") da 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, (list, dict)):
        return 1 if value else 0
    match = _LEADING_FLOAT_RE.match(str(value))
    if not match:
        return 0
    text = match.group(1)
    if text.lstrip("+-").isdigit():
        return int(text)
    number = float(text)
    return int(number) if math.isfinite(number) else 0


def float_coerce(value: Any) -> float:
    """Float. Los strings toman su prefijo numérico ("9.5kg" -> 9.5, "x" -> 0.0)."""
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, (list, dict)):
        return 1.0 if value else 0.0
    match = _LEADING_FLOAT_RE.match(str(value))
    return float(match.group(1)) if match else 0.0


def serialize(value: Any) -> Any:
    """
    Listas y mapas -> JSON compacto (orden de inserción). Escalares sin cambios.

    NaN e Infinity no son JSON válido: json.dumps lanza ValueError y el
    documento queda como FAILED en el sync.
    """
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"), allow_nan=False)
    return value


class TransformationRegistry:
    """
    Registro nombre -> transformación.

    Uso:
        registry = build_default_registry()
        registry.register("slug", lambda v: str(v).replace(" ", "-"))
    """

    def __init__(self, transforms: Optional[Mapping[str, Transform]] = None) -> None:
        self._transforms: dict[str, Transform] = dict(transforms or {})

    def register(self, name: str, func: Transform) -> None:
        self._transforms[name] = func

    def get(self, name: str) -> Optional[Transform]:
        return self._transforms.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._transforms

    def names(self) -> list[str]:
        return list(self._transforms)


def build_default_registry() -> TransformationRegistry:
    return TransformationRegistry(
        {
            "title-case": title_case,
            "lowercase": lowercase,
            "integer-coerce": integer_coerce,
            "float-coerce": float_coerce,
            "serialize": serialize,
            "uppercase": uppercase,
            "trim": trim,
        }
    )


def apply_transformations(
    record: Mapping[str, Any],
    transformations: Mapping[str, str],
    registry: TransformationRegistry,
) -> dict[str, Any]:
    """
    Aplica la transformación configurada a cada campo presente, en orden de tabla.

    Los campos ausentes (o None) se saltan. Retorna un dict nuevo.
    """
    result = dict(record)
    for target_field, name in transformations.items():
        if result.get(target_field) is None:
            continue
        func = registry.get(name)
        if func is None:
            logger.debug(f"Transformación '{name}' no registrada; campo '{target_field}' sin cambios")
            continue
        result[target_field] = func(result[target_field])
    return result


def merge_defaults(record: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Agrega los defaults que falten. Nunca pisa un valor del documento."""
    merged = dict(record)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
    return merged
