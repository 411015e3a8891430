"""
Configuración del sync (mapeo Firestore -> base de datos).

La idea es que aquí tengas control total de:
- colección origen Firestore
- tabla/modelo destino
- campo único para el upsert
- mapeos de campos (paths con puntos para campos anidados)
- transformaciones y defaults

Este módulo no realiza I/O: solo define configuración.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from firestore_sync.shared.exceptions import CollectionConfigNotFoundError


@dataclass(frozen=True)
class CollectionSyncConfig:
    """
    Config de una colección Firestore -> una tabla.

    - field_mappings: source_path -> campo destino (orden = orden de aplicación)
    - transformations: campo destino -> nombre de transformación
    - defaults: campo destino -> valor usado si el documento no lo trae
    """

    name: str
    table: str
    model: type
    unique_key: str
    field_mappings: Mapping[str, str]
    transformations: Mapping[str, str] = field(default_factory=dict)
    defaults: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SyncSettings:
    """
    Configuración completa inyectada al driver.

    batch_size y retry_attempts se declaran pero el driver no los consulta;
    timeout se usa como timeout de las requests HTTP.
    """

    collections: Mapping[str, CollectionSyncConfig]
    batch_size: int = 100
    timeout: int = 300
    retry_attempts: int = 3
    default_collection: str = "users"

    def get_collection(self, name: str) -> CollectionSyncConfig:
        config = self.collections.get(name)
        if config is None:
            raise CollectionConfigNotFoundError(name)
        return config

    def collection_names(self) -> list[str]:
        return list(self.collections)
