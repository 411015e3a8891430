"""
Mapeos Firestore -> base de datos por colección.

Este es el punto recomendado para que tengas "control total" sobre:
- qué campos de Firestore se copian y a qué columna
- cómo se transforman los valores
- qué defaults recibe una fila nueva

Patrón:
- Mantén los modelos de `infrastructure/database/models.py` alineados con estos mapeos.
- Agrega una función por colección y regístrala en `get_collection_configs()`.
"""

from __future__ import annotations

from firestore_sync.core.config import Settings
from firestore_sync.infrastructure.database.models import ProductModel, UserModel

from .sync_config import CollectionSyncConfig, SyncSettings


def users_config() -> CollectionSyncConfig:
    return CollectionSyncConfig(
        name="users",
        table="users",
        model=UserModel,
        unique_key="email",
        field_mappings={
            "name": "name",
            "email": "email",
            "age": "age",
            # Campos anidados
            "profile.address.city": "city",
            "profile.address.country": "country",
            "profile.phone": "phone",
            # Arrays / objetos (se guardan como JSON)
            "tags": "tags",
            "preferences": "preferences",
            "metadata": "extra_metadata",
        },
        transformations={
            "name": "title-case",
            "email": "lowercase",
            "age": "integer-coerce",
            "tags": "serialize",
            "preferences": "serialize",
            "extra_metadata": "serialize",
        },
        defaults={
            "password": "password",
        },
    )


def products_config() -> CollectionSyncConfig:
    return CollectionSyncConfig(
        name="products",
        table="products",
        model=ProductModel,
        unique_key="sku",
        field_mappings={
            "name": "name",
            "sku": "sku",
            "price": "price",
            "category.name": "category_name",
            "category.id": "category_id",
            "images": "images",
            "specifications": "specifications",
            "variants": "variants",
        },
        transformations={
            "name": "title-case",
            "price": "float-coerce",
            "images": "serialize",
            "specifications": "serialize",
            "variants": "serialize",
        },
    )


def get_collection_configs() -> dict[str, CollectionSyncConfig]:
    """Colecciones configuradas, en el orden en que las recorre `--all`."""
    configs = [users_config(), products_config()]
    return {config.name: config for config in configs}


def build_sync_settings(settings: Settings) -> SyncSettings:
    return SyncSettings(
        collections=get_collection_configs(),
        batch_size=settings.SYNC_BATCH_SIZE,
        timeout=settings.SYNC_TIMEOUT,
        retry_attempts=settings.SYNC_RETRY_ATTEMPTS,
        default_collection=settings.SYNC_DEFAULT_COLLECTION,
    )
