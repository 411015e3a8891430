"""
Repositorio destino (SQLAlchemy) para el upsert por unique key.

Regla: busca la fila cuyo campo único coincide; si existe la actualiza,
si no la crea. Nunca borra filas.
"""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from firestore_sync.shared.exceptions import UpsertError

from .sync_config import CollectionSyncConfig


class UpsertRepository:
    """Operaciones de escritura sobre el modelo destino de una colección."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, config: CollectionSyncConfig, record: Mapping[str, Any]) -> str:
        """
        Crea o actualiza la fila identificada por config.unique_key.

        Returns:
            "created" o "updated"
        Raises:
            UpsertError: si el registro trae campos que el modelo no tiene.
        """
        model = config.model
        columns = {attr.key for attr in inspect(model).column_attrs}
        unknown = [key for key in record if key not in columns]
        if unknown:
            raise UpsertError(
                f"Unknown column(s) for {config.table}: {', '.join(unknown)}",
                table=config.table,
            )

        unique_column = getattr(model, config.unique_key)
        unique_value = record[config.unique_key]

        try:
            existing = self.session.execute(
                select(model).where(unique_column == unique_value)
            ).scalars().first()

            if existing is not None:
                for key, value in record.items():
                    setattr(existing, key, value)
                action = "updated"
            else:
                self.session.add(model(**record))
                action = "created"

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return action

    def count(self, config: CollectionSyncConfig) -> int:
        return self.session.execute(select(func.count()).select_from(config.model)).scalar_one()
