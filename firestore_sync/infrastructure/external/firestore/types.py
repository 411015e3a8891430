"""
Tipos y utilidades puras para el pipeline Firestore -> base de datos.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class _Absent:
    """Marca un path que no existe en el árbol de campos."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


Transform = Callable[[Any], Any]


@dataclass(frozen=True)
class FirestoreDocument:
    """
    Documento Firestore tal como llega de la API REST.

    - name: path completo (projects/.../documents/users/abc123)
    - fields: árbol de campos con wire tags (stringValue, mapValue, ...)
    """

    name: str
    fields: dict[str, Any]
    create_time: Optional[str] = None
    update_time: Optional[str] = None

    @property
    def document_id(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "FirestoreDocument":
        return cls(
            name=payload.get("name") or "",
            fields=payload.get("fields") or {},
            create_time=payload.get("createTime"),
            update_time=payload.get("updateTime"),
        )


class DocumentStatus(str, Enum):
    SYNCED = "synced"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DocumentResult:
    """Resultado de procesar un documento."""

    document_id: str
    status: DocumentStatus
    unique_value: Any = None
    action: Optional[str] = None  # "created" | "updated"
    error: Optional[str] = None
    record: dict[str, Any] = field(default_factory=dict)


@dataclass
class CollectionSyncSummary:
    """
    Resumen de un sync pass sobre una colección.

    status:
        "success" si se procesaron los documentos (aunque alguno fallara),
        "empty" si la colección no tenía documentos,
        "fatal" si la colección se abortó (config, credenciales, token, fetch).
    """

    collection: str
    status: str = "success"
    error: Optional[str] = None
    results: list[DocumentResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def synced(self) -> int:
        return sum(1 for r in self.results if r.status is DocumentStatus.SYNCED)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status is DocumentStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status is DocumentStatus.FAILED)

    @property
    def created(self) -> int:
        return sum(1 for r in self.results if r.action == "created")

    @property
    def updated(self) -> int:
        return sum(1 for r in self.results if r.action == "updated")

    @property
    def is_fatal(self) -> bool:
        return self.status == "fatal"
