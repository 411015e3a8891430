"""
Excepciones del pipeline Firestore -> base de datos.

Fatales (abortan la colección en curso):
- CollectionConfigNotFoundError
- CredentialsError
- TokenExchangeError
- FirestoreFetchError

Por documento (se registran y el pass continúa):
- UpsertError
"""
from typing import Any, Optional

from firestore_sync.shared.exceptions.base import AppException


class FirestoreSyncError(AppException):
    """Excepción base para errores del sync."""

    def __init__(self, message: str, error_code: str = "SYNC_ERROR", details=None):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class CollectionConfigNotFoundError(FirestoreSyncError):
    """No existe configuración para la colección pedida."""

    def __init__(self, collection: str):
        super().__init__(
            message=f"No configuration found for collection: {collection}",
            error_code="COLLECTION_CONFIG_NOT_FOUND",
            details={"collection": collection}
        )


class CredentialsError(FirestoreSyncError):
    """Archivo de credenciales ausente, ilegible o incompleto."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CREDENTIALS_ERROR",
            details={"path": path} if path else None
        )


class TokenExchangeError(FirestoreSyncError):
    """El endpoint OAuth2 rechazó el assertion o respondió sin access_token."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(
            message=message,
            error_code="TOKEN_EXCHANGE_ERROR",
            details={"status_code": status_code, "body": body}
        )


class FirestoreFetchError(FirestoreSyncError):
    """Error al leer la colección desde la API REST de Firestore."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(
            message=message,
            error_code="FIRESTORE_FETCH_ERROR",
            details={"status_code": status_code, "body": body}
        )


class UpsertError(FirestoreSyncError):
    """El registro no se puede persistir en el modelo destino."""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="UPSERT_ERROR",
            details={"table": table} if table else None
        )
