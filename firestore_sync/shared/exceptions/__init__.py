from firestore_sync.shared.exceptions.base import AppException
from firestore_sync.shared.exceptions.sync import (
    CollectionConfigNotFoundError,
    CredentialsError,
    FirestoreFetchError,
    FirestoreSyncError,
    TokenExchangeError,
    UpsertError,
)

__all__ = [
    "AppException",
    "CollectionConfigNotFoundError",
    "CredentialsError",
    "FirestoreFetchError",
    "FirestoreSyncError",
    "TokenExchangeError",
    "UpsertError",
]
