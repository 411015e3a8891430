"""
Cliente mínimo de la API REST de Firestore (sin SDKs externos).

- Una sola request por colección (sin paginación).
- No hace cast de valores: eso lo decide el mapeo.
"""

from __future__ import annotations

from typing import Any, Optional

import requests
from loguru import logger

from firestore_sync.shared.exceptions import FirestoreFetchError

from .types import FirestoreDocument

DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"


class FirestoreClient:
    """
    Cliente HTTP de Firestore para un proyecto/base de datos.
    """

    def __init__(
        self,
        project_id: str,
        *,
        database: str = "(default)",
        session: Optional[requests.Session] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._project_id = project_id
        self._database = database
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def collection_url(self, collection: str) -> str:
        return (
            f"{self._base_url}/projects/{self._project_id}"
            f"/databases/{self._database}/documents/{collection}"
        )

    def list_documents(self, collection: str, *, token: str) -> list[FirestoreDocument]:
        """
        Trae todos los documentos que devuelve una única request a la colección.

        Raises:
            FirestoreFetchError: error de conexión o respuesta no-2xx.
        """
        url = self.collection_url(collection)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            resp = self._session.get(url, headers=headers, timeout=self._timeout_s)
        except requests.RequestException as e:
            raise FirestoreFetchError(f"Failed to fetch documents from Firestore: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise FirestoreFetchError(
                f"Failed to fetch documents from Firestore: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        payload: Any = resp.json() or {}
        if payload.get("nextPageToken"):
            logger.warning(
                f"La colección '{collection}' tiene más páginas; solo se procesa la primera respuesta"
            )

        return [FirestoreDocument.from_api(doc) for doc in payload.get("documents") or []]
