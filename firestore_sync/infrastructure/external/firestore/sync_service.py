"""
Servicio de sincronización Firestore -> base de datos.

Diseño (resumen):
- Resuelve la config de la colección (tabla, modelo, unique key, mapeos)
- Lee la service account y obtiene un access token (JWT bearer)
- Trae la colección completa con una sola request REST
- Por documento: mapeo -> transformaciones -> defaults -> upsert por unique key
- Un error en un documento se registra y el pass continúa
- Un error de config/credenciales/token/fetch aborta solo esa colección

Estrategia de idempotencia:
- Upsert match-or-create por unique key: re-ejecutar con los mismos datos
  no crea filas nuevas ni cambia valores.
"""

from __future__ import annotations

from typing import Any, Optional

import requests
from loguru import logger
from sqlalchemy.orm import Session

from firestore_sync.core.config import Settings
from firestore_sync.shared.exceptions import CredentialsError

from .auth import GoogleTokenProvider, load_service_account
from .collection_mappings import build_sync_settings
from .field_mapper import map_document_fields
from .firestore_client import FirestoreClient
from .repository import UpsertRepository
from .sync_config import CollectionSyncConfig, SyncSettings
from .transformations import (
    TransformationRegistry,
    apply_transformations,
    build_default_registry,
    merge_defaults,
)
from .types import CollectionSyncSummary, DocumentResult, DocumentStatus, FirestoreDocument


def build_record(
    document: FirestoreDocument,
    config: CollectionSyncConfig,
    registry: TransformationRegistry,
) -> dict[str, Any]:
    """
    Mapea un documento a un registro plano listo para el upsert.

    Orden: mapeo de campos -> transformaciones -> defaults.
    """
    record = map_document_fields(document.fields, config.field_mappings)
    record = apply_transformations(record, config.transformations, registry)
    return merge_defaults(record, config.defaults)


class FirestoreToDatabaseSync:
    """
    Orquestador del pipeline. Un sync pass por colección.
    """

    def __init__(
        self,
        *,
        sync_settings: SyncSettings,
        repository: UpsertRepository,
        credentials_path: str,
        project_id: Optional[str] = None,
        database: str = "(default)",
        base_url: str = "https://firestore.googleapis.com/v1",
        token_uri: str = "https://oauth2.googleapis.com/token",
        scope: str = "https://www.googleapis.com/auth/datastore",
        registry: Optional[TransformationRegistry] = None,
        http_session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = sync_settings
        self._repository = repository
        self._credentials_path = credentials_path
        self._project_id = project_id
        self._database = database
        self._base_url = base_url
        self._token_uri = token_uri
        self._scope = scope
        self._registry = registry or build_default_registry()
        self._http = http_session or requests.Session()

    def sync_all(self) -> list[CollectionSyncSummary]:
        """
        Sincroniza todas las colecciones configuradas, una tras otra.

        El fallo fatal de una colección no detiene las siguientes.
        """
        summaries = []
        for name in self._settings.collection_names():
            logger.info(f"Syncing collection: {name}")
            summaries.append(self.sync_collection(name))
        return summaries

    def sync_collection(self, collection: str) -> CollectionSyncSummary:
        summary = CollectionSyncSummary(collection=collection)

        try:
            config = self._settings.get_collection(collection)

            logger.info(f"Initializing Firestore connection for collection: {collection}")
            token, client = self._authenticate()

            logger.info(f"Fetching documents from Firestore collection: {collection}")
            documents = client.list_documents(collection, token=token)
        except Exception as e:
            logger.exception(f"Firestore sync failed for collection: {collection}")
            summary.status = "fatal"
            summary.error = str(e)
            return summary

        if not documents:
            logger.warning(f"No documents found in Firestore collection: {collection}")
            summary.status = "empty"
            return summary

        logger.info(f"Found {len(documents)} documents to sync in collection: {collection} -> {config.table}")

        for document in documents:
            summary.results.append(self.process_document(document, config))

        logger.success(
            f"Successfully synced collection: {collection} "
            f"(total={summary.total}, synced={summary.synced}, created={summary.created}, "
            f"updated={summary.updated}, skipped={summary.skipped}, failed={summary.failed})"
        )
        return summary

    def process_document(
        self,
        document: FirestoreDocument,
        config: CollectionSyncConfig,
    ) -> DocumentResult:
        """
        Procesa un documento. Nunca lanza: los errores se devuelven como FAILED.
        """
        record: dict[str, Any] = {}
        try:
            record = build_record(document, config, self._registry)

            unique_value = record.get(config.unique_key)
            if unique_value is None or unique_value == "":
                logger.warning(
                    f"Skipping document {document.document_id} without unique key: {config.unique_key}"
                )
                return DocumentResult(
                    document_id=document.document_id,
                    status=DocumentStatus.SKIPPED,
                    record=record,
                )

            action = self._repository.upsert(config, record)
            logger.info(f"Synced: {record.get('name') or unique_value} ({action})")
            return DocumentResult(
                document_id=document.document_id,
                status=DocumentStatus.SYNCED,
                unique_value=unique_value,
                action=action,
                record=record,
            )
        except Exception as e:
            logger.error(
                f"Failed to sync document {document.document_id} in collection {config.name}: {e} | data={record}"
            )
            return DocumentResult(
                document_id=document.document_id,
                status=DocumentStatus.FAILED,
                unique_value=record.get(config.unique_key),
                error=str(e),
                record=record,
            )

    def _authenticate(self) -> tuple[str, FirestoreClient]:
        credentials = load_service_account(self._credentials_path)

        project_id = self._project_id or credentials.project_id
        if not project_id:
            raise CredentialsError(
                "Firebase project id not configured (FIREBASE_PROJECT_ID or project_id in credentials)",
                path=self._credentials_path,
            )

        timeout = self._settings.timeout
        provider = GoogleTokenProvider(
            credentials,
            session=self._http,
            token_uri=self._token_uri,
            scope=self._scope,
            timeout_s=timeout,
        )
        token = provider.fetch_token()

        client = FirestoreClient(
            project_id,
            database=self._database,
            session=self._http,
            base_url=self._base_url,
            timeout_s=timeout,
        )
        return token, client


def build_from_settings(
    settings: Settings,
    session: Session,
    *,
    http_session: Optional[requests.Session] = None,
) -> FirestoreToDatabaseSync:
    """
    Constructor "oficial" del pipeline a partir de Settings y una sesión de BD.
    """
    return FirestoreToDatabaseSync(
        sync_settings=build_sync_settings(settings),
        repository=UpsertRepository(session),
        credentials_path=settings.FIREBASE_CREDENTIALS,
        project_id=settings.FIREBASE_PROJECT_ID or None,
        database=settings.FIRESTORE_DATABASE,
        base_url=settings.FIRESTORE_BASE_URL,
        token_uri=settings.GOOGLE_TOKEN_URI,
        scope=settings.FIRESTORE_SCOPE,
        http_session=http_session,
    )
