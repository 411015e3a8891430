"""
CLI: Firestore -> base de datos (one-way sync).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer).

Variables de entorno (o .env):
  - FIREBASE_CREDENTIALS (ruta al JSON de la service account)
  - FIREBASE_PROJECT_ID (opcional si el JSON trae project_id)
  - DATABASE_URL

Ejecución:
  firestore-sync                 # colección por defecto (SYNC_DEFAULT_COLLECTION)
  firestore-sync products        # una colección
  firestore-sync --all           # todas las colecciones configuradas
  firestore-sync --all --init-db # crea las tablas que falten antes del sync
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firestore-sync",
        description="Sync Firestore data to a relational database",
    )
    parser.add_argument(
        "collection",
        nargs="?",
        help="La colección a sincronizar (por defecto SYNC_DEFAULT_COLLECTION).",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Sincroniza todas las colecciones configuradas.",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Crea las tablas destino que no existan antes de sincronizar.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Cargar variables desde .env del cwd si existe, antes de leer Settings.
    load_dotenv(Path.cwd() / ".env", override=False)

    from firestore_sync.core.config import Settings
    from firestore_sync.core.logging import configure_logging
    from firestore_sync.infrastructure.database.session import (
        create_db_engine,
        create_session_factory,
        init_db,
        session_scope,
    )
    from firestore_sync.infrastructure.external.firestore.sync_service import build_from_settings

    settings = Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    engine = create_db_engine(settings.effective_database_url)
    try:
        if args.init_db:
            init_db(engine)
            logger.info("Base de datos inicializada")

        with session_scope(create_session_factory(engine)) as session:
            service = build_from_settings(settings, session)

            if args.all:
                summaries = service.sync_all()
            else:
                summaries = [service.sync_collection(args.collection or settings.SYNC_DEFAULT_COLLECTION)]
    finally:
        engine.dispose()

    exit_code = 0
    for summary in summaries:
        if summary.is_fatal:
            logger.error(f"Sync failed for collection {summary.collection}: {summary.error}")
            exit_code = 1
        else:
            logger.info(
                f"{summary.collection}: status={summary.status}, synced={summary.synced}, "
                f"skipped={summary.skipped}, failed={summary.failed}"
            )
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
