"""
Gestión de sesiones de base de datos.

El job es sincrónico: un engine y una Session por corrida.
"""
from typing import Iterator, Optional
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from firestore_sync.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()


def _create_engine_args(database_url: str, echo: bool) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": echo,
        "future": True,
    }

    # Configuracion de pool solo para PostgreSQL
    if database_url.startswith("postgresql"):
        args.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Crea un engine para la URL indicada (por defecto la de settings)."""
    url = database_url or settings.effective_database_url
    return create_engine(url, **_create_engine_args(url, settings.DEBUG if echo is None else echo))


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory ligada al engine."""
    return sessionmaker(
        bind=engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """
    Proporciona una sesión y la cierra al salir.

    El commit es responsabilidad del caller (el sync hace commit por documento).
    """
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Crea las tablas que no existan."""
    # Importa los modelos para que se registren con Base
    from firestore_sync.infrastructure.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
