"""
CLI: revisa los usuarios que quedaron en la base de datos tras el sync.

Ejecución:
  firestore-sync-check
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.orm import Session


def format_users(session: Session) -> list[str]:
    """Una línea por usuario: nombre, email y edad."""
    from firestore_sync.infrastructure.database.models import UserModel

    users = session.execute(select(UserModel).order_by(UserModel.id)).scalars().all()
    lines = [f"Found {len(users)} users in the database:"]
    for user in users:
        lines.append(f"  - {user.name} ({user.email}) - Age: {user.age}")
    return lines


def main() -> int:
    load_dotenv(Path.cwd() / ".env", override=False)

    from firestore_sync.core.config import Settings
    from firestore_sync.infrastructure.database.session import (
        create_db_engine,
        create_session_factory,
        init_db,
        session_scope,
    )

    settings = Settings()
    engine = create_db_engine(settings.effective_database_url)
    try:
        init_db(engine)
        with session_scope(create_session_factory(engine)) as session:
            print("Testing synced data...")
            for line in format_users(session):
                print(line)
    finally:
        engine.dispose()

    print("Synced data check completed!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
