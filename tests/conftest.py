"""
Configuración de fixtures para pytest.
"""
import json
from typing import Generator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from firestore_sync.infrastructure.database.session import Base
from firestore_sync.infrastructure.database import models  # noqa: F401


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    engine = create_engine(TEST_DATABASE_URL, echo=False)
    Base.metadata.create_all(bind=engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    session = session_factory()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="session")
def rsa_key_pair() -> tuple[str, str]:
    """Par de claves RSA (private PEM, public PEM) generado una vez por sesión."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture
def credentials_file(tmp_path, rsa_key_pair) -> str:
    """JSON de service account válido en disco."""
    private_pem, _ = rsa_key_pair
    path = tmp_path / "firebase.json"
    path.write_text(
        json.dumps(
            {
                "type": "service_account",
                "project_id": "demo-project",
                "client_email": "sync@demo-project.iam.gserviceaccount.com",
                "private_key": private_pem,
            }
        ),
        encoding="utf-8",
    )
    return str(path)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        return self._payload


class FakeHttpSession:
    """
    Sustituto de requests.Session: respuestas fijas para el token endpoint (POST)
    y para Firestore (GET, por colección).
    """

    def __init__(self, *, token_response=None, collections=None) -> None:
        self.token_response = token_response or FakeResponse(200, {"access_token": "test-token"})
        self.collections = collections or {}
        self.posts: list[dict] = []
        self.gets: list[dict] = []

    def post(self, url, data=None, timeout=None, **kwargs):
        self.posts.append({"url": url, "data": data, "timeout": timeout})
        return self.token_response

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.gets.append({"url": url, "headers": headers, "timeout": timeout})
        collection = url.rsplit("/", 1)[-1]
        response = self.collections.get(collection)
        if response is None:
            return FakeResponse(404, {"error": {"code": 404}}, text='{"error": "not found"}')
        if isinstance(response, FakeResponse):
            return response
        return FakeResponse(200, {"documents": response})


def fs_string(value: str) -> dict:
    return {"stringValue": value}


def fs_int(value: int) -> dict:
    return {"integerValue": str(value)}


def fs_map(**fields) -> dict:
    return {"mapValue": {"fields": fields}}


def fs_array(*values) -> dict:
    return {"arrayValue": {"values": list(values)}}


def fs_document(collection: str, doc_id: str, **fields) -> dict:
    return {
        "name": f"projects/demo-project/databases/(default)/documents/{collection}/{doc_id}",
        "fields": fields,
        "createTime": "2025-01-15T10:00:00.000000Z",
        "updateTime": "2025-01-15T10:00:00.000000Z",
    }
