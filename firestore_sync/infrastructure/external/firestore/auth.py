"""
Autenticación con service account de Google (OAuth2 JWT bearer).

Flujo:
1. Se firma un JWT (RS256) con la private key de la service account.
2. Se intercambia en el token endpoint por un access token (Bearer).

No hay reintentos ni cache: el driver pide un token por cada sync pass.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests
from jose import jwt
from jose.exceptions import JWKError, JWSError
from loguru import logger

from firestore_sync.shared.exceptions import CredentialsError, TokenExchangeError

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_SCOPE = "https://www.googleapis.com/auth/datastore"
ASSERTION_LIFETIME_S = 3600


@dataclass(frozen=True)
class ServiceAccountCredentials:
    client_email: str
    private_key: str
    project_id: Optional[str] = None
    token_uri: Optional[str] = None


def load_service_account(path: str) -> ServiceAccountCredentials:
    """
    Lee el JSON de la service account.

    Raises:
        CredentialsError: si el archivo no existe, no es JSON válido o le
            faltan client_email / private_key.
    """
    credentials_path = Path(path)
    if not credentials_path.is_file():
        raise CredentialsError(f"Firebase credentials file not found at: {path}", path=path)

    try:
        data = json.loads(credentials_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CredentialsError(f"Firebase credentials file could not be parsed: {path} ({e})", path=path) from e

    if not isinstance(data, dict):
        raise CredentialsError(f"Firebase credentials file must contain a JSON object: {path}", path=path)

    missing = [key for key in ("client_email", "private_key") if not data.get(key)]
    if missing:
        raise CredentialsError(
            f"Firebase credentials file is missing {', '.join(missing)}: {path}",
            path=path,
        )

    return ServiceAccountCredentials(
        client_email=data["client_email"],
        private_key=data["private_key"],
        project_id=data.get("project_id"),
        token_uri=data.get("token_uri"),
    )


def build_assertion(
    credentials: ServiceAccountCredentials,
    *,
    scope: str = DEFAULT_SCOPE,
    audience: str = DEFAULT_TOKEN_URI,
    now: Optional[int] = None,
) -> str:
    """
    Construye el JWT firmado (header.payload.signature, base64url sin padding).

    iat/exp separados por una hora.
    """
    issued_at = int(time.time()) if now is None else int(now)
    claims = {
        "iss": credentials.client_email,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + ASSERTION_LIFETIME_S,
    }
    try:
        return jwt.encode(claims, credentials.private_key, algorithm="RS256")
    except (JWKError, JWSError) as e:
        raise CredentialsError(f"Could not sign assertion with the service account key: {e}") from e


class GoogleTokenProvider:
    """
    Intercambia el assertion por un access token.
    """

    def __init__(
        self,
        credentials: ServiceAccountCredentials,
        *,
        session: Optional[requests.Session] = None,
        token_uri: str = DEFAULT_TOKEN_URI,
        scope: str = DEFAULT_SCOPE,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._creds = credentials
        self._token_uri = token_uri
        self._scope = scope
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def fetch_token(self) -> str:
        assertion = build_assertion(self._creds, scope=self._scope, audience=self._token_uri)

        try:
            resp = self._session.post(
                self._token_uri,
                data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
                timeout=self._timeout_s,
            )
        except requests.RequestException as e:
            raise TokenExchangeError(f"Failed to get access token: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise TokenExchangeError(
                f"Failed to get access token: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        payload: Any = resp.json()
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise TokenExchangeError(
                "Token endpoint response has no access_token",
                status_code=resp.status_code,
                body=resp.text,
            )

        logger.debug(f"Access token obtenido para {self._creds.client_email}")
        return token
