from __future__ import annotations

import base64
import json

import pytest
from jose import jwt

from firestore_sync.infrastructure.external.firestore.auth import (
    JWT_BEARER_GRANT_TYPE,
    GoogleTokenProvider,
    build_assertion,
    load_service_account,
)
from firestore_sync.shared.exceptions import CredentialsError, TokenExchangeError
from tests.conftest import FakeHttpSession, FakeResponse

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPE = "https://www.googleapis.com/auth/datastore"


def _b64url_json(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def test_load_service_account(credentials_file) -> None:
    creds = load_service_account(credentials_file)
    assert creds.client_email == "sync@demo-project.iam.gserviceaccount.com"
    assert creds.project_id == "demo-project"
    assert "BEGIN PRIVATE KEY" in creds.private_key


def test_load_service_account_missing_file(tmp_path) -> None:
    with pytest.raises(CredentialsError, match="not found"):
        load_service_account(str(tmp_path / "nope.json"))


def test_load_service_account_unparsable(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CredentialsError, match="could not be parsed"):
        load_service_account(str(path))


def test_load_service_account_missing_keys(tmp_path) -> None:
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"client_email": "x@y"}), encoding="utf-8")
    with pytest.raises(CredentialsError, match="private_key"):
        load_service_account(str(path))


def test_build_assertion_structure_and_signature(credentials_file, rsa_key_pair) -> None:
    _, public_pem = rsa_key_pair
    creds = load_service_account(credentials_file)

    assertion = build_assertion(creds, scope=SCOPE, audience=TOKEN_URI, now=1_700_000_000)

    header_seg, payload_seg, signature_seg = assertion.split(".")
    assert "=" not in assertion
    assert _b64url_json(header_seg) == {"alg": "RS256", "typ": "JWT"}

    payload = _b64url_json(payload_seg)
    assert payload == {
        "iss": creds.client_email,
        "scope": SCOPE,
        "aud": TOKEN_URI,
        "iat": 1_700_000_000,
        "exp": 1_700_003_600,
    }
    assert signature_seg

    claims = jwt.decode(
        assertion,
        public_pem,
        algorithms=["RS256"],
        audience=TOKEN_URI,
        options={"verify_exp": False, "verify_iat": False},
    )
    assert claims["iss"] == creds.client_email


def test_fetch_token_posts_jwt_bearer_form(credentials_file) -> None:
    http = FakeHttpSession(token_response=FakeResponse(200, {"access_token": "ya29.token"}))
    provider = GoogleTokenProvider(load_service_account(credentials_file), session=http, timeout_s=30)

    assert provider.fetch_token() == "ya29.token"

    sent = http.posts[0]
    assert sent["url"] == TOKEN_URI
    assert sent["data"]["grant_type"] == JWT_BEARER_GRANT_TYPE
    assert sent["data"]["assertion"].count(".") == 2
    assert sent["timeout"] == 30


def test_fetch_token_non_success_carries_body(credentials_file) -> None:
    http = FakeHttpSession(token_response=FakeResponse(400, {"error": "invalid_grant"}, text='{"error":"invalid_grant"}'))
    provider = GoogleTokenProvider(load_service_account(credentials_file), session=http)

    with pytest.raises(TokenExchangeError) as excinfo:
        provider.fetch_token()

    assert "invalid_grant" in excinfo.value.message
    assert excinfo.value.details["status_code"] == 400


def test_fetch_token_without_access_token(credentials_file) -> None:
    http = FakeHttpSession(token_response=FakeResponse(200, {"token_type": "Bearer"}))
    provider = GoogleTokenProvider(load_service_account(credentials_file), session=http)

    with pytest.raises(TokenExchangeError):
        provider.fetch_token()
