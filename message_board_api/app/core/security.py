"""
Credentials and caller resolution.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Two kinds of
credential are signed with the application's secret key:

* session tokens (``kind = "session"``), sent as
  ``Authorization: Bearer <token>``.  A valid session token makes the
  request *authenticated*; its ``sub`` and ``email`` claims identify
  the caller.
* public API keys (``kind = "api_key"``), sent as ``X-API-Key``.  They
  grant *public* (read‑only) access and expire after
  ``settings.api_key_expire_days`` days, seven by default.

A credential of one kind is never accepted in the other's place.  The
``resolve_caller`` dependency turns request headers into a
:class:`~message_board_api.app.core.permissions.Caller`; deciding what
the caller may do is left to the permission table.
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings
from .permissions import Caller

SESSION_KIND = "session"
API_KEY_KIND = "api_key"


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def _encode(claims: Dict[str, Any], secret_key: str) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def _decode(token: str, secret_key: str, kind: str) -> Optional[Dict[str, Any]]:
    """Verify signature, expiry and kind of ``token``.

    Returns the claims on success and ``None`` for anything malformed,
    forged, expired or of the wrong kind.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        # Constant‑time comparison to prevent timing attacks
        if not hmac.compare_digest(_sign(signing_input, secret_key), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except ValueError:
        return None
    if not isinstance(data, dict) or data.get("kind") != kind:
        return None
    exp = data.get("exp")
    if not isinstance(exp, (int, float)) or int(exp) < int(time.time()):
        return None
    return data


def create_access_token(
    data: Dict[str, Any], secret_key: str, expires_delta: Optional[int] = None
) -> str:
    """Create a signed session token carrying ``data``.

    Parameters
    ----------
    data : dict
        Claims to embed, typically ``{"sub": ..., "email": ...}``.
    secret_key : str
        Signing secret (``settings.secret_key``).
    expires_delta : Optional[int]
        Lifetime in seconds.  Defaults to one day.

    Returns
    -------
    str
        ``header.payload.signature``, each part base64url encoded.
    """
    claims = dict(data)
    claims["kind"] = SESSION_KIND
    claims["exp"] = int(time.time()) + (expires_delta or 60 * 60 * 24)
    return _encode(claims, secret_key)


def decode_access_token(token: str, secret_key: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid session token, else ``None``."""
    return _decode(token, secret_key, SESSION_KIND)


def create_api_key(secret_key: str, expires_in_days: int = 7) -> str:
    """Issue a public, read‑only API key valid for ``expires_in_days`` days."""
    issued_at = int(time.time())
    claims = {
        "kind": API_KEY_KIND,
        "iat": issued_at,
        "exp": issued_at + expires_in_days * 24 * 60 * 60,
    }
    return _encode(claims, secret_key)


def verify_api_key(key: str, secret_key: str) -> bool:
    return _decode(key, secret_key, API_KEY_KIND) is not None


bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _not_authenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    api_key: Optional[str] = Security(api_key_scheme),
    settings: Settings = Depends(get_settings),
) -> Caller:
    """Dependency that resolves the identity class of the current request.

    A bearer token takes precedence over an API key.  Invalid or expired
    credentials are rejected with HTTP 401 rather than silently
    downgraded to public access.  Requests carrying no credential at all
    are public, unless ``settings.require_api_key`` is set.
    """
    if credentials is not None:
        payload = decode_access_token(credentials.credentials, settings.secret_key)
        if not payload or not payload.get("sub"):
            raise _not_authenticated("Invalid or expired token")
        return Caller.authenticated(str(payload["sub"]), payload.get("email"))

    if api_key:
        if not verify_api_key(api_key, settings.secret_key):
            raise _not_authenticated("Invalid or expired API key")
        return Caller.public()

    if settings.require_api_key:
        raise _not_authenticated("Not authenticated")
    return Caller.public()
