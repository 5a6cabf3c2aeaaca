"""HS256 bearer tokens as plain functions.

The editor API only verifies tokens; the identity service that owns user
accounts issues them with the shared ``JWT_SECRET_KEY``. ``create_token``
exists for that service's tooling and for tests.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

ISSUER = "website-editor"
_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class TokenPayload:
    sub: str
    role: str
    exp: datetime


def create_token(
    subject: str,
    secret: str,
    role: str = "user",
    algorithm: str = "HS256",
    expires_hours: int = 24,
) -> str:
    """Issue a token for *subject* (a ``users.user_id``).

    Negative ``expires_hours`` yields an already expired token.
    """
    if algorithm != "HS256":
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    issued_at = int(time.time())
    claims = {
        "sub": subject,
        "role": role,
        "iss": ISSUER,
        "iat": issued_at,
        "exp": issued_at + expires_hours * 3600,
    }
    signing_input = _encode_json(_HEADER) + b"." + _encode_json(claims)
    return (signing_input + b"." + _b64url(_sign(signing_input, secret))).decode()


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Verify *token* and return its payload, or ``None`` if it is unusable.

    Unusable means: wrong algorithm, bad signature, foreign issuer, expired,
    or no subject.
    """
    if algorithm != "HS256":
        return None

    try:
        signing_input, _, signature = token.encode().rpartition(b".")
        if signing_input.count(b".") != 1:
            return None
        if not hmac.compare_digest(_sign(signing_input, secret), _b64url_decode(signature)):
            return None

        claims = json.loads(_b64url_decode(signing_input.split(b".")[1]))
        exp = claims.get("exp", 0)
        if claims.get("iss") != ISSUER or time.time() > exp or not claims.get("sub"):
            return None

        return TokenPayload(
            sub=claims["sub"],
            role=claims.get("role", "user"),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (ValueError, TypeError, AttributeError):
        # json.JSONDecodeError and binascii.Error are ValueErrors.
        return None


def _sign(signing_input: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def _encode_json(obj: dict) -> bytes:
    return _b64url(json.dumps(obj, separators=(",", ":")).encode())


def _b64url(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64url_decode(data: bytes) -> bytes:
    return base64.urlsafe_b64decode(data + b"=" * (-len(data) % 4))
