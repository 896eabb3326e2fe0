"""Password hashing and signed access tokens.

Access tokens are ``<payload>.<signature>`` where both halves are unpadded
base64url and the signature is HMAC-SHA256 over the encoded payload. Refresh
tokens are opaque random strings; only their SHA-256 is stored.
"""
import base64
import hashlib
import hmac
import json
import re
import secrets
import time
from datetime import datetime, timedelta

from internhub.core.config import settings

PBKDF2_ITERATIONS = 120_000
SALT_BYTES = 16
MIN_PASSWORD_LENGTH = 8
ACCESS_TOKEN_TYPE = "access"
SPECIAL_CHAR_PATTERN = re.compile(r"[^A-Za-z0-9]")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _pbkdf2(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)


def hash_password(password: str) -> tuple[str, str]:
    """Return ``(salt, digest)``, both base64url encoded."""
    salt = secrets.token_bytes(SALT_BYTES)
    return _encode(salt), _encode(_pbkdf2(password, salt))


def verify_password(password: str, salt_b64: str, digest_b64: str) -> bool:
    return hmac.compare_digest(_pbkdf2(password, _decode(salt_b64)), _decode(digest_b64))


def password_policy_issues(password: str) -> list[str]:
    checks = (
        (len(password) >= MIN_PASSWORD_LENGTH, f"at least {MIN_PASSWORD_LENGTH} characters"),
        (any(ch.isupper() for ch in password), "at least one uppercase letter"),
        (bool(SPECIAL_CHAR_PATTERN.search(password)), "at least one special character"),
    )
    return [message for passed, message in checks if not passed]


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def _signature(encoded_payload: str) -> str:
    mac = hmac.new(settings.auth_secret.encode("utf-8"), encoded_payload.encode("utf-8"), hashlib.sha256)
    return _encode(mac.digest())


def create_access_token(user_id: str) -> str:
    issued_at = int(time.time())
    claims = {
        "sub": str(user_id),
        "typ": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + settings.auth_token_ttl_seconds,
    }
    encoded = _encode(json.dumps(claims, separators=(",", ":"), sort_keys=True).encode("utf-8"))
    return f"{encoded}.{_signature(encoded)}"


def verify_auth_token(token: str) -> str | None:
    """Return the subject of a valid, unexpired access token, else ``None``."""
    encoded, dot, signature = (token or "").partition(".")
    if not dot or not hmac.compare_digest(_signature(encoded), signature):
        return None
    try:
        claims = json.loads(_decode(encoded))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(claims, dict) or claims.get("typ") != ACCESS_TOKEN_TYPE:
        return None
    expires_at = claims.get("exp")
    if not isinstance(expires_at, int) or expires_at < int(time.time()):
        return None
    return claims.get("sub") or None


def create_refresh_token() -> str:
    return secrets.token_urlsafe(48)


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def expiry_from_now(seconds: int) -> datetime:
    return datetime.utcnow() + timedelta(seconds=seconds)
