"""Signed session tokens for the auth cookie.

The login service issues the token; this app only verifies it to get the opaque user id.
"""
import base64
import hmac
import hashlib
import time

from app.core.config import get_settings


# Session token: base64(user_id:timestamp).hmac
def _sign_payload(payload: bytes) -> str:
    settings = get_settings()
    sig = hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + sig


def _verify_sig(payload: bytes, sig: str) -> bool:
    settings = get_settings()
    expected = hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, sig)


def create_session_token(user_id: str, issued_at: int | None = None) -> str:
    """Create a signed session token for the user (for auth cookie)."""
    ts = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{ts}".encode("utf-8")
    return _sign_payload(payload)


def verify_session_token(token: str) -> str | None:
    """Verify signed token and return user_id if valid; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not _verify_sig(payload, sig):
            return None
        # user ids are opaque and may contain ':'; the timestamp is always last
        user_id, ts_raw = payload.decode("utf-8").rsplit(":", 1)
        ts = int(ts_raw)
        if abs(time.time() - ts) > get_settings().auth_cookie_max_age:
            return None
        return user_id or None
    except (ValueError, UnicodeDecodeError):
        return None
