"""Webhook signature verification."""

from __future__ import annotations

import base64
import hashlib
import hmac

SIGNATURE_HEADER = "X-Trello-Webhook"


def compute_signature(secret: str, body: bytes, callback_url: str) -> str:
    """Base64 HMAC-SHA1 of the raw body followed by the callback URL."""
    digest = hmac.new(secret.encode("utf-8"), body + callback_url.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(secret: str, body: bytes, callback_url: str, signature: str | None) -> bool:
    if not secret or not signature or not callback_url:
        return False
    expected = compute_signature(secret, body, callback_url)
    return hmac.compare_digest(expected, signature)
