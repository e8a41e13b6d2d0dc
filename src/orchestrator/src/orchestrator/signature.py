"""Slack request signature verification.

Checks the request timestamp against a fixed replay window, then compares the
``v0`` HMAC-SHA256 signature in constant time. Every failure mode yields False.
"""

from __future__ import annotations

import hashlib
import hmac

REPLAY_WINDOW_SECONDS = 300
SIGNATURE_VERSION = "v0"


def compute_signature(raw_body: bytes | str, timestamp: str, signing_secret: str) -> str:
    """Return the expected ``v0=<hex>`` signature for a request.

    The body is signed as bytes; ``str`` bodies are UTF-8 encoded first.
    """
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")
    base_string = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + raw_body
    digest = hmac.new(
        signing_secret.encode("utf-8"),
        base_string,
        hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_signature(
    raw_body: bytes | str,
    signature: str | None,
    timestamp: str | None,
    signing_secret: str,
    now: int,
) -> bool:
    """Verify that a request was signed by Slack and is fresh.

    Args:
        raw_body: Request body bytes exactly as received.
        signature: ``X-Slack-Signature`` header value.
        timestamp: ``X-Slack-Request-Timestamp`` header value.
        signing_secret: Slack app signing secret.
        now: Current time in epoch seconds.

    Returns:
        True only if the timestamp is within the replay window and the signature matches.

    """
    if not signature or not timestamp or not signing_secret:
        return False
    try:
        request_time = int(timestamp)
    except ValueError:
        return False
    if abs(now - request_time) > REPLAY_WINDOW_SECONDS:
        return False
    expected = compute_signature(raw_body, timestamp, signing_secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
