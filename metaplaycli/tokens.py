"""Decoding of JSON Web Token payloads for display purposes."""

from __future__ import annotations

import base64
import json
import re
from typing import Any

_URL_SAFE_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def _decode_raw_urlsafe(segment: str) -> bytes:
    """Decode unpadded URL-safe base64, rejecting padding and foreign characters."""
    if not _URL_SAFE_ALPHABET.fullmatch(segment):
        raise ValueError(f"illegal base64 data in token segment {segment!r}")
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except ValueError as exc:
        raise ValueError(f"illegal base64 data in token segment: {exc}") from exc


def decode_jwt(token: str) -> dict[str, Any] | None:
    """Return the claims of a JWT's payload without verifying its signature.

    Returns None when the token does not consist of exactly three parts.
    Raises ValueError when the payload is not valid base64 or not a JSON object.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload = _decode_raw_urlsafe(parts[1])
    try:
        claims = json.loads(payload)
    except ValueError as exc:
        raise ValueError(f"token payload is not valid JSON: {exc}") from exc
    if not isinstance(claims, dict):
        raise ValueError("token payload is not a JSON object")
    return claims