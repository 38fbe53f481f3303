"""
Segment codec: base64url (via PyJWT's helpers) and JSON objects.

Decoding is strict. A segment with characters outside the URL-safe
alphabet, with padding, or with an impossible length is rejected instead
of being silently cleaned up. So is a segment whose last character carries
non-zero unused bits, since it would decode to the same bytes as another
segment.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Mapping

from jwt.utils import base64url_decode, base64url_encode

_SEGMENT = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Base64url encode without padding."""
    return base64url_encode(data).decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """
    Base64url decode an unpadded segment.

    Raises:
        ValueError if the segment is not valid unpadded base64url.
    """
    if not isinstance(segment, str) or not _SEGMENT.fullmatch(segment):
        raise ValueError("segment contains characters outside the base64url alphabet")
    if len(segment) % 4 == 1:
        raise ValueError("segment has an invalid base64url length")
    data = base64url_decode(segment)
    # unused trailing bits must be zero
    if b64url_encode(data) != segment:
        raise ValueError("segment is not canonical base64url")
    return data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_object(data: bytes) -> Dict[str, Any]:
    """
    Parse JSON bytes that must hold an object.

    Raises:
        ValueError for invalid JSON, non-finite number literals, excessive
        nesting, or a top-level value that is not an object.
    """
    try:
        value = json.loads(data, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise ValueError("JSON document is nested too deeply") from exc
    if not isinstance(value, dict):
        raise ValueError("JSON document is not an object")
    return value


def encode_json_segment(mapping: Mapping[str, Any]) -> str:
    """
    JSON-encode then base64url-encode a header or claims mapping.

    Raises:
        TypeError / ValueError when the mapping holds values JSON cannot
        represent (including NaN and infinities).
    """
    raw = json.dumps(dict(mapping), separators=(",", ":"), allow_nan=False)
    return b64url_encode(raw.encode("utf-8"))


def decode_json_segment(segment: str) -> Dict[str, Any]:
    return parse_json_object(b64url_decode(segment))
