"""Origin normalization."""

from __future__ import annotations

import re
from urllib.parse import urlsplit


class InvalidOriginError(ValueError):
    """Raised when a submitted origin cannot be parsed as a URL."""


def normalize_origin(raw: str) -> str:
    """Canonicalize an origin to ``scheme://host[/path]`` without trailing slashes.

    A missing scheme defaults to https.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidOriginError("origin must be a non-empty string")

    value = raw.strip()
    if not re.match(r"^https?://", value, re.IGNORECASE):
        value = f"https://{value}"

    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidOriginError(f"Invalid origin URL: {raw}") from exc

    host = parts.netloc
    if not parts.hostname or any(c.isspace() for c in host):
        raise InvalidOriginError(f"Invalid origin URL: {raw}")

    return f"{parts.scheme.lower()}://{host.lower()}{parts.path.rstrip('/')}"
