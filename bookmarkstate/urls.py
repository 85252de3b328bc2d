from __future__ import annotations

from typing import Iterable
from urllib.parse import urlparse

DEFAULT_URL_SCHEMES = ("http", "https", "ftp", "file", "about", "chrome", "data")

# Schemes that are absolute without a host part.
_HOSTLESS_SCHEMES = {"file", "about", "data", "chrome"}


def is_url(value: object, schemes: Iterable[str] = DEFAULT_URL_SCHEMES) -> bool:
    """Return True when *value* is an absolute URL with an accepted scheme.

    Partial input such as ``"not-a-url"`` or ``"brave.com"`` is rejected.
    Never raises.
    """
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text or any(ch.isspace() for ch in text):
        return False
    try:
        p = urlparse(text)
        host = p.hostname
    except ValueError:
        return False
    scheme = (p.scheme or "").lower()
    if not scheme or scheme not in {s.lower() for s in schemes}:
        return False
    if scheme in _HOSTLESS_SCHEMES:
        return bool(p.netloc or p.path)
    return bool(host)
