"""URL helpers shared by stages, collaborators and the cache key."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_PREVIEW_PATH = re.compile(r"^/([0-9]+)\.aspx$")
_DIALOG_ID = re.compile(r"[?&]id=([0-9]+)")


def split_url(url: str) -> tuple[str, str | None]:
    """Split ``url`` into ``(path, query)`` at the first ``?``.

    The query is ``None`` when the URL has no ``?`` at all, and ``""`` when
    it ends in a bare ``?``, so joining the parts back restores the input.
    """
    path, sep, query = url.partition("?")
    return path, (query if sep else None)


def join_url(path: str, query: str | None) -> str:
    return path if query is None else f"{path}?{query}"


def to_relative(url: str) -> str:
    """Drop scheme and host from absolute URLs; ensure a leading slash."""
    if "://" in url:
        parts = urlsplit(url)
        url = parts.path + (f"?{parts.query}" if parts.query else "")
    if not url.startswith("/"):
        url = "/" + url
    return url


def normalize_path(url: str) -> str:
    """Lower-cased path without query string or trailing slash (``/`` stays ``/``)."""
    path, _ = split_url(to_relative(url))
    path = path.lower().rstrip("/")
    return path or "/"


def try_get_preview_id(url: str | None) -> int | None:
    """
    Return the page id encoded in a preview URL, or ``None``.

    Recognised forms are ``/1234.aspx`` (query string and trailing slash
    ignored) and back-office dialog URLs carrying an ``id=1234`` parameter.
    """
    if not url:
        return None

    if "/umbraco/dialogs" in url:
        match = _DIALOG_ID.search(url)
        if match:
            return int(match.group(1))

    path, _ = split_url(url)
    match = _PREVIEW_PATH.match(path.rstrip("/"))
    if match is None:
        return None
    value = int(match.group(1))
    return value if value > 0 else None
