"""URL canonicalization used for blocklist comparisons (core domain)."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import FrozenSet, Iterable, List, Optional, Tuple
from urllib.parse import SplitResult, unquote_plus, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset(
    {"utm_source", "utm_medium", "utm_campaign", "utm_content", "utm_term"}
)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Escapes of these characters survive decoding.
_RESERVED_CHARS = frozenset(";/?:@&=+$,#")
_ESCAPE_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_STRAY_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_url(url: str) -> Optional[SplitResult]:
    """Split an absolute URL, or return None when it is not one.

    A URL counts as parsed when it has a scheme and a host and any port it
    declares is a valid number.
    """

    try:
        parts = urlsplit(url)
        # Accessing .port validates it and raises ValueError when out of range.
        parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return parts


def _strip_tracking_params(query: str) -> str:
    kept = []
    for segment in query.split("&"):
        if not segment:
            continue
        key = unquote_plus(segment.partition("=")[0])
        if key in TRACKING_PARAMS:
            continue
        kept.append(segment)
    return "&".join(kept)


def _canonical_netloc(parts: SplitResult) -> str:
    userinfo, sep, hostport = parts.netloc.rpartition("@")
    hostport = hostport.lower()
    port = parts.port
    if port is None:
        hostport = hostport.rstrip(":")
    elif _DEFAULT_PORTS.get(parts.scheme.lower()) == port:
        hostport = hostport.rsplit(":", 1)[0]
    return f"{userinfo}{sep}{hostport}"


def _trim_trailing_slash(path: str) -> str:
    # Trimmed until stable so normalizing twice never changes the result.
    while path != "/" and path.endswith("/"):
        path = path[:-1]
    return path


def _decode_escape_run(match: re.Match) -> str:
    text = match.group(0)
    decoded: List[str] = []
    pending = bytearray()
    for start in range(0, len(text), 3):
        escape = text[start:start + 3]
        byte = int(escape[1:], 16)
        if chr(byte) in _RESERVED_CHARS:
            decoded.append(pending.decode("utf-8"))
            pending.clear()
            decoded.append(escape)
        else:
            pending.append(byte)
    decoded.append(pending.decode("utf-8"))
    return "".join(decoded)


def decode_uri(value: str) -> str:
    """Percent-decode ``value`` but keep escapes of reserved URL characters.

    Escapes that decode to one of ``;/?:@&=+$,#`` stay as they are, so an
    escaped URL never turns into a different URL. Raises ValueError for a
    stray ``%`` or escapes that are not valid UTF-8.
    """

    if _STRAY_PERCENT_RE.search(value):
        raise ValueError(f"malformed percent escape in {value!r}")
    return _ESCAPE_RUN_RE.sub(_decode_escape_run, value)


def _canonical(parts: SplitResult) -> str:
    path = _trim_trailing_slash(parts.path or "/")
    return urlunsplit(
        (
            parts.scheme.lower(),
            _canonical_netloc(parts),
            path,
            _strip_tracking_params(parts.query),
            "",
        )
    )


def normalize_url(url: str) -> str:
    """Return the canonical form of ``url`` used for equality checks.

    Tracking parameters and the fragment are dropped, a trailing slash is
    trimmed and the host is lowercased. Strings that do not parse as absolute
    URLs are percent-decoded and trimmed instead; if decoding yields an
    absolute URL, that URL is canonicalized. Never raises.
    """

    parts = parse_url(url)
    if parts is not None:
        return _canonical(parts)

    try:
        decoded = decode_uri(url)
    except ValueError:
        return url
    parts = parse_url(decoded)
    if parts is not None:
        return _canonical(parts)
    return decoded.rstrip("/")


@lru_cache(maxsize=64)
def _normalized_candidates(candidates: Tuple[str, ...]) -> FrozenSet[str]:
    normalized = set()
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        trimmed = candidate.strip()
        if trimmed:
            normalized.add(normalize_url(trimmed))
    return frozenset(normalized)


def equals_any_url(url: str, candidates: Iterable[str]) -> bool:
    """Return True if ``url`` equals any candidate after normalization."""

    return normalize_url(url) in _normalized_candidates(tuple(candidates))
