# src/cache/fingerprint.py — v3
"""URL fingerprinting for the resolution cache.

The fingerprint is the classic 31-multiplier polynomial string hash over UTF-16
code units, wrapped to a signed 32-bit integer and encoded as a decimal string.
It is cheap and stable across processes (unlike ``hash()``), and keeps keys
compatible with link maps written by earlier clients. It is not collision
free: two distinct URLs can share a fingerprint.
"""

from __future__ import annotations

_MASK = 0xFFFFFFFF


def normalize_url(url: str) -> str:
    """Normalization applied before hashing: surrounding whitespace is dropped."""
    return url.strip()


def compute_fingerprint(url: str) -> str:
    """Return the cache key for ``url``."""
    return str(string_hash(normalize_url(url)))


def string_hash(text: str) -> int:
    """Signed 32-bit ``s[0]*31^(n-1) + ... + s[n-1]`` over UTF-16 code units."""
    h = 0
    data = text.encode("utf-16-be", errors="surrogatepass")
    for i in range(0, len(data), 2):
        unit = (data[i] << 8) | data[i + 1]
        h = (31 * h + unit) & _MASK
    if h >= 0x80000000:
        h -= 0x100000000
    return h
