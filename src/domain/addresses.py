"""
Address normalization heuristics applied before every geocoding attempt.

* Regional abbreviations (``brgy``, ``blk``, ``st``, ``ave`` ...) are
  expanded to full words.
* A fixed set of municipality / province misspellings is corrected.
* Plus Code tokens (``XGHH+22``) are already precise and are kept verbatim.
* ``"lat,lng"`` literals (sent by the map picker) bypass geocoding.

``normalize_address`` is idempotent: normalizing twice yields the same text.
"""

from __future__ import annotations

import re
from typing import Optional

from .entities import Coordinate, InvalidCoordinate

PLUS_CODE_PATTERN = re.compile(r"[A-Z0-9]{2,4}\+[A-Z0-9]{2,4}", re.IGNORECASE)

# Both halves need a decimal point; "12, 34" is a house number, not a point.
COORDINATE_LITERAL_PATTERN = re.compile(
    r"^\s*(-?\d{1,3}\.\d+)\s*,\s*(-?\d{1,3}\.\d+)\s*$"
)

# Order matters: misspellings first, then abbreviations, then capitalization.
# No replacement produces text that another pattern would match again.
_REPLACEMENTS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\bpangpaga\b", re.IGNORECASE), "Pampanga"),
    (re.compile(r"\bpampangga\b", re.IGNORECASE), "Pampanga"),
    (re.compile(r"\bflorida\s+blanca\b", re.IGNORECASE), "Floridablanca"),
    (re.compile(r"\bfloridablanka\b", re.IGNORECASE), "Floridablanca"),
    (re.compile(r"\bbrgy\b", re.IGNORECASE), "Barangay"),
    (re.compile(r"\bbgy\b", re.IGNORECASE), "Barangay"),
    (re.compile(r"\bblk\b", re.IGNORECASE), "Block"),
    (re.compile(r"\bst\b", re.IGNORECASE), "Street"),
    (re.compile(r"\bave\b", re.IGNORECASE), "Avenue"),
    (re.compile(r"\bav\b", re.IGNORECASE), "Avenue"),
    (re.compile(r"\bpurok\b", re.IGNORECASE), "Purok"),
    (re.compile(r"\bpampanga\b", re.IGNORECASE), "Pampanga"),
    (re.compile(r"\bfloridablanca\b", re.IGNORECASE), "Floridablanca"),
]

_WHITESPACE = re.compile(r"\s+")


def contains_plus_code(address: str) -> bool:
    return PLUS_CODE_PATTERN.search(address) is not None


def _normalize_segment(segment: str) -> str:
    for pattern, replacement in _REPLACEMENTS:
        segment = pattern.sub(replacement, segment)
    return segment


def normalize_address(address: str) -> str:
    """Return *address* with typos fixed and abbreviations expanded."""
    text = _WHITESPACE.sub(" ", address).strip()
    if not text:
        return ""

    parts: list[str] = []
    cursor = 0
    for match in PLUS_CODE_PATTERN.finditer(text):
        parts.append(_normalize_segment(text[cursor:match.start()]))
        parts.append(match.group(0))
        cursor = match.end()
    parts.append(_normalize_segment(text[cursor:]))
    return "".join(parts)


def parse_coordinate_literal(address: str) -> Optional[Coordinate]:
    """Parse ``"14.97,120.52"`` into a Coordinate; ``None`` if not a literal."""
    match = COORDINATE_LITERAL_PATTERN.match(address)
    if not match:
        return None
    try:
        return Coordinate(float(match.group(1)), float(match.group(2)))
    except InvalidCoordinate:
        return None


def address_variants(normalized: str, suffixes: list[str]) -> list[str]:
    """
    The address as given, then once per suffix (``"..., Philippines"``).

    A suffix already present in the address is not appended again.  Any
    other trailing suffix is stripped first, so ``"Mabini, Philippines"``
    becomes ``"Mabini, Pampanga, Philippines"`` rather than repeating the
    country.  Duplicates are dropped, keeping the first occurrence.
    """
    variants = [normalized]
    lowered = normalized.lower()
    for suffix in suffixes:
        if not suffix or suffix.lower() in lowered:
            continue
        base = normalized
        for other in suffixes:
            if other and other != suffix:
                base = _strip_trailing(base, other)
        variants.append(f"{base}, {suffix}" if base else suffix)
    return list(dict.fromkeys(variants))


def _strip_trailing(text: str, suffix: str) -> str:
    if text.lower().endswith(suffix.lower()):
        return text[: -len(suffix)].rstrip(" ,")
    return text
