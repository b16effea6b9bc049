"""npm-style range matching backed by semantic_version.

Both helpers follow npm semantics: a version or range that cannot be parsed
simply does not match, no exception escapes.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Union

import semantic_version

from constants import Constants

VersionLike = Union[str, semantic_version.Version]

# npm allows whitespace between an operator and its version (">= 4.10")
_OPERATOR_GAP = re.compile(r"([<>]=?|=|~|\^)\s+")


def _normalize_range(range_str: Optional[str]) -> str:
    s = _OPERATOR_GAP.sub(r"\1", (range_str or "").strip())
    return s if s else Constants.ANY_VERSION


def parse_version(raw: str) -> semantic_version.Version:
    """Parse a strict SemVer string, tolerating one leading ``v`` as npm does.

    Raises:
        ValueError: ``raw`` is not a full SemVer version.
    """
    text = raw.strip()
    if text[:1] == "v":
        text = text[1:]
    return semantic_version.Version(text)


@lru_cache(maxsize=512)
def _compile(range_str: str) -> semantic_version.NpmSpec:
    return semantic_version.NpmSpec(range_str)


def valid_range(range_str: Optional[str]) -> bool:
    """Return True if ``range_str`` is a syntactically valid npm range."""
    if range_str is None:
        return False
    try:
        _compile(_normalize_range(range_str))
    except ValueError:
        return False
    return True


def satisfies(version: VersionLike, range_str: Optional[str]) -> bool:
    """Return True if ``version`` falls inside ``range_str``."""
    try:
        spec = _compile(_normalize_range(range_str))
    except ValueError:
        return False
    if not isinstance(version, semantic_version.Version):
        try:
            version = parse_version(version)
        except (ValueError, AttributeError):
            return False
    return spec.match(version)
