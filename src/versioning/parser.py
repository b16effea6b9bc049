"""Scoped pattern parsing for opam packages.

Patterns look like ``@opam/<name>@<range>``; the range may be omitted.
"""

from constants import Constants

from .models import DependencyIdentifier
from .ranges import valid_range


def scope_prefix(scope: str = Constants.OPAM_SCOPE) -> str:
    """Return the ``@<scope>/`` prefix every accepted pattern carries."""
    return f"@{scope}/"


def is_opam_pattern(pattern: str, scope: str = Constants.OPAM_SCOPE) -> bool:
    """Return True if ``pattern`` is a scoped pattern with a valid range.

    A bare ``@opam/<name>`` has no range and is rejected.
    """
    if not pattern.startswith(f"@{scope}"):
        return False
    body = pattern[1:]
    if "@" not in body:
        return False
    return valid_range(body.rsplit("@", 1)[1])


def parse_resolution(fragment: str, scope: str = Constants.OPAM_SCOPE) -> DependencyIdentifier:
    """Split a scoped pattern into name and range.

    The prefix is removed by length and never checked; callers gate with
    :func:`is_opam_pattern` first. Malformed input gives a best-effort split
    rather than an error, the range is validated later when it is matched.
    """
    rest = fragment[len(scope_prefix(scope)):]
    name, sep, version_range = rest.partition("@")
    return DependencyIdentifier(
        name=name,
        version_range=version_range if sep else Constants.ANY_VERSION,
    )
