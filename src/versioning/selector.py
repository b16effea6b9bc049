"""Version selection for opam packages.

Selection applies two constraints at once: the requested range and, when a
compiler version is known, each candidate's ``ocaml`` peer dependency.
"""

from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Callable, List, Optional, Tuple

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants

from . import opam_version
from .errors import MalformedCandidateVersionError
from .models import ManifestCollection, SelectionConstraint
from .ranges import parse_version, satisfies as range_satisfies

logger = logging.getLogger(__name__)

Comparator = Callable[[str, str], int]
RangePredicate = Callable[..., bool]


def _compatible_with_compiler(
    manifest, compiler_version: str, satisfies: RangePredicate
) -> bool:
    # Read from peerDependencies: an "ocaml" entry under dependencies may only
    # be a build-time requirement.
    constraint = getattr(manifest, "compiler_constraint", None) or Constants.ANY_VERSION
    return satisfies(compiler_version, constraint)


def _range_view(name: str, raw: str, scope: str) -> semantic_version.Version:
    try:
        parsed = parse_version(raw)
    except ValueError as exc:
        raise MalformedCandidateVersionError(scope, name, raw) from exc
    # Hide the prerelease tag so "*" and plain ranges still accept the
    # version; ordering keeps using the raw string.
    return parsed.truncate()


def choose_version(
    name: str,
    manifest_collection: ManifestCollection,
    constraint: SelectionConstraint,
    *,
    compare: Comparator = opam_version.compare,
    satisfies: RangePredicate = range_satisfies,
    scope: str = Constants.OPAM_SCOPE,
) -> Optional[str]:
    """Return the highest version meeting ``constraint`` or None.

    Args:
        name: Package name, used in error messages only.
        manifest_collection: Candidates keyed by raw version string.
        constraint: Requested range and optional compiler version.
        compare: Precedence ordering over raw version strings.
        satisfies: Range predicate ``(version, range) -> bool``.
        scope: Scope used to render malformed-version errors.

    Returns:
        The raw version string chosen, or None when nothing matches.

    Raises:
        MalformedCandidateVersionError: a candidate version is not valid SemVer.
    """
    versions = list(manifest_collection.versions.keys())

    if constraint.compiler_version is not None:
        versions = [
            v for v in versions
            if _compatible_with_compiler(
                manifest_collection.versions[v], constraint.compiler_version, satisfies
            )
        ]

    parsed: List[Tuple[str, semantic_version.Version]] = [
        (raw, _range_view(name, raw, scope)) for raw in versions
    ]
    parsed.sort(key=cmp_to_key(lambda a, b: compare(a[0], b[0])), reverse=True)

    chosen: Optional[str] = None
    for raw, range_view in parsed:
        if satisfies(range_view, constraint.version_range):
            chosen = raw
            break

    if is_debug_enabled(logger):
        logger.debug(
            "Version selection finished",
            extra=extra_context(
                event="decision",
                component="selector",
                action="choose_version",
                package=name,
                outcome="match" if chosen is not None else "no_match",
                candidate_count=len(manifest_collection.versions),
                compatible_count=len(parsed),
                version_range=constraint.version_range,
                compiler_version=constraint.compiler_version,
                chosen=chosen,
            ),
        )
    return chosen
