"""opam resolver: turns an ``@opam/<name>@<range>`` pattern into a manifest."""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from registry.opam.repository import RepositoryProvider

from ..errors import DependencyNotFoundError
from ..lockfile import is_lockfile_entry_outdated
from ..models import (
    DependencyIdentifier,
    OpamManifest,
    PackageRequest,
    Remote,
    SelectionConstraint,
)
from ..parser import is_opam_pattern, parse_resolution
from ..parser import scope_prefix as _scope_prefix
from ..selector import choose_version
from .context import ResolutionContext

logger = logging.getLogger(__name__)


def normalize_range(version_range: Optional[str]) -> str:
    """Map a missing range or the "latest" tag to "*"; other ranges pass through."""
    if version_range is None or version_range == Constants.LATEST_TAG:
        return Constants.ANY_VERSION
    return version_range


class OpamResolver:
    """Resolver for packages published through the opam repository."""

    def __init__(self, scope: str = Constants.OPAM_SCOPE):
        self.scope = scope

    @property
    def scope_prefix(self) -> str:
        return _scope_prefix(self.scope)

    def is_version(self, pattern: str) -> bool:
        return is_opam_pattern(pattern, self.scope)

    def parse(self, fragment: str) -> DependencyIdentifier:
        return parse_resolution(fragment, self.scope)

    @staticmethod
    def get_pattern_version(pattern: str, manifest: OpamManifest) -> str:  # pylint: disable=unused-argument
        return manifest.version

    def is_lockfile_entry_outdated(
        self,
        lockfile_entry: OpamManifest,
        version_range: str,
        compiler_version: Optional[str],
    ) -> bool:
        """True if the locked entry must be dropped and the pattern resolved anew."""
        return is_lockfile_entry_outdated(
            lockfile_entry, version_range, compiler_version, scope=self.scope
        )

    async def resolve(self, request: PackageRequest, context: ResolutionContext) -> OpamManifest:
        """Resolve ``request`` to a manifest stamped with its provenance.

        A manifest locked for this pattern is returned as is, without touching
        the repository.
        """
        if context.lockfile is not None:
            shrunk = context.lockfile.get_locked(request.pattern, Constants.REMOTE_KIND_OPAM)
            if shrunk is not None:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Using locked manifest",
                        extra=extra_context(
                            event="decision",
                            component="opam_resolver",
                            action="resolve",
                            outcome="lockfile_hit",
                            pattern=request.pattern,
                            version=shrunk.version,
                        ),
                    )
                return shrunk

        manifest = await self.resolve_manifest(request, context)
        reference = f"{manifest.name}@{manifest.version}"
        return dataclasses.replace(
            manifest,
            remote=Remote(
                kind=Constants.REMOTE_KIND_OPAM,
                registry=Constants.REMOTE_REGISTRY,
                hash=manifest.opam.checksum,
                reference=reference,
                resolved=reference,
            ),
        )

    async def resolve_manifest(
        self, request: PackageRequest, context: ResolutionContext
    ) -> OpamManifest:
        """Pick the best published manifest for ``request``.

        Raises:
            DependencyNotFoundError: no version satisfies the range and compiler.
            MalformedCandidateVersionError: the repository published a bad version.
        """
        identifier = self.parse(request.pattern)
        version_range = normalize_range(identifier.version_range)

        with Timer() as t:
            await context.overrides.init()
            await context.repository.init()
            # Overlays are merged by a later build step, not here.
            overlay = context.overrides.get(identifier.name)
            manifest_collection = await context.repository.get_manifest_collection(identifier.name)

        version = choose_version(
            identifier.name,
            manifest_collection,
            SelectionConstraint(
                version_range=version_range,
                compiler_version=context.compiler_version,
            ),
            scope=self.scope,
        )

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved opam manifest",
                extra=extra_context(
                    event="decision",
                    component="opam_resolver",
                    action="resolve_manifest",
                    outcome="match" if version is not None else "no_match",
                    pattern=request.pattern,
                    version_range=version_range,
                    candidate_count=len(manifest_collection.versions),
                    has_override=overlay is not None,
                    version=version,
                    duration_ms=t.duration_ms(),
                ),
            )

        if version is None:
            raise DependencyNotFoundError(
                request.pattern, tuple(reversed(request.parent_names))
            )
        return manifest_collection.versions[version]


async def lookup_manifest(
    name: str, version: str, repository: RepositoryProvider
) -> Optional[OpamManifest]:
    """Return the manifest published as exactly ``version``, if any."""
    await repository.init()
    manifest_collection = await repository.get_manifest_collection(name)
    return manifest_collection.versions.get(version)
