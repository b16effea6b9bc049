"""Resolvers for scoped ("exotic") patterns.

Each resolver is an independent object exposing the same capabilities; the
table below picks one by the scope prefix of a pattern.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol

from ..models import DependencyIdentifier, OpamManifest, PackageRequest
from .context import ResolutionContext
from .opam import OpamResolver, lookup_manifest


class ExoticResolver(Protocol):
    """Capabilities every scoped resolver provides."""

    @property
    def scope_prefix(self) -> str: ...

    def is_version(self, pattern: str) -> bool: ...

    def parse(self, fragment: str) -> DependencyIdentifier: ...

    async def resolve(self, request: PackageRequest, context: ResolutionContext) -> OpamManifest: ...

    def is_lockfile_entry_outdated(
        self, lockfile_entry: OpamManifest, version_range: str, compiler_version: Optional[str]
    ) -> bool: ...

    def get_pattern_version(self, pattern: str, manifest: OpamManifest) -> str: ...


_RESOLVERS: Dict[str, ExoticResolver] = {}


def register_resolver(resolver: ExoticResolver) -> None:
    """Add ``resolver`` to the table, replacing any with the same prefix."""
    _RESOLVERS[resolver.scope_prefix] = resolver


def registered_resolvers() -> Dict[str, ExoticResolver]:
    return dict(_RESOLVERS)


def find_resolver(pattern: str) -> Optional[ExoticResolver]:
    """Return the resolver that accepts ``pattern``, or None."""
    for prefix, resolver in _RESOLVERS.items():
        if pattern.startswith(prefix) and resolver.is_version(pattern):
            return resolver
    return None


register_resolver(OpamResolver())

__all__ = [
    "ExoticResolver",
    "OpamResolver",
    "ResolutionContext",
    "find_resolver",
    "lookup_manifest",
    "register_resolver",
    "registered_resolvers",
]
