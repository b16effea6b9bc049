"""Repository providers returning the published manifests of a package.

Providers hand out already-converted manifests; cloning or updating an opam
repository checkout happens elsewhere. ``init()`` is idempotent and shared by
concurrent resolutions.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

from common.logging_utils import Timer, extra_context, is_debug_enabled
from versioning.models import ManifestCollection, OpamManifest

logger = logging.getLogger(__name__)


class RepositoryProvider(Protocol):
    """Source of manifest collections."""

    async def init(self) -> None:
        """Make the repository ready; repeated calls are no-ops."""

    async def get_manifest_collection(self, name: str) -> ManifestCollection[OpamManifest]:
        """Return every published version of ``name`` (empty if unknown)."""


class InMemoryRepository:
    """Repository backed by manifests already held in memory."""

    def __init__(self, manifests: Iterable[OpamManifest] = ()):
        self._packages: Dict[str, Dict[str, OpamManifest]] = {}
        for manifest in manifests:
            self._packages.setdefault(manifest.name, {})[manifest.version] = manifest

    async def init(self) -> None:
        return None

    async def get_manifest_collection(self, name: str) -> ManifestCollection[OpamManifest]:
        return ManifestCollection(versions=dict(self._packages.get(name, {})))


def _parse_index(data: Any, index_path: str) -> Dict[str, Dict[str, OpamManifest]]:
    if not isinstance(data, dict):
        raise ValueError(f"Repository index {index_path} must contain a JSON object")
    packages = data.get("packages", data)
    parsed: Dict[str, Dict[str, OpamManifest]] = {}
    for name, versions in packages.items():
        if not isinstance(versions, dict):
            raise ValueError(f"Package {name!r} in {index_path} must map versions to manifests")
        parsed[name] = {}
        for version, manifest in versions.items():
            body: Dict[str, Any] = dict(manifest or {})
            body.setdefault("name", name)
            body.setdefault("version", version)
            parsed[name][version] = OpamManifest.from_dict(body)
    return parsed


class JsonIndexRepository:
    """Repository read from a local JSON index.

    The index maps package name to ``{version: manifest}``, optionally nested
    under a top-level ``"packages"`` key. It is read once, on first ``init()``.
    """

    def __init__(self, index_path: str):
        self.index_path = index_path
        self._packages: Optional[Dict[str, Dict[str, OpamManifest]]] = None
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, Dict[str, OpamManifest]]:
        with open(self.index_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return _parse_index(data, self.index_path)

    async def init(self) -> None:
        async with self._lock:
            if self._packages is not None:
                return
            with Timer() as t:
                self._packages = await asyncio.to_thread(self._read)
            if is_debug_enabled(logger):
                logger.debug(
                    "Repository index loaded",
                    extra=extra_context(
                        event="init",
                        component="repository",
                        action="load_index",
                        target=self.index_path,
                        count=len(self._packages),
                        duration_ms=t.duration_ms(),
                    ),
                )

    async def get_manifest_collection(self, name: str) -> ManifestCollection[OpamManifest]:
        await self.init()
        assert self._packages is not None
        return ManifestCollection(versions=dict(self._packages.get(name, {})))


def manifests_from_mapping(packages: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> Iterable[OpamManifest]:
    """Yield manifests from a ``{name: {version: manifest}}`` mapping."""
    for versions in _parse_index(dict(packages), "<mapping>").values():
        yield from versions.values()
