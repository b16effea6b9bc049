"""Override providers: per-package build/patch overlays.

Overlays are opaque mappings here; how they are merged into a manifest is
decided by the consumer, not by these providers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Dict, Mapping, Optional, Protocol

from common.logging_utils import extra_context, is_debug_enabled

logger = logging.getLogger(__name__)

Overlay = Mapping[str, Any]


class OverrideProvider(Protocol):
    """Source of package overlays."""

    async def init(self) -> None:
        """Make the overrides ready; repeated calls are no-ops."""

    def get(self, name: str) -> Optional[Overlay]:
        """Return the overlay for ``name`` if one exists."""


class InMemoryOverrides:
    """Overlays held in memory, keyed by package name."""

    def __init__(self, overlays: Optional[Mapping[str, Overlay]] = None):
        self._overlays: Dict[str, Overlay] = dict(overlays or {})

    async def init(self) -> None:
        return None

    def get(self, name: str) -> Optional[Overlay]:
        return self._overlays.get(name)


class JsonOverrideDirectory:
    """Overlays read from ``<directory>/<package>.json`` files.

    The directory is scanned once, on first ``init()``. A missing directory
    yields no overlays.
    """

    def __init__(self, directory: str):
        self.directory = directory
        self._overlays: Optional[Dict[str, Overlay]] = None
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, Overlay]:
        overlays: Dict[str, Overlay] = {}
        if not os.path.isdir(self.directory):
            logger.warning("Override directory not found: %s", self.directory)
            return overlays
        for entry in sorted(os.listdir(self.directory)):
            if not entry.endswith(".json"):
                continue
            path = os.path.join(self.directory, entry)
            with open(path, "r", encoding="utf-8") as f:
                overlays[entry[: -len(".json")]] = json.load(f)
        return overlays

    async def init(self) -> None:
        async with self._lock:
            if self._overlays is not None:
                return
            self._overlays = await asyncio.to_thread(self._read)
            if is_debug_enabled(logger):
                logger.debug(
                    "Overrides loaded",
                    extra=extra_context(
                        event="init",
                        component="overrides",
                        action="load_directory",
                        target=self.directory,
                        count=len(self._overlays),
                    ),
                )

    def get(self, name: str) -> Optional[Overlay]:
        return (self._overlays or {}).get(name)
