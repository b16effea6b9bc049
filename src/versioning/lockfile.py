"""Lockfile lookup and staleness checks for opam entries."""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Dict, Iterator, Mapping, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants

from .models import ManifestCollection, OpamManifest, SelectionConstraint
from .selector import choose_version

logger = logging.getLogger(__name__)


class Lockfile:
    """Already-resolved manifests keyed by the pattern that produced them."""

    def __init__(self, entries: Optional[Mapping[str, OpamManifest]] = None):
        self._entries: Dict[str, OpamManifest] = dict(entries or {})

    @classmethod
    def load(cls, lockfile_path: str) -> "Lockfile":
        """Read a JSON lockfile of the form ``{pattern: manifest}``.

        Raises:
            OSError: the file cannot be read.
            ValueError: the content is not valid JSON or an entry is malformed.
        """
        with open(lockfile_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Lockfile {lockfile_path} must contain a JSON object")
        try:
            entries = {pattern: OpamManifest.from_dict(m) for pattern, m in data.items()}
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed lockfile entry in {lockfile_path}: {exc}") from exc
        logger.debug("Loaded %d lockfile entries from %s", len(entries), lockfile_path)
        return cls(entries)

    def __contains__(self, pattern: str) -> bool:
        return pattern in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, pattern: str) -> Optional[OpamManifest]:
        return self._entries.get(pattern)

    def get_locked(self, pattern: str, remote_kind: str) -> Optional[OpamManifest]:
        """Return the locked manifest for ``pattern`` tagged with ``remote_kind``.

        Entries without a recorded remote were never resolved and are ignored.
        """
        locked = self._entries.get(pattern)
        if locked is None or locked.remote is None:
            return None
        return dataclasses.replace(
            locked, remote=dataclasses.replace(locked.remote, kind=remote_kind)
        )

    def remove(self, pattern: str) -> None:
        self._entries.pop(pattern, None)


def is_lockfile_entry_outdated(
    lockfile_entry: OpamManifest,
    version_range: str,
    compiler_version: Optional[str],
    *,
    scope: str = Constants.OPAM_SCOPE,
) -> bool:
    """Return True when the locked version would not be chosen any more.

    The entry is run through the same selection as a fresh resolution, as a
    collection holding just that one version.
    """
    collection = ManifestCollection(versions={lockfile_entry.version: lockfile_entry})
    chosen = choose_version(
        lockfile_entry.name,
        collection,
        SelectionConstraint(version_range=version_range, compiler_version=compiler_version),
        scope=scope,
    )
    outdated = chosen is None
    if is_debug_enabled(logger):
        logger.debug(
            "Lockfile entry checked",
            extra=extra_context(
                event="decision",
                component="lockfile",
                action="is_outdated",
                package=lockfile_entry.name,
                locked_version=lockfile_entry.version,
                outcome="outdated" if outdated else "current",
            ),
        )
    return outdated
