"""Explicit inputs shared by one resolution run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from registry.opam.overrides import OverrideProvider
from registry.opam.repository import RepositoryProvider

from ..lockfile import Lockfile


@dataclass(frozen=True)
class ResolutionContext:
    """Collaborators and the installed compiler version for a resolution.

    ``compiler_version`` is None when no compiler is installed yet, in which
    case candidates are not filtered by compiler compatibility.
    """
    repository: RepositoryProvider
    overrides: OverrideProvider
    compiler_version: Optional[str] = None
    lockfile: Optional[Lockfile] = None
