"""Exceptions raised by opam resolution."""

from __future__ import annotations

from typing import Sequence, Tuple

from constants import Constants


class ResolutionError(Exception):
    """Base class for resolution failures."""


class DependencyNotFoundError(ResolutionError):
    """No published version satisfies the requested range and compiler.

    ``dependency_path`` is ordered root first.
    """

    def __init__(self, pattern: str, dependency_path: Sequence[str] = ()):
        self.pattern = pattern
        self.dependency_path: Tuple[str, ...] = tuple(dependency_path)
        msg = f'No compatible version found: "{pattern}"'
        if self.dependency_path:
            path = Constants.DEPENDENCY_PATH_SEPARATOR.join(self.dependency_path)
            msg = f"{msg} (dependency path: {path})"
        super().__init__(msg)


class MalformedCandidateVersionError(ResolutionError, ValueError):
    """A published candidate version could not be parsed.

    This indicates broken repository data rather than an unsatisfiable
    request, so it is never converted into a "not found" result.
    """

    def __init__(self, scope: str, name: str, version: str):
        self.name = name
        self.version = version
        super().__init__(f"Invalid version: @{scope}/{name}@{version}")
