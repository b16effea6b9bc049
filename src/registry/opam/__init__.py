"""opam registry package.

This package provides the collaborators the opam resolver reads from:
- repository.py: manifest collections per package (in memory or a JSON index)
- overrides.py: per-package build/patch overlays
"""

from .overrides import InMemoryOverrides, JsonOverrideDirectory, OverrideProvider  # noqa: F401
from .repository import (  # noqa: F401
    InMemoryRepository,
    JsonIndexRepository,
    RepositoryProvider,
    manifests_from_mapping,
)
