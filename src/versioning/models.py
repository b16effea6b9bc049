"""Data models for opam package resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar, Union

from constants import Constants

BuildCommands = Union[str, List[str], List[List[str]]]


@dataclass(frozen=True)
class DependencyIdentifier:
    """Package name and requested range parsed from a scoped pattern."""
    name: str
    version_range: str


@dataclass(frozen=True)
class SelectionConstraint:
    """Constraints applied when choosing a version from a collection."""
    version_range: str
    compiler_version: Optional[str] = None


@dataclass(frozen=True)
class SourceFile:
    """Extra file shipped alongside an opam package (also used for patches)."""
    name: str
    content: str


@dataclass(frozen=True)
class OpamSource:
    """opam-specific source metadata of a manifest."""
    url: Optional[str] = None
    checksum: Optional[str] = None
    files: Tuple[SourceFile, ...] = ()
    patches: Tuple[SourceFile, ...] = ()


@dataclass(frozen=True)
class EsyBuild:
    """Build instructions and exported environment of a manifest."""
    build: BuildCommands = ""
    exported_env: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Remote:
    """Provenance block stamped onto a resolved manifest."""
    kind: str
    registry: str
    hash: Optional[str]
    reference: str
    resolved: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize under the lockfile's ``_remote`` keys, ``kind`` becoming ``type``."""
        return {
            "type": self.kind,
            "registry": self.registry,
            "hash": self.hash,
            "reference": self.reference,
            "resolved": self.resolved,
        }


@dataclass(frozen=True)
class OpamManifest:
    """A package manifest as produced by the repository provider.

    Only ``version`` and the compiler peer dependency matter for selection;
    the remaining fields are carried through to the caller untouched.
    """
    name: str
    version: str
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)
    dependencies: Mapping[str, str] = field(default_factory=dict)
    opam: OpamSource = field(default_factory=OpamSource)
    esy: EsyBuild = field(default_factory=EsyBuild)
    remote: Optional[Remote] = None

    @property
    def compiler_constraint(self) -> Optional[str]:
        """Compiler range declared under the ``ocaml`` peer dependency, if any."""
        return (self.peer_dependencies or {}).get(Constants.COMPILER_PEER_KEY)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OpamManifest":
        """Build a manifest from its JSON (package.json-like) form."""
        opam = data.get("opam") or {}
        esy = data.get("esy") or {}
        remote = data.get("_remote")
        return cls(
            name=data["name"],
            version=data["version"],
            peer_dependencies=dict(data.get("peerDependencies") or {}),
            dependencies=dict(data.get("dependencies") or {}),
            opam=OpamSource(
                url=opam.get("url"),
                checksum=opam.get("checksum"),
                files=tuple(SourceFile(f["name"], f["content"]) for f in opam.get("files") or []),
                patches=tuple(SourceFile(p["name"], p["content"]) for p in opam.get("patches") or []),
            ),
            esy=EsyBuild(
                build=esy.get("build", ""),
                exported_env=dict(esy.get("exportedEnv") or {}),
            ),
            remote=Remote(
                kind=remote["type"],
                registry=remote.get("registry", Constants.REMOTE_REGISTRY),
                hash=remote.get("hash"),
                reference=remote["reference"],
                resolved=remote.get("resolved", remote["reference"]),
            ) if remote else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Inverse of :meth:`from_dict`."""
        out: Dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "dependencies": dict(self.dependencies),
            "peerDependencies": dict(self.peer_dependencies),
            "opam": {
                "url": self.opam.url,
                "checksum": self.opam.checksum,
                "files": [{"name": f.name, "content": f.content} for f in self.opam.files],
                "patches": [{"name": p.name, "content": p.content} for p in self.opam.patches],
            },
            "esy": {
                "build": self.esy.build,
                "exportedEnv": {k: dict(v) for k, v in self.esy.exported_env.items()},
            },
        }
        if self.remote is not None:
            out["_remote"] = self.remote.to_dict()
        return out


M = TypeVar("M")


@dataclass(frozen=True)
class ManifestCollection(Generic[M]):
    """Published versions of one package keyed by their raw version string."""
    versions: Mapping[str, M]


@dataclass(frozen=True)
class PackageRequest:
    """A request for one pattern, with the chain of packages that asked for it.

    ``parent_names`` is recorded nearest-parent first.
    """
    pattern: str
    parent_names: Tuple[str, ...] = ()
