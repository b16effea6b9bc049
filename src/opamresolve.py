"""opamresolve: resolve a scoped opam pattern to one compatible manifest.

Reads an already-converted repository index from disk, optionally honoring a
lockfile, and prints the chosen manifest with its provenance as JSON.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Optional

import yaml

from args import parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from config import load_config
from constants import ExitCodes
from registry.opam.overrides import InMemoryOverrides, JsonOverrideDirectory
from registry.opam.repository import JsonIndexRepository
from versioning.errors import DependencyNotFoundError, MalformedCandidateVersionError
from versioning.lockfile import Lockfile
from versioning.models import PackageRequest
from versioning.resolvers import OpamResolver, ResolutionContext
from versioning.resolvers.opam import normalize_range

logger = logging.getLogger(__name__)


def _drop_outdated_lock(resolver, lockfile: Optional[Lockfile], pattern: str,
                        compiler_version: Optional[str]) -> None:
    if lockfile is None:
        return
    entry = lockfile.entry(pattern)
    if entry is None:
        return
    version_range = normalize_range(resolver.parse(pattern).version_range)
    if resolver.is_lockfile_entry_outdated(entry, version_range, compiler_version):
        logger.info("Lockfile entry %s@%s is outdated, resolving %s again",
                    entry.name, entry.version, pattern)
        lockfile.remove(pattern)


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)

    try:
        config = load_config(args.CONFIG, overrides={
            "scope": args.SCOPE,
            "ocaml_version": args.OCAML_VERSION,
            "index_path": args.INDEX,
            "overrides_path": args.OVERRIDES,
            "lockfile_path": args.LOCKFILE,
        })
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Unable to read config %s: %s", args.CONFIG, exc)
        return ExitCodes.FILE_ERROR.value

    if not config.index_path:
        logger.error("No repository index given (use --index or OPAMRESOLVE_INDEX)")
        return ExitCodes.USAGE_ERROR.value

    resolver = OpamResolver(config.scope)
    if not resolver.is_version(args.PATTERN):
        logger.error("Not an @%s/<name>@<range> pattern: %s", config.scope, args.PATTERN)
        return ExitCodes.USAGE_ERROR.value

    try:
        lockfile = Lockfile.load(config.lockfile_path) if config.lockfile_path else None
    except OSError as exc:
        logger.error("Unable to read lockfile: %s", exc)
        return ExitCodes.FILE_ERROR.value
    except ValueError as exc:
        logger.error("Invalid lockfile: %s", exc)
        return ExitCodes.DATA_ERROR.value

    context = ResolutionContext(
        repository=JsonIndexRepository(config.index_path),
        overrides=(JsonOverrideDirectory(config.overrides_path)
                   if config.overrides_path else InMemoryOverrides()),
        compiler_version=config.ocaml_version,
        lockfile=lockfile,
    )
    request = PackageRequest(pattern=args.PATTERN, parent_names=tuple(args.PARENTS))

    try:
        _drop_outdated_lock(resolver, lockfile, args.PATTERN, config.ocaml_version)
        manifest = asyncio.run(resolver.resolve(request, context))
    except DependencyNotFoundError as exc:
        logger.error("%s", exc)
        return ExitCodes.NOT_FOUND.value
    except MalformedCandidateVersionError as exc:
        logger.error("Repository data error: %s", exc)
        return ExitCodes.DATA_ERROR.value
    except OSError as exc:
        logger.error("Unable to read repository data: %s", exc)
        return ExitCodes.FILE_ERROR.value
    except (ValueError, KeyError) as exc:
        logger.error("Invalid repository data: %s", exc)
        return ExitCodes.DATA_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main",
                                outcome="resolved", version=manifest.version),
        )

    payload = json.dumps(manifest.to_dict(), indent=2)
    if args.OUTPUT:
        with open(args.OUTPUT, "w", encoding="utf-8") as f:
            f.write(payload + "\n")
        logger.info("Wrote %s@%s to %s", manifest.name, manifest.version, args.OUTPUT)
    else:
        print(payload)
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
