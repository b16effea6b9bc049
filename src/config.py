"""Runtime configuration for the opam resolver CLI.

Precedence, lowest to highest: built-in defaults, the YAML config file,
``OPAMRESOLVE_*`` environment variables, CLI flags.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverConfig:
    """Settings for one resolver invocation."""
    scope: str = Constants.OPAM_SCOPE
    ocaml_version: Optional[str] = None
    index_path: Optional[str] = None
    overrides_path: Optional[str] = None
    lockfile_path: Optional[str] = None


_ENV_KEYS = {
    Constants.ENV_SCOPE: "scope",
    Constants.ENV_OCAML_VERSION: "ocaml_version",
    Constants.ENV_INDEX: "index_path",
}


def _known(values: Mapping[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(ResolverConfig)}
    unknown = sorted(set(values) - names)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    return {k: (str(v) if v is not None else None) for k, v in values.items() if k in names}


def load_yaml_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Return the ``opam:`` section of a YAML config file.

    A file without that section is used as a whole. A missing path returns
    an empty mapping.

    Raises:
        OSError: the file exists but cannot be read.
        yaml.YAMLError: the file is not valid YAML.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        return {}
    section = data.get(Constants.CONFIG_SECTION, data)
    return dict(section) if isinstance(section, dict) else {}


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ResolverConfig:
    """Build a ResolverConfig from file, environment and explicit overrides.

    ``overrides`` entries that are None are treated as "not given".
    """
    env = os.environ if environ is None else environ
    config = ResolverConfig()
    config = replace(config, **_known(load_yaml_config(config_path)))

    from_env = {attr: env[key] for key, attr in _ENV_KEYS.items() if env.get(key)}
    config = replace(config, **from_env)

    given = {k: v for k, v in (overrides or {}).items() if v is not None}
    config = replace(config, **_known(given))
    logger.debug("Effective config: %s", config)
    return config
