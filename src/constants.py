"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    NOT_FOUND = 2
    DATA_ERROR = 3
    USAGE_ERROR = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    OPAM_SCOPE = "opam"
    REMOTE_KIND_OPAM = "opam"
    REMOTE_REGISTRY = "npm"
    # Peer dependency carrying the compiler compatibility range
    COMPILER_PEER_KEY = "ocaml"
    ANY_VERSION = "*"
    LATEST_TAG = "latest"
    DEPENDENCY_PATH_SEPARATOR = " -> "

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "OPAMRESOLVE_LOG_LEVEL"
    ENV_SCOPE = "OPAMRESOLVE_SCOPE"
    ENV_OCAML_VERSION = "OPAMRESOLVE_OCAML_VERSION"
    ENV_INDEX = "OPAMRESOLVE_INDEX"
    CONFIG_SECTION = "opam"
