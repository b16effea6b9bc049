"""Argument parsing functionality for opamresolve."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="opamresolve",
        description="Resolve an @opam/<name>@<range> pattern to a single manifest",
        add_help=True,
    )

    parser.add_argument("-p", "--package",
                        dest="PATTERN",
                        help="Scoped pattern to resolve, i.e: @opam/lwt@^5.0.0",
                        action="store", type=str,
                        required=True)
    parser.add_argument("-i", "--index",
                        dest="INDEX",
                        help="JSON repository index mapping package -> version -> manifest",
                        action="store", type=str)
    parser.add_argument("--overrides",
                        dest="OVERRIDES",
                        help="Directory of <package>.json override files",
                        action="store", type=str)
    parser.add_argument("--lockfile",
                        dest="LOCKFILE",
                        help="JSON lockfile mapping pattern -> resolved manifest",
                        action="store", type=str)
    parser.add_argument("--ocaml-version",
                        dest="OCAML_VERSION",
                        help="Installed OCaml compiler version used to filter candidates",
                        action="store", type=str)
    parser.add_argument("--scope",
                        dest="SCOPE",
                        help="Scope of accepted patterns (default: opam)",
                        action="store", type=str)
    parser.add_argument("--parent",
                        dest="PARENTS",
                        help="Requesting package, nearest first (repeatable)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="YAML config file",
                        action="store", type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the resolved manifest to this file instead of stdout",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')

    return parser.parse_args(argv)
