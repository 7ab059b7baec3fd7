from __future__ import annotations

import argparse
import re
import shlex
import sys
from pathlib import Path

from .errors import RamlifyError
from .generation import GenerationProfile
from .generator import PackageSpec, generate_client_package
from .log import configure_logging

_GO_PACKAGE = re.compile(r"^[a-z_][a-z0-9_]*$")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ramlify", description="Generate an API client from a RAML spec.")
    parser.add_argument("spec", help="Path or URL of the RAML document")
    parser.add_argument("-t", "--target", required=True, help="Target language to generate (e.g. go)")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output directory")
    parser.add_argument("-p", "--package-name", type=_package_name, default="client", help="Generated package name")
    parser.add_argument(
        "--prefix-depth",
        type=_non_negative,
        default=0,
        help="Leading path segments left out of derived function names",
    )
    parser.add_argument("--formatter", type=_command, default="gofmt -w", help="Formatter command run on the output")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    profile = GenerationProfile.from_options(
        package_name=args.package_name,
        prefix_depth=args.prefix_depth,
        formatter=args.formatter,
    )
    try:
        generate_client_package(PackageSpec(source=args.spec, output_dir=args.output, target=args.target), profile)
    except RamlifyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _package_name(value: str) -> str:
    if not _GO_PACKAGE.match(value):
        raise argparse.ArgumentTypeError(f"invalid package name: {value!r}")
    return value


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must be zero or more")
    return number


def _command(value: str) -> str:
    if not shlex.split(value):
        raise argparse.ArgumentTypeError("formatter command is empty")
    return value


if __name__ == "__main__":
    raise SystemExit(main())
