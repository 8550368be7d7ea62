"""Command-line front door for statik.

Parses CLI options on top of persisted defaults, builds the immutable run
configuration and template set, then dispatches into the generator.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, build_config, load_defaults
from .errors import StatikError
from .generator import generate
from .render import load_templates
from .site_model import DEFAULT_BASE_URL

logger = logging.getLogger("statik")

DEFAULT_SOURCE = "."
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def build_parser(defaults: dict[str, object] | None = None) -> argparse.ArgumentParser:
    """Return the argument parser, seeded with persisted ``defaults``."""
    defaults = defaults or {}
    parser = argparse.ArgumentParser(
        prog="statik",
        description="Generate a static, browsable directory-listing website from a directory tree.",
        usage="%(prog)s [options] [src] dest",
    )
    parser.add_argument("paths", nargs="*", metavar="[src] dest", help="Source (default: current directory) and destination.")
    parser.add_argument(
        "-i",
        "--include",
        default=defaults.get("include", DEFAULT_INCLUDE),
        help="Regex a file name must match to be listed (default: %(default)s).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        default=defaults.get("exclude", DEFAULT_EXCLUDE),
        help="Regex excluding matching file and directory names (default: %(default)s).",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action=argparse.BooleanOptionalAction,
        default=defaults.get("recursive", True),
        help="Recursively scan the file tree.",
    )
    parser.add_argument(
        "--empty",
        dest="include_empty",
        action=argparse.BooleanOptionalAction,
        default=defaults.get("include_empty", False),
        help="List directories that end up empty after filtering.",
    )
    parser.add_argument(
        "--sort",
        action=argparse.BooleanOptionalAction,
        default=defaults.get("sort", True),
        help="Sort directories and files by name.",
    )
    parser.add_argument(
        "-l",
        "--links",
        dest="convert_links",
        action=argparse.BooleanOptionalAction,
        default=defaults.get("convert_links", True),
        help="Render .link files as anchors to the URL they contain.",
    )
    parser.add_argument(
        "-b",
        "--base-url",
        default=defaults.get("base_url", DEFAULT_BASE_URL),
        help="Externally visible root URL (default: %(default)s).",
    )
    parser.add_argument("--header", help="Custom header template file.")
    parser.add_argument("--line", help="Custom line template file.")
    parser.add_argument("--footer", help="Custom footer template file.")
    parser.add_argument("--page", help="Custom page template file wrapping header, lines and footer.")
    parser.add_argument("--style", help="Custom stylesheet file.")
    parser.add_argument(
        "--minify",
        action=argparse.BooleanOptionalAction,
        default=defaults.get("minify", True),
        help="Minify generated pages.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug details.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    return parser


def _split_paths(parser: argparse.ArgumentParser, paths: list[str]) -> tuple[str, str]:
    if len(paths) not in (1, 2):
        parser.error("expected [src] dest")
    if len(paths) == 1:
        return DEFAULT_SOURCE, paths[0]
    return paths[0], paths[1]


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and generate the site.

    Exits with status 2 on usage errors and 1 on any generation failure;
    returns normally on success.
    """
    parser = build_parser(load_defaults())
    args = parser.parse_args(argv)
    source, destination = _split_paths(parser, args.paths)
    configure_logging(args.verbose, args.quiet)

    try:
        config = build_config(
            source,
            destination,
            include=args.include,
            exclude=args.exclude,
            base_url=args.base_url,
            recursive=args.recursive,
            include_empty=args.include_empty,
            sort=args.sort,
            convert_links=args.convert_links,
            minify=args.minify,
        )
        templates = load_templates(
            header=_optional_path(args.header),
            line=_optional_path(args.line),
            footer=_optional_path(args.footer),
            page=_optional_path(args.page),
            style=_optional_path(args.style),
        )
        result = generate(config, templates)
    except StatikError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    logger.info(
        "Done: %d page(s), %d file(s) copied, %d link(s)",
        result.pages,
        result.copied,
        result.links,
    )


if __name__ == "__main__":
    main(sys.argv[1:])
