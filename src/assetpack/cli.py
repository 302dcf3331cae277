"""Command-line front end for packaging runs.

Usage:
    assetpack -r public -c assets.yml -g -b
    assetpack -r public -c assets.yml -o all.css,*.js
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from assetpack import __version__
from assetpack.errors import CacheWriteError, ConfigError
from assetpack.manifest import default_cache_path, read_manifest
from assetpack.observability import StructuredLogger
from assetpack.options import BuildOptions, parse_selection
from assetpack.pipeline import Packager

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CACHE_WRITE = 2


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    options = BuildOptions(
        compress=args.gzip,
        no_embed=args.noembed,
        cache_boost=args.cache_boosters,
        asset_hosts=args.asset_hosts,
        only=parse_selection(args.only),
        indent_width=args.indent,
        minify=not args.no_minification,
        embed_limit=args.embed_limit,
        max_workers=args.jobs,
    )
    logger = StructuredLogger()
    try:
        manifest = read_manifest(args.config)
        packager = Packager(
            root=Path(args.root),
            manifest=manifest,
            cache_path=default_cache_path(args.config),
            options=options,
            logger=logger,
        )
        result = packager.run()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except CacheWriteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CACHE_WRITE
    finally:
        if args.report:
            logger.to_json_lines(args.report)

    if args.verbose:
        for record in logger.records:
            line = _format_record(record)
            if line:
                print(line)
    for failure in result.failures():
        print(f"Error: {failure.error}", file=sys.stderr)
    return EXIT_OK if result.ok else EXIT_FAILED


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetpack",
        description="Bundle stylesheets and scripts declared in a package manifest.",
    )
    parser.add_argument("-r", "--root", default="public", help="Public assets root directory.")
    parser.add_argument("-c", "--config", default="assets.yml", help="Package manifest (YAML).")
    parser.add_argument("-g", "--gzip", action="store_true", help="Write gzipped siblings.")
    parser.add_argument(
        "-n",
        "--noembed",
        action="store_true",
        help="Also write variants without embedded assets.",
    )
    parser.add_argument(
        "-b",
        "--cache-boosters",
        action="store_true",
        help="Add content digests to bundle and asset file names.",
    )
    parser.add_argument("-a", "--asset-hosts", help="Asset hosts pattern, e.g. assets[0,3].example.com.")
    parser.add_argument("-o", "--only", help="Comma-separated outputs to build, e.g. all.css,*.js.")
    parser.add_argument("-i", "--indent", type=int, default=4, help="Indent width for non-minified output.")
    parser.add_argument(
        "--nm",
        "--no-minification",
        dest="no_minification",
        action="store_true",
        help="Ask transforms not to minify.",
    )
    parser.add_argument(
        "--embed-limit",
        type=int,
        default=0,
        help="Embed images up to this many bytes (0: only ?embed references).",
    )
    parser.add_argument("-j", "--jobs", type=int, default=4, help="Bundles built in parallel.")
    parser.add_argument("--report", help="Write structured logs as JSON lines to this path.")
    parser.add_argument("--verbose", action="store_true", help="Print progress to stdout.")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _format_record(record: dict[str, Any]) -> str | None:
    operation = record.get("operation")
    if operation == "process_type":
        return str(record["message"])
    if operation == "bundle_written":
        extra = record.get("extra", {})
        return f"  {record['bundle']}: {', '.join(extra.get('written', []))}"
    if record.get("level") == "warning":
        return f"Warning: {record['message']}"
    return None


if __name__ == "__main__":
    sys.exit(main())
