"""Build option configuration and validation helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from assetpack.errors import ConfigError

_HOST_RANGE = re.compile(r"\[(\d+),\s*(\d+)\]")


@dataclass(frozen=True, slots=True)
class BuildOptions:
    compress: bool = False
    no_embed: bool = False
    cache_boost: bool = False
    asset_hosts: str | None = None
    only: tuple[str, ...] = ()
    indent_width: int = 4
    minify: bool = True
    embed_limit: int = 0
    max_workers: int = 4


def ensure_options(options: BuildOptions) -> None:
    if options.indent_width < 0:
        raise ConfigError(
            "Indent width must not be negative.",
            context={"option": "indent_width", "value": str(options.indent_width)},
        )
    if options.embed_limit < 0:
        raise ConfigError(
            "Embed limit must not be negative.",
            hint="Use 0 to embed only references marked with ?embed.",
            context={"option": "embed_limit", "value": str(options.embed_limit)},
        )
    if options.max_workers < 1:
        raise ConfigError(
            "At least one worker is required.",
            context={"option": "max_workers", "value": str(options.max_workers)},
        )


def parse_asset_hosts(pattern: str | None) -> tuple[str, ...]:
    """Expand ``assets[0,3].example.com`` into ``assets0`` .. ``assets3`` hosts."""
    if not pattern:
        return ()
    match = _HOST_RANGE.search(pattern)
    if match is None:
        return (pattern,)
    start, end = int(match.group(1)), int(match.group(2))
    if start > end:
        raise ConfigError(
            "Asset host range must be ascending.",
            hint="Write the range as [first,last], e.g. assets[0,3].example.com.",
            context={"option": "asset_hosts", "value": pattern},
        )
    prefix, suffix = pattern[: match.start()], pattern[match.end() :]
    return tuple(f"{prefix}{index}{suffix}" for index in range(start, end + 1))


def parse_selection(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())
