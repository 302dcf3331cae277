"""Core typed dataclasses for manifests, resolved packages, and build results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .errors import BuildError, ConfigError

Variant = Literal["plain", "noembed"]

BUNDLE_DIR_NAME = "bundled"
GLOB_CHARACTERS = frozenset("*?[")


@dataclass(frozen=True, slots=True)
class AssetType:
    name: str
    extension: str
    source_extensions: tuple[str, ...]
    rewrites_references: bool = False


ASSET_TYPES: dict[str, AssetType] = {
    "stylesheets": AssetType(
        name="stylesheets",
        extension="css",
        source_extensions=(".css", ".less"),
        rewrites_references=True,
    ),
    "javascripts": AssetType(
        name="javascripts",
        extension="js",
        source_extensions=(".js",),
    ),
}


def asset_type_for(name: str) -> AssetType:
    try:
        return ASSET_TYPES[name]
    except KeyError:
        raise ConfigError(
            f"Unknown asset type '{name}'.",
            hint=f"Declare bundles under one of: {', '.join(ASSET_TYPES)}.",
            context={"asset_type": name},
        ) from None


# ── Source specs ────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Explicit:
    """A literal source path, relative to the asset type root."""

    path: str


@dataclass(frozen=True, slots=True)
class Glob:
    """A glob pattern expanded against the asset type root."""

    pattern: str


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Every source file of the asset type."""


SourceSpec = Explicit | Glob | Wildcard


def source_spec_from(raw: str) -> SourceSpec:
    value = raw.strip()
    if value == "*":
        return Wildcard()
    if any(char in GLOB_CHARACTERS for char in value):
        return Glob(value)
    return Explicit(value)


# ── Manifest ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    bundle_name: str
    asset_type: str
    sources: tuple[SourceSpec, ...]

    @property
    def cache_key(self) -> str:
        return f"{self.asset_type}/{self.bundle_name}"

    @property
    def output_name(self) -> str:
        return f"{self.bundle_name}.{asset_type_for(self.asset_type).extension}"


@dataclass(frozen=True, slots=True)
class Manifest:
    entries: tuple[ManifestEntry, ...] = ()
    asset_hosts: str | None = None

    @property
    def asset_types(self) -> tuple[str, ...]:
        seen: list[str] = []
        for entry in self.entries:
            if entry.asset_type not in seen:
                seen.append(entry.asset_type)
        return tuple(seen)

    def entries_for(self, asset_type: str) -> tuple[ManifestEntry, ...]:
        return tuple(entry for entry in self.entries if entry.asset_type == asset_type)

    def entry(self, asset_type: str, bundle_name: str) -> ManifestEntry:
        if asset_type not in self.asset_types:
            raise ConfigError(
                f"Bundle '{bundle_name}' references undeclared asset type '{asset_type}'.",
                context={"asset_type": asset_type, "bundle": bundle_name},
            )
        for entry in self.entries_for(asset_type):
            if entry.bundle_name == bundle_name:
                return entry
        raise ConfigError(
            f"Bundle '{bundle_name}' is not declared for '{asset_type}'.",
            context={"asset_type": asset_type, "bundle": bundle_name},
        )


# ── Resolution and build products ───────────────────────────────────


@dataclass(frozen=True, slots=True)
class ResolvedPackage:
    bundle_name: str
    asset_type: AssetType
    files: tuple[Path, ...]

    @property
    def cache_key(self) -> str:
        return f"{self.asset_type.name}/{self.bundle_name}"

    @property
    def output_name(self) -> str:
        return f"{self.bundle_name}.{self.asset_type.extension}"


@dataclass(frozen=True, slots=True)
class BundleContent:
    bundle_name: str
    asset_type: AssetType
    variant: Variant
    data: bytes


@dataclass(frozen=True, slots=True)
class BundleResult:
    bundle_name: str
    asset_type: str
    digest: str | None = None
    written: tuple[Path, ...] = ()
    removed: tuple[Path, ...] = ()
    stamped: tuple[str, ...] = ()
    error: BuildError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class BuildResult:
    bundles: list[BundleResult] = field(default_factory=list)
    cache_path: Path | None = None

    @property
    def ok(self) -> bool:
        return all(bundle.ok for bundle in self.bundles)

    def failures(self) -> list[BundleResult]:
        return [bundle for bundle in self.bundles if not bundle.ok]

    def result_for(self, asset_type: str, bundle_name: str) -> BundleResult | None:
        for bundle in self.bundles:
            if bundle.asset_type == asset_type and bundle.bundle_name == bundle_name:
                return bundle
        return None
