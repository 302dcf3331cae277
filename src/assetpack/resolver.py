"""Package resolution: manifest entries to ordered source file lists."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from assetpack.errors import ConfigError
from assetpack.models import (
    ASSET_TYPES,
    BUNDLE_DIR_NAME,
    AssetType,
    Explicit,
    Glob,
    Manifest,
    ManifestEntry,
    ResolvedPackage,
    SourceSpec,
    Wildcard,
    asset_type_for,
)
from assetpack.options import parse_selection


@dataclass(frozen=True, slots=True)
class Selection:
    """Output filter such as ``all.css,subset.css`` or ``*.js``.

    An empty selection builds everything. Entries that match no bundle are
    ignored.
    """

    entries: tuple[str, ...] = ()

    @classmethod
    def parse(cls, raw: str | None) -> Selection:
        return cls(parse_selection(raw))

    def includes(self, entry: ManifestEntry) -> bool:
        if not self.entries:
            return True
        extension = asset_type_for(entry.asset_type).extension
        return entry.output_name in self.entries or f"*.{extension}" in self.entries


def select_entries(manifest: Manifest, selection: Selection | None = None) -> list[ManifestEntry]:
    active = selection or Selection()
    return [entry for entry in manifest.entries if active.includes(entry)]


def resolve_packages(
    manifest: Manifest,
    *,
    root: str | Path,
    selection: Selection | None = None,
) -> list[ResolvedPackage]:
    root_path = Path(root)
    return [
        resolve_package(entry, root=root_path, manifest=manifest)
        for entry in select_entries(manifest, selection)
    ]


def resolve_package(
    entry: ManifestEntry,
    *,
    root: Path,
    manifest: Manifest | None = None,
) -> ResolvedPackage:
    if manifest is not None and entry.asset_type not in manifest.asset_types:
        raise ConfigError(
            f"Bundle '{entry.bundle_name}' references undeclared asset type '{entry.asset_type}'.",
            context={"asset_type": entry.asset_type, "bundle": entry.bundle_name},
        )
    asset_type = ASSET_TYPES.get(entry.asset_type)
    if asset_type is None:
        raise ConfigError(
            f"Bundle '{entry.bundle_name}' references unknown asset type '{entry.asset_type}'.",
            context={"asset_type": entry.asset_type, "bundle": entry.bundle_name},
        )

    type_root = root / asset_type.name
    files: list[Path] = []
    seen: set[Path] = set()
    for spec in entry.sources:
        try:
            paths = expand_source(spec, type_root=type_root, asset_type=asset_type)
        except ConfigError as exc:
            raise ConfigError(
                exc.message,
                hint=exc.hint,
                context={**exc.context, "bundle": entry.bundle_name},
            ) from exc
        for path in paths:
            if path not in seen:
                seen.add(path)
                files.append(path)
    return ResolvedPackage(bundle_name=entry.bundle_name, asset_type=asset_type, files=tuple(files))


def expand_source(spec: SourceSpec, *, type_root: Path, asset_type: AssetType) -> list[Path]:
    if isinstance(spec, Explicit):
        return [_explicit_path(spec.path, type_root=type_root, asset_type=asset_type)]
    if isinstance(spec, Glob):
        matches = _glob(type_root, spec.pattern, asset_type=asset_type)
    elif isinstance(spec, Wildcard):
        matches = list(type_root.rglob("*"))
    else:
        raise TypeError(f"Unsupported source spec: {spec!r}")
    candidates = [
        path
        for path in matches
        if path.is_file() and _is_source(path, type_root=type_root, asset_type=asset_type)
    ]
    return sorted(candidates, key=lambda path: path.relative_to(type_root).as_posix())


def _glob(type_root: Path, pattern: str, *, asset_type: AssetType) -> list[Path]:
    relative = pattern.lstrip("/")
    try:
        if any("**" in part and part != "**" for part in relative.split("/")):
            raise ValueError("Invalid pattern: '**' can only be an entire path component")
        return list(type_root.glob(relative))
    except ValueError as exc:
        raise ConfigError(
            f"Invalid glob pattern '{pattern}'.",
            hint=str(exc),
            context={"asset_type": asset_type.name, "pattern": pattern},
        ) from exc


def _explicit_path(raw: str, *, type_root: Path, asset_type: AssetType) -> Path:
    base = type_root / raw.lstrip("/")
    if base.suffix in asset_type.source_extensions:
        return base
    candidates = [base.with_name(f"{base.name}{extension}") for extension in asset_type.source_extensions]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    # Missing sources surface as a per-bundle error when the builder reads them.
    return candidates[0]


def _is_source(path: Path, *, type_root: Path, asset_type: AssetType) -> bool:
    relative = path.relative_to(type_root)
    if relative.parts and relative.parts[0] == BUNDLE_DIR_NAME:
        return False
    return path.suffix in asset_type.source_extensions
