"""Bundle output naming, stale artifact cleanup, and compression."""

from __future__ import annotations

import gzip
import os
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from assetpack.cache.digest import stamped_name
from assetpack.cache.store import Fingerprint
from assetpack.models import BUNDLE_DIR_NAME, AssetType, BundleContent, Variant

Compressor = Callable[[bytes], bytes]

VARIANTS: tuple[Variant, ...] = ("plain", "noembed")


def gzip_compress(data: bytes) -> bytes:
    # mtime=0 keeps the gzip header identical between runs.
    return gzip.compress(data, compresslevel=9, mtime=0)


@dataclass(frozen=True, slots=True)
class WriteOutcome:
    written: tuple[Path, ...] = ()
    removed: tuple[Path, ...] = ()


@dataclass(slots=True)
class OutputWriter:
    root: Path
    compress: bool = False
    compressor: Compressor = field(default=gzip_compress)

    def output_dir(self, asset_type: AssetType) -> Path:
        return self.root / asset_type.name / BUNDLE_DIR_NAME

    def output_path(
        self,
        *,
        asset_type: AssetType,
        bundle_name: str,
        variant: Variant,
        content_digest: str | None = None,
    ) -> Path:
        name = bundle_name
        if content_digest:
            name = f"{name}-{content_digest}"
        if variant == "noembed":
            name = f"{name}-noembed"
        return self.output_dir(asset_type) / f"{name}.{asset_type.extension}"

    def write_bundle(
        self,
        contents: Sequence[BundleContent],
        fingerprint: Fingerprint | None = None,
    ) -> WriteOutcome:
        if not contents:
            return WriteOutcome()
        first = contents[0]
        removed: list[Path] = []
        if fingerprint is not None and fingerprint.previous and fingerprint.changed:
            removed = self.remove_bundle_outputs(
                asset_type=first.asset_type,
                bundle_name=first.bundle_name,
                content_digest=fingerprint.previous,
            )

        written: list[Path] = []
        for content in contents:
            path = self.output_path(
                asset_type=content.asset_type,
                bundle_name=content.bundle_name,
                variant=content.variant,
                content_digest=fingerprint.digest if fingerprint is not None else None,
            )
            _write_bytes(path, content.data)
            written.append(path)
            if self.compress:
                compressed_path = path.with_name(f"{path.name}.gz")
                _write_bytes(compressed_path, self.compressor(content.data))
                written.append(compressed_path)
        return WriteOutcome(written=tuple(written), removed=tuple(removed))

    def remove_bundle_outputs(
        self,
        *,
        asset_type: AssetType,
        bundle_name: str,
        content_digest: str,
    ) -> list[Path]:
        removed: list[Path] = []
        for variant in VARIANTS:
            path = self.output_path(
                asset_type=asset_type,
                bundle_name=bundle_name,
                variant=variant,
                content_digest=content_digest,
            )
            for candidate in (path, path.with_name(f"{path.name}.gz")):
                if candidate.exists():
                    candidate.unlink()
                    removed.append(candidate)
        return removed

    def write_stamped_asset(self, source: Path, relative: str, fingerprint: Fingerprint) -> Path:
        """Copy ``images/one.png`` to ``images/one-<digest>.png`` under the root."""
        if fingerprint.previous and fingerprint.changed:
            stale = self.root / stamped_name(relative, fingerprint.previous)
            stale.unlink(missing_ok=True)
        target = self.root / stamped_name(relative, fingerprint.digest)
        if not target.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        return target


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")
    temp_path.write_bytes(data)
    os.replace(temp_path, path)
