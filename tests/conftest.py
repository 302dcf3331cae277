"""Shared test fixtures."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import pytest

from assetpack import BuildOptions, BuildResult, Packager, read_manifest
from assetpack.manifest import default_cache_path
from assetpack.observability import StructuredLogger

PNG_ONE = b"\x89PNG\r\n\x1a\n" + b"one-image-payload"
PNG_TWO = b"\x89PNG\r\n\x1a\n" + b"two-image-payload"

DEFAULT_MANIFEST = """\
stylesheets:
  all: [one, two]
  subset: [one]
javascripts:
  all: [one, two]
  subset: [one]
"""


@dataclass(slots=True)
class Project:
    base: Path

    @property
    def root(self) -> Path:
        return self.base / "public"

    @property
    def manifest_path(self) -> Path:
        return self.base / "assets.yml"

    @property
    def cache_path(self) -> Path:
        return default_cache_path(self.manifest_path)

    def write(self, relative: str, content: str | bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    def write_manifest(self, content: str) -> Path:
        self.manifest_path.write_text(content, encoding="utf-8")
        return self.manifest_path

    def bundled(self, asset_type: str, name: str) -> Path:
        return self.root / asset_type / "bundled" / name

    def cache(self) -> dict[str, Any]:
        return cast(dict[str, Any], json.loads(self.cache_path.read_text(encoding="utf-8")))

    def packager(self, logger: StructuredLogger | None = None, **options: Any) -> Packager:
        return Packager(
            root=self.root,
            manifest=read_manifest(self.manifest_path),
            cache_path=self.cache_path,
            options=BuildOptions(**options),
            logger=logger or StructuredLogger(),
        )

    def run(self, **options: Any) -> BuildResult:
        return self.packager(**options).run()

    def snapshot(self) -> dict[str, bytes]:
        """Every file under the project, keyed by relative path."""
        return {
            path.relative_to(self.base).as_posix(): path.read_bytes()
            for path in sorted(self.base.rglob("*"))
            if path.is_file()
        }


@pytest.fixture
def project(tmp_path: Path) -> Project:
    """Provide a small public/ tree with two stylesheets, two scripts, and two images."""
    proj = Project(base=tmp_path)
    proj.write("stylesheets/one.css", "a{background:url(/images/one.png)}")
    proj.write("stylesheets/two.css", "b{background:url('../images/two.png')}")
    proj.write("javascripts/one.js", "var x=0")
    proj.write("javascripts/two.js", "var y=0")
    proj.write("images/one.png", PNG_ONE)
    proj.write("images/two.png", PNG_TWO)
    proj.write_manifest(DEFAULT_MANIFEST)
    return proj
