"""Stylesheet ``url(...)`` rewriting: embedding, cache stamps, and asset hosts."""

from __future__ import annotations

import base64
import mimetypes
import os
import re
from dataclasses import dataclass
from pathlib import Path

from assetpack.cache.digest import host_for, stamped_name
from assetpack.cache.store import FingerprintCache
from assetpack.errors import BuildError, MissingAssetReferenceError
from assetpack.models import ResolvedPackage
from assetpack.writer import OutputWriter

URL_PATTERN = re.compile(r"""url\(\s*(?P<quote>['"]?)(?P<target>[^'")\s]+)(?P=quote)\s*\)""")

EXTERNAL_PREFIXES = ("data:", "http:", "https:", "//", "#", "about:")
EMBEDDABLE_MIME_PREFIXES = ("image/", "font/")
EMBED_MARKER = "embed"

_MIME_OVERRIDES = {
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".svg": "image/svg+xml",
}


@dataclass(frozen=True, slots=True)
class AssetReference:
    target: str
    path: str
    file: Path
    suffix: str = ""
    embed_marked: bool = False


def parse_reference(target: str, *, source: Path, root: Path) -> AssetReference | None:
    """Return the local asset a ``url()`` target points at, or None for external targets."""
    if not target or target.lower().startswith(EXTERNAL_PREFIXES):
        return None
    markers = [index for index in (target.find("?"), target.find("#")) if index >= 0]
    split_at = min(markers, default=len(target))
    path_part, suffix = target[:split_at], target[split_at:]
    if not path_part:
        return None
    suffix, embed_marked = _consume_embed_marker(suffix)

    if path_part.startswith("/"):
        candidate = root / path_part.lstrip("/")
    else:
        candidate = source.parent / path_part
    normalized = Path(os.path.normpath(candidate))
    try:
        relative = normalized.relative_to(root)
    except ValueError:
        return None
    return AssetReference(
        target=target,
        path=relative.as_posix(),
        file=normalized,
        suffix=suffix,
        embed_marked=embed_marked,
    )


@dataclass(slots=True)
class ReferenceRewriter:
    root: Path
    cache: FingerprintCache
    writer: OutputWriter
    hosts: tuple[str, ...] = ()
    cache_boost: bool = False
    embed_limit: int = 0
    reserved_keys: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        self.root = Path(os.path.normpath(self.root))

    def rewrite(
        self,
        content: str,
        *,
        source: Path,
        package: ResolvedPackage,
        embed: bool,
        stamped: set[str] | None = None,
    ) -> str:
        def replace(match: re.Match[str]) -> str:
            reference = parse_reference(match.group("target"), source=source, root=self.root)
            if reference is None:
                return match.group(0)
            url = self.url_for(reference, source=source, package=package, embed=embed, stamped=stamped)
            quote = match.group("quote")
            return f"url({quote}{url}{quote})"

        return URL_PATTERN.sub(replace, content)

    def url_for(
        self,
        reference: AssetReference,
        *,
        source: Path,
        package: ResolvedPackage,
        embed: bool,
        stamped: set[str] | None = None,
    ) -> str:
        context = {
            "asset_type": package.asset_type.name,
            "bundle": package.bundle_name,
            "source": str(source),
            "reference": reference.target,
            "path": str(reference.file),
        }
        if not reference.file.is_file():
            raise MissingAssetReferenceError(
                f"Referenced asset '{reference.target}' does not exist.",
                hint="Fix the url() reference or add the missing file.",
                context=context,
            )
        if embed and self.should_embed(reference):
            return data_uri(reference.file)

        url_path = reference.path
        if self.cache_boost:
            # Asset and bundle fingerprints share one flat key space.
            if reference.path in self.reserved_keys:
                raise BuildError(
                    f"Referenced asset '{reference.target}' has the same cache key as a bundle.",
                    hint="Rename the asset or the bundle so their cache keys differ.",
                    context=context,
                )
            url_path = self._stamp(reference)
            if stamped is not None:
                stamped.add(reference.path)
        if self.hosts:
            # Host choice uses the unstamped path so it survives content changes.
            return f"//{host_for(reference.path, self.hosts)}/{url_path}{reference.suffix}"
        return f"/{url_path}{reference.suffix}"

    def should_embed(self, reference: AssetReference) -> bool:
        mime = mime_type(reference.file)
        if mime is None or not mime.startswith(EMBEDDABLE_MIME_PREFIXES):
            return False
        if reference.embed_marked:
            return True
        return 0 < self.embed_limit and reference.file.stat().st_size <= self.embed_limit

    def _stamp(self, reference: AssetReference) -> str:
        with self.cache.key_lock(reference.path):
            fingerprint = self.cache.lookup_or_assign(reference.path, reference.file.read_bytes())
            self.writer.write_stamped_asset(reference.file, reference.path, fingerprint)
        return stamped_name(reference.path, fingerprint.digest)


def mime_type(path: Path) -> str | None:
    override = _MIME_OVERRIDES.get(path.suffix.lower())
    if override is not None:
        return override
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed


def data_uri(path: Path) -> str:
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type(path)};base64,{encoded}"


def _consume_embed_marker(suffix: str) -> tuple[str, bool]:
    if not suffix.startswith("?"):
        return suffix, False
    query, hash_mark, fragment = suffix[1:].partition("#")
    params = [param for param in query.split("&") if param]
    if EMBED_MARKER not in params:
        return suffix, False
    remaining = [param for param in params if param != EMBED_MARKER]
    rebuilt = f"?{'&'.join(remaining)}" if remaining else ""
    return f"{rebuilt}{hash_mark}{fragment}", True
