"""Manifest parser and loader."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from assetpack.errors import ConfigError
from assetpack.manifest.schema import ManifestDocument
from assetpack.models import ASSET_TYPES, Manifest, ManifestEntry, asset_type_for, source_spec_from

_SETTINGS_KEYS = frozenset({"asset_hosts"})


def default_cache_path(manifest_path: str | Path) -> Path:
    """Return ``.assets.yml.json`` next to ``assets.yml``."""
    path = Path(manifest_path)
    return path.with_name(f".{path.name}.json")


def read_manifest(path: str | Path) -> Manifest:
    manifest_path = Path(path)
    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(
            f'Config file "{manifest_path}" is missing.',
            hint="Pass the package manifest with -c/--config.",
            context={"path": str(manifest_path)},
        ) from exc
    return parse_manifest(raw, source=str(manifest_path))


def parse_manifest(raw: str, *, source: str = "<string>") -> Manifest:
    try:
        payload = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(
            "Invalid manifest YAML.",
            hint=str(exc),
            context={"path": source},
        ) from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ConfigError("Invalid manifest payload type.", context={"path": source})
    return manifest_from_mapping(payload, source=source)


def manifest_from_mapping(payload: Mapping[str, Any], *, source: str = "<mapping>") -> Manifest:
    for key in payload:
        if key not in _SETTINGS_KEYS:
            asset_type_for(str(key))

    try:
        document = ManifestDocument.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigError(
            "Manifest does not match the expected schema.",
            hint=str(exc),
            context={"path": source},
        ) from exc

    entries: list[ManifestEntry] = []
    for type_name in (key for key in payload if key in ASSET_TYPES):
        bundles: dict[str, str | list[str]] = getattr(document, type_name)
        for bundle_name, sources in bundles.items():
            values = [sources] if isinstance(sources, str) else sources
            entries.append(
                ManifestEntry(
                    bundle_name=bundle_name,
                    asset_type=type_name,
                    sources=tuple(source_spec_from(value) for value in values),
                )
            )
    return Manifest(entries=tuple(entries), asset_hosts=document.asset_hosts)
