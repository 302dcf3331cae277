"""Pydantic models describing the YAML package manifest."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

BundleSources = Union[str, List[str]]


class ManifestDocument(BaseModel):
    asset_hosts: Optional[str] = Field(
        default=None,
        description="Asset host pattern, e.g. assets[0,3].example.com.",
    )
    stylesheets: Dict[str, BundleSources] = Field(default_factory=dict)
    javascripts: Dict[str, BundleSources] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("stylesheets", "javascripts")
    @classmethod
    def _check_bundles(cls, bundles: Dict[str, BundleSources]) -> Dict[str, BundleSources]:
        for name, sources in bundles.items():
            _check_bundle_name(name)
            values = [sources] if isinstance(sources, str) else sources
            if not values:
                raise ValueError(f"bundle '{name}' lists no sources")
            if any(not value.strip() for value in values):
                raise ValueError(f"bundle '{name}' has an empty source entry")
        return bundles


def _check_bundle_name(name: str) -> None:
    if not name or not name.strip():
        raise ValueError("bundle names must be non-empty")
    path = PurePosixPath(name)
    if path.is_absolute() or ".." in path.parts:
        raise ValueError(f"bundle name '{name}' must stay inside the output directory")
