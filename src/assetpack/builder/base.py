"""Typed interfaces for per-file source transforms."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Self


@dataclass(frozen=True, slots=True)
class TransformContext:
    source: Path
    asset_type: str
    indent_width: int = 4
    minify: bool = True


class Transform(Protocol):
    def __call__(self, content: str, context: TransformContext) -> str:
        """Compile or compress one source file's text."""


@dataclass(slots=True)
class TransformRegistry:
    """Transforms keyed by source extension (``.less``, ``.js``)."""

    transforms: dict[str, Transform] = field(default_factory=dict)

    def register(self, extension: str, transform: Transform) -> Self:
        key = extension if extension.startswith(".") else f".{extension}"
        self.transforms[key] = transform
        return self

    def apply(self, content: str, context: TransformContext) -> str:
        transform = self.transforms.get(context.source.suffix)
        if transform is None:
            return content
        return transform(content, context)
