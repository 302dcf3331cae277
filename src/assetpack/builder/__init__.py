"""Bundle builder contracts and implementations."""

from .base import Transform, TransformContext, TransformRegistry
from .bundle import BundleBuilder
from .references import AssetReference, ReferenceRewriter, parse_reference

__all__ = [
    "AssetReference",
    "BundleBuilder",
    "ReferenceRewriter",
    "Transform",
    "TransformContext",
    "TransformRegistry",
    "parse_reference",
]
