"""Public package entrypoint for the asset packager."""

__version__ = "0.1.0"

from .builder import BundleBuilder, ReferenceRewriter, TransformContext, TransformRegistry
from .cache import Fingerprint, FingerprintCache, digest
from .errors import (
    AssetPackError,
    BuildError,
    CacheReadError,
    CacheWriteError,
    ConfigError,
    ErrorCode,
    MissingAssetReferenceError,
    MissingSourceError,
)
from .manifest import default_cache_path, parse_manifest, read_manifest
from .models import (
    ASSET_TYPES,
    BuildResult,
    BundleContent,
    BundleResult,
    Explicit,
    Glob,
    Manifest,
    ManifestEntry,
    ResolvedPackage,
    Wildcard,
)
from .observability import StructuredLogger
from .options import BuildOptions
from .pipeline import Packager
from .resolver import Selection, resolve_packages
from .writer import OutputWriter, gzip_compress

__all__ = [
    "ASSET_TYPES",
    "AssetPackError",
    "BuildError",
    "BuildOptions",
    "BuildResult",
    "BundleBuilder",
    "BundleContent",
    "BundleResult",
    "CacheReadError",
    "CacheWriteError",
    "ConfigError",
    "ErrorCode",
    "Explicit",
    "Fingerprint",
    "FingerprintCache",
    "Glob",
    "Manifest",
    "ManifestEntry",
    "MissingAssetReferenceError",
    "MissingSourceError",
    "OutputWriter",
    "Packager",
    "ReferenceRewriter",
    "ResolvedPackage",
    "Selection",
    "StructuredLogger",
    "TransformContext",
    "TransformRegistry",
    "Wildcard",
    "__version__",
    "default_cache_path",
    "digest",
    "gzip_compress",
    "parse_manifest",
    "read_manifest",
    "resolve_packages",
]
