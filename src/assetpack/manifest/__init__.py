"""Package manifest loading."""

from .io import default_cache_path, manifest_from_mapping, parse_manifest, read_manifest
from .schema import ManifestDocument

__all__ = [
    "ManifestDocument",
    "default_cache_path",
    "manifest_from_mapping",
    "parse_manifest",
    "read_manifest",
]
