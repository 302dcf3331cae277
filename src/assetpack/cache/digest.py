"""Content digests and digest-derived names."""

from __future__ import annotations

import hashlib
from pathlib import PurePosixPath


def digest(data: bytes) -> str:
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def stamped_name(path: str, content_digest: str) -> str:
    """Return ``images/one-<digest>.png`` for ``images/one.png``."""
    posix = PurePosixPath(path)
    stamped = f"{posix.stem}-{content_digest}{posix.suffix}"
    return str(posix.with_name(stamped))


def host_for(path: str, hosts: tuple[str, ...]) -> str:
    """Pick the asset host for ``path`` by hashing the path.

    The choice depends only on the path, so it is the same across runs and
    bundles. It is not round-robin: two references may share a host.
    """
    if not hosts:
        raise ValueError("host_for() requires at least one host.")
    return hosts[int(digest(path.encode("utf-8")), 16) % len(hosts)]
