"""Packaging run orchestration: resolve, build, fingerprint, write, flush."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import groupby
from pathlib import Path

from .builder import BundleBuilder, ReferenceRewriter, TransformRegistry
from .cache import Fingerprint, FingerprintCache
from .errors import BuildError, ConfigError
from .models import BuildResult, BundleResult, Manifest, ResolvedPackage
from .observability import StructuredLogger
from .options import BuildOptions, ensure_options, parse_asset_hosts
from .resolver import Selection, resolve_packages
from .writer import Compressor, OutputWriter, gzip_compress


@dataclass(slots=True)
class Packager:
    """Runs one packaging pass over a project root.

    Asset types are processed in manifest order. Bundles of one type may be
    built in parallel, but their results are logged in declaration order.
    """

    root: Path
    manifest: Manifest
    cache_path: Path
    options: BuildOptions = field(default_factory=BuildOptions)
    transforms: TransformRegistry = field(default_factory=TransformRegistry)
    compressor: Compressor = field(default=gzip_compress)
    logger: StructuredLogger = field(default_factory=StructuredLogger)

    def run(self) -> BuildResult:
        ensure_options(self.options)
        root = Path(os.path.abspath(self.root))
        if not root.is_dir():
            raise ConfigError(
                f'Root path "{self.root}" could not be found.',
                hint="Pass the public assets directory with -r/--root.",
                context={"path": str(self.root)},
            )
        hosts = parse_asset_hosts(self.options.asset_hosts or self.manifest.asset_hosts)
        packages = resolve_packages(
            self.manifest,
            root=root,
            selection=Selection(self.options.only),
        )

        cache = FingerprintCache.load(self.cache_path, logger=self.logger)
        writer = OutputWriter(root=root, compress=self.options.compress, compressor=self.compressor)
        rewriter = ReferenceRewriter(
            root=root,
            cache=cache,
            writer=writer,
            hosts=hosts,
            cache_boost=self.options.cache_boost,
            embed_limit=self.options.embed_limit,
            reserved_keys=frozenset(entry.cache_key for entry in self.manifest.entries),
        )
        builder = BundleBuilder(rewriter=rewriter, options=self.options, transforms=self.transforms)

        result = BuildResult(cache_path=cache.path)
        for asset_type, group in groupby(packages, key=lambda package: package.asset_type.name):
            self.logger.log(
                operation="process_type",
                asset_type=asset_type,
                bundle=None,
                message=f"Processing type '{asset_type}'",
            )
            batch = list(group)
            with ThreadPoolExecutor(max_workers=self.options.max_workers) as executor:
                futures = [
                    executor.submit(self._process, package, builder=builder, writer=writer, cache=cache)
                    for package in batch
                ]
                for future in futures:
                    bundle_result = future.result()
                    self._log_result(bundle_result)
                    result.bundles.append(bundle_result)

        cache.flush()
        return result

    def _process(
        self,
        package: ResolvedPackage,
        *,
        builder: BundleBuilder,
        writer: OutputWriter,
        cache: FingerprintCache,
    ) -> BundleResult:
        stamped: set[str] = set()
        fingerprint: Fingerprint | None = None
        try:
            contents = builder.build(package, stamped=stamped)
            if self.options.cache_boost:
                with cache.key_lock(package.cache_key):
                    fingerprint = cache.lookup_or_assign(package.cache_key, contents[0].data)
            outcome = writer.write_bundle(contents, fingerprint)
        except BuildError as exc:
            return self._failed(package, stamped=stamped, error=exc)
        except OSError as exc:
            if fingerprint is not None:
                cache.revert(package.cache_key)
            error = BuildError(
                f"Could not process bundle '{package.output_name}'.",
                hint="Check free disk space and file permissions under the project root.",
                context={
                    "asset_type": package.asset_type.name,
                    "bundle": package.bundle_name,
                    "path": str(exc.filename or writer.output_dir(package.asset_type)),
                    "reason": exc.strerror or str(exc),
                },
            )
            error.__cause__ = exc
            return self._failed(package, stamped=stamped, error=error)
        return BundleResult(
            bundle_name=package.bundle_name,
            asset_type=package.asset_type.name,
            digest=fingerprint.digest if fingerprint is not None else None,
            written=outcome.written,
            removed=outcome.removed,
            stamped=tuple(sorted(stamped)),
        )

    def _failed(
        self,
        package: ResolvedPackage,
        *,
        stamped: set[str],
        error: BuildError,
    ) -> BundleResult:
        return BundleResult(
            bundle_name=package.bundle_name,
            asset_type=package.asset_type.name,
            stamped=tuple(sorted(stamped)),
            error=error,
        )

    def _log_result(self, bundle_result: BundleResult) -> None:
        if bundle_result.error is not None:
            self.logger.log(
                operation="bundle_failed",
                asset_type=bundle_result.asset_type,
                bundle=bundle_result.bundle_name,
                message=bundle_result.error.message,
                level="error",
                extra={"error": bundle_result.error.to_dict()},
            )
            return
        self.logger.log(
            operation="bundle_written",
            asset_type=bundle_result.asset_type,
            bundle=bundle_result.bundle_name,
            message="Wrote bundle.",
            extra={
                "digest": bundle_result.digest,
                "written": [path.name for path in bundle_result.written],
                "removed": [path.name for path in bundle_result.removed],
                "stamped": list(bundle_result.stamped),
            },
        )
