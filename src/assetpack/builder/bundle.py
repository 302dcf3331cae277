"""Bundle assembly: read, transform, rewrite, and concatenate sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from assetpack.builder.base import TransformContext, TransformRegistry
from assetpack.builder.references import ReferenceRewriter
from assetpack.errors import BuildError, MissingSourceError
from assetpack.models import BundleContent, ResolvedPackage, Variant
from assetpack.options import BuildOptions

SEPARATOR = "\n"


@dataclass(slots=True)
class BundleBuilder:
    """Produces the ``plain`` (and optionally ``noembed``) content of a package."""

    rewriter: ReferenceRewriter
    options: BuildOptions = field(default_factory=BuildOptions)
    transforms: TransformRegistry = field(default_factory=TransformRegistry)

    def variants(self) -> tuple[Variant, ...]:
        if self.options.no_embed:
            return ("plain", "noembed")
        return ("plain",)

    def build(
        self,
        package: ResolvedPackage,
        *,
        stamped: set[str] | None = None,
    ) -> tuple[BundleContent, ...]:
        sources = [(path, self._load(package, path)) for path in package.files]
        contents: list[BundleContent] = []
        for variant in self.variants():
            parts = [
                self._rewrite(package, path, text, variant=variant, stamped=stamped)
                for path, text in sources
            ]
            contents.append(
                BundleContent(
                    bundle_name=package.bundle_name,
                    asset_type=package.asset_type,
                    variant=variant,
                    data=SEPARATOR.join(parts).encode("utf-8"),
                )
            )
        return tuple(contents)

    def _load(self, package: ResolvedPackage, path: Path) -> str:
        context = {
            "asset_type": package.asset_type.name,
            "bundle": package.bundle_name,
            "path": str(path),
        }
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise MissingSourceError(
                f"Source file for bundle '{package.output_name}' does not exist.",
                hint="Fix the manifest entry or add the missing file.",
                context=context,
            ) from exc
        except UnicodeDecodeError as exc:
            raise BuildError(
                "Source file is not valid UTF-8.",
                context=context,
            ) from exc
        transform_context = TransformContext(
            source=path,
            asset_type=package.asset_type.name,
            indent_width=self.options.indent_width,
            minify=self.options.minify,
        )
        try:
            return self.transforms.apply(raw, transform_context)
        except BuildError:
            raise
        except Exception as exc:
            raise BuildError(
                f"Transform failed for bundle '{package.output_name}': {exc}",
                hint="Fix the source file or the transform registered for its extension.",
                context={**context, "reason": type(exc).__name__},
            ) from exc

    def _rewrite(
        self,
        package: ResolvedPackage,
        path: Path,
        text: str,
        *,
        variant: Variant,
        stamped: set[str] | None,
    ) -> str:
        if not package.asset_type.rewrites_references:
            return text
        return self.rewriter.rewrite(
            text,
            source=path,
            package=package,
            embed=variant == "plain",
            stamped=stamped,
        )
