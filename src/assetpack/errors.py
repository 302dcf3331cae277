"""Typed packager error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers reported by the CLI and build results."""

    CONFIG = "E_CONFIG"
    BUILD = "E_BUILD"
    MISSING_SOURCE = "E_MISSING_SOURCE"
    MISSING_ASSET_REFERENCE = "E_MISSING_ASSET_REFERENCE"
    CACHE_READ = "E_CACHE_READ"
    CACHE_WRITE = "E_CACHE_WRITE"


class AssetPackError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ConfigError(AssetPackError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIG, hint=hint, context=context)


class BuildError(AssetPackError):
    """Failure scoped to a single bundle; other bundles keep building."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.BUILD, hint=hint, context=context)


class MissingSourceError(BuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        AssetPackError.__init__(
            self, message, code=ErrorCode.MISSING_SOURCE, hint=hint, context=context
        )


class MissingAssetReferenceError(BuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        AssetPackError.__init__(
            self,
            message,
            code=ErrorCode.MISSING_ASSET_REFERENCE,
            hint=hint,
            context=context,
        )


class CacheReadError(AssetPackError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CACHE_READ, hint=hint, context=context)


class CacheWriteError(AssetPackError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CACHE_WRITE, hint=hint, context=context)


__all__ = [
    "AssetPackError",
    "BuildError",
    "CacheReadError",
    "CacheWriteError",
    "ConfigError",
    "ErrorCode",
    "MissingAssetReferenceError",
    "MissingSourceError",
]
