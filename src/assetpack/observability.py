"""Structured logging and observability helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        asset_type: str | None,
        bundle: str | None,
        message: str,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "asset_type": asset_type,
            "bundle": bundle,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_type(self, asset_type: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("asset_type") == asset_type]

    def records_for_bundle(self, asset_type: str, bundle: str) -> list[dict[str, Any]]:
        return [
            record
            for record in self.records_for_type(asset_type)
            if record.get("bundle") == bundle
        ]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
