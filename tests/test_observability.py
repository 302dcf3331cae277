import json
from pathlib import Path
from typing import Any

from assetpack.observability import StructuredLogger

from conftest import Project


def test_structured_logs_carry_type_and_bundle(project: Project) -> None:
    logger = StructuredLogger()
    project.packager(logger=logger).run()

    records = logger.records_for_type("stylesheets")
    assert records
    for record in records:
        assert record["asset_type"] == "stylesheets"
        assert "operation" in record
        assert "bundle" in record
        assert "level" in record

    (written,) = logger.records_for_bundle("stylesheets", "subset")
    assert written["operation"] == "bundle_written"
    assert written["extra"]["written"] == ["subset.css"]


def test_failed_bundles_are_logged_with_error_payload(project: Project) -> None:
    project.write_manifest("javascripts:\n  gone: [absent]\n")
    logger = StructuredLogger()

    project.packager(logger=logger).run()

    (failed,) = logger.records_for_bundle("javascripts", "gone")
    assert failed["level"] == "error"
    assert failed["operation"] == "bundle_failed"
    error: dict[str, Any] = failed["extra"]["error"]
    assert error["code"] == "E_MISSING_SOURCE"
    assert error["context"]["bundle"] == "gone"
    assert error["hint"]


def test_json_lines_export(tmp_path: Path) -> None:
    logger = StructuredLogger()
    logger.log(operation="process_type", asset_type="javascripts", bundle=None, message="start")
    logger.log(
        operation="bundle_written",
        asset_type="javascripts",
        bundle="all",
        message="done",
        extra={"digest": "abc"},
    )

    path = logger.to_json_lines(tmp_path / "logs" / "run.jsonl")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == {
        "asset_type": "javascripts",
        "bundle": None,
        "level": "info",
        "message": "start",
        "operation": "process_type",
    }
    assert json.loads(lines[1])["extra"] == {"digest": "abc"}
