"""Tests for report rendering."""

from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING

from rich.console import Console

from loadprobe.cli.report import render_json, render_report, write_json
from loadprobe.metrics.models import Report

if TYPE_CHECKING:
    from pathlib import Path


def _render(report: Report) -> str:
    buffer = io.StringIO()
    render_report(report, Console(file=buffer, width=120, color_system=None))
    return buffer.getvalue()


def _report(**overrides: object) -> Report:
    values: dict[str, object] = {
        "total_time_seconds": 1.5,
        "total_requests": 4,
        "success_requests": 2,
        "error_count": 1,
        "status_codes": {200: 2, 500: 1},
        "average_response_ms": 20.0,
        "errors_by_type": {"ClientConnectorError": 1},
    }
    values.update(overrides)
    return Report(**values)  # type: ignore[arg-type]


class TestRenderReport:
    def test_summary_rows(self):
        text = _render(_report())
        assert "Load Test Report" in text
        assert "Total Requests" in text
        assert "20.0ms" in text
        assert "50.0%" in text  # success rate

    def test_status_distribution_with_share(self):
        text = _render(_report())
        assert "Status Code Distribution" in text
        assert "500" in text
        assert "25.0%" in text

    def test_error_table(self):
        text = _render(_report())
        assert "Errors by Type" in text
        assert "ClientConnectorError" in text

    def test_optional_tables_omitted_when_empty(self):
        text = _render(
            _report(
                total_requests=2,
                success_requests=0,
                error_count=2,
                status_codes={},
                errors_by_type={"TimeoutError": 2},
            )
        )
        assert "Status Code Distribution" not in text

        text = _render(_report(error_count=0, errors_by_type={}))
        assert "Errors by Type" not in text


class TestJson:
    def test_render_json(self):
        data = json.loads(render_json(_report()))
        assert data["total_requests"] == 4
        assert data["status_codes"] == {"200": 2, "500": 1}

    def test_write_json_creates_parents(self, tmp_path: Path):
        path = tmp_path / "nested" / "report.json"
        write_json(_report(), path)
        assert json.loads(path.read_text())["error_count"] == 1
