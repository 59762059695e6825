"""
Tests for the JSON report sink and the console summary.
"""

import json
from datetime import datetime

import pytest
from rich.console import Console

from ontology_audit.core.errors import ReportWriteError
from ontology_audit.core.findings import FindingAccumulator, Report
from ontology_audit.core.models import FindingCode
from ontology_audit.reports.generator import JsonReportSink, print_summary


def sample_report() -> Report:
    clean = FindingAccumulator("GO")
    broken = FindingAccumulator("NCIT")
    broken.record(FindingCode.ERROR_STATUS, "ERROR_RDF")
    broken.record(FindingCode.NO_SEARCH, (2, "Zellkern | nucléole"))
    return Report(
        ontologies={"GO": clean, "NCIT": broken},
        generated_at=datetime(2024, 1, 2, 9, 5),
        duration_seconds=1.5,
    )


class TestJsonReportSink:
    """Тесты JSON sink"""

    def test_write_creates_parents(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "report.json"

        written = JsonReportSink(path).write(sample_report())

        assert written == str(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["date_generated"] == "01/02/2024 09:05AM"
        assert data["ontologies"]["GO"] == {"problem": False, "logFilePath": ""}
        assert data["ontologies"]["NCIT"]["errErrorStatus"] == ["ERROR_RDF"]

    def test_non_ascii_kept(self, tmp_path):
        path = tmp_path / "report.json"
        JsonReportSink(path).write(sample_report())
        assert "nucléole" in path.read_text(encoding="utf-8")

    def test_overwrites_previous_report(self, tmp_path):
        path = tmp_path / "report.json"
        path.write_text("stale")

        JsonReportSink(path).write(sample_report())

        assert json.loads(path.read_text(encoding="utf-8"))["ontologies"]

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ReportWriteError):
            JsonReportSink(blocker / "report.json").write(sample_report())


class TestPrintSummary:
    """Тесты консольной сводки"""

    def test_counts_problem_codes(self):
        console = Console(record=True, width=120)

        print_summary(sample_report(), console=console)

        output = console.export_text()
        assert "Ontologies: 2" in output
        assert "With problems: 1" in output
        assert "errErrorStatus" in output
        assert "errNoSearch" in output

    def test_clean_report_has_no_table(self):
        console = Console(record=True, width=120)
        report = Report(ontologies={"GO": FindingAccumulator("GO")}, generated_at=datetime(2024, 1, 2))

        print_summary(report, console=console)

        assert "Problems by finding" not in console.export_text()
