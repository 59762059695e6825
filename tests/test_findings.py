"""
Tests for finding policies and the finding accumulator.
"""

from datetime import datetime

from hypothesis import given, settings, strategies as st

from ontology_audit.core.findings import (
    FINDING_POLICIES,
    FindingAccumulator,
    PolicyKind,
    Report,
)
from ontology_audit.core.models import Finding, FindingCode


INFORMATIONAL = [code for code in FindingCode if not code.is_error]
ACCUMULATING = [code for code, policy in FINDING_POLICIES.items() if policy.kind is PolicyKind.ACCUMULATING]
SINGLE_WRITE = [code for code, policy in FINDING_POLICIES.items() if policy.kind is not PolicyKind.ACCUMULATING]


class TestPolicyTable:
    """Тесты таблицы политик"""

    def test_every_code_has_a_policy(self):
        assert set(FINDING_POLICIES) == set(FindingCode)

    def test_informational_codes(self):
        assert set(INFORMATIONAL) == {FindingCode.SUMMARY_ONLY, FindingCode.FLAT}

    def test_status_codes_accumulate(self):
        assert FindingCode.ERROR_STATUS in ACCUMULATING
        assert FindingCode.MISSING_STATUS in ACCUMULATING

    def test_running_report_is_formatted(self):
        assert FINDING_POLICIES[FindingCode.RUNNING_REPORT].kind is PolicyKind.FORMATTED


class TestFindingAccumulator:
    """Тесты накопителя находок"""

    def test_starts_clean(self):
        acc = FindingAccumulator("GO")
        assert acc.to_dict() == {"problem": False, "logFilePath": ""}

    def test_fixed_code_stores_message(self):
        acc = FindingAccumulator("GO")
        assert acc.record(FindingCode.NO_SUBMISSIONS)
        assert acc.to_dict()["errNoSubmissions"] == "Ontology has no submissions"
        assert acc.problem is True

    def test_informational_code_is_not_a_problem(self):
        acc = FindingAccumulator("GO")
        acc.record(FindingCode.SUMMARY_ONLY)
        acc.record(FindingCode.FLAT)
        assert acc.problem is False
        assert acc.to_dict()["summaryOnly"] == "Ontology is summary-only"
        assert acc.to_dict()["flat"] == "This ontology is designated as FLAT"

    def test_list_code_keeps_recording_order(self):
        acc = FindingAccumulator("GO")
        acc.record(FindingCode.ERROR_STATUS, "ERROR_RDF")
        acc.record(FindingCode.ERROR_STATUS, "ERROR_METRICS")
        assert acc.get(FindingCode.ERROR_STATUS) == ["ERROR_RDF", "ERROR_METRICS"]

    def test_fixed_code_second_write_ignored(self):
        acc = FindingAccumulator("GO")
        assert acc.record(FindingCode.NO_METRICS)
        assert not acc.record(FindingCode.NO_METRICS)
        assert acc.findings == [Finding(FindingCode.NO_METRICS)]

    def test_formatted_code_first_write_wins(self):
        acc = FindingAccumulator("GO")
        acc.record(FindingCode.NO_LATEST_READY_SUBMISSION, 1)
        acc.record(FindingCode.NO_LATEST_READY_SUBMISSION, 3)
        assert acc.get(FindingCode.NO_LATEST_READY_SUBMISSION) == (
            "The latest submission is not ready and is ahead of the latest ready by 1 revision"
        )

    def test_formatted_plural(self):
        acc = FindingAccumulator("GO")
        acc.record(FindingCode.NO_LATEST_READY_SUBMISSION, 2)
        assert acc.get(FindingCode.NO_LATEST_READY_SUBMISSION).endswith("by 2 revisions")

    def test_index_messages(self):
        acc = FindingAccumulator("GO")
        acc.record(FindingCode.NO_ANNOTATOR, (0, "cell | gene"))
        acc.record(FindingCode.NO_SEARCH, (1, "cell | gene"))
        assert acc.get(FindingCode.NO_ANNOTATOR) == "Annotator - NO results for: cell | gene"
        assert acc.get(FindingCode.NO_SEARCH) == "Search - FEW results for: cell | gene"

    def test_missing_data_is_a_noop(self):
        acc = FindingAccumulator("GO")
        assert not acc.record(FindingCode.ERROR_STATUS)
        assert not acc.record(FindingCode.NO_SEARCH)
        assert acc.problem is False
        assert acc.codes == []

    def test_running_report_message(self):
        """errRunningReport хранится строкой, первая ошибка побеждает"""
        acc = FindingAccumulator("GO")
        acc.record(FindingCode.RUNNING_REPORT, ("RootsCheck", "ValueError", "boom"))
        acc.record(FindingCode.RUNNING_REPORT, ("MetricsCheck", "KeyError", "classes"))
        assert acc.to_dict()["errRunningReport"] == (
            "Error while running report on component RootsCheck: ValueError: boom"
        )
        assert acc.problem is True

    def test_extend(self):
        acc = FindingAccumulator("GO")
        acc.extend([Finding(FindingCode.FLAT), Finding(FindingCode.MISSING_STATUS, "INDEXED")])
        assert acc.codes == [FindingCode.FLAT, FindingCode.MISSING_STATUS]
        assert acc.problem is True


class TestFindingAccumulatorProperties:
    """Property-based тесты накопителя"""

    @settings(max_examples=100)
    @given(
        code=st.sampled_from(ACCUMULATING),
        payloads=st.lists(st.text(min_size=1, max_size=20), min_size=1, max_size=10),
    )
    def test_property_list_codes_append_in_order(self, code, payloads):
        acc = FindingAccumulator("X")
        for payload in payloads:
            acc.record(code, payload)
        assert acc.get(code) == payloads

    @settings(max_examples=100)
    @given(code=st.sampled_from(SINGLE_WRITE), first=st.integers(1, 50), second=st.integers(1, 50))
    def test_property_single_write_codes_are_idempotent(self, code, first, second):
        data = {
            FindingCode.NO_LATEST_READY_SUBMISSION: (first, second),
            FindingCode.NO_ANNOTATOR: ((first, "a"), (second, "b")),
            FindingCode.NO_SEARCH: ((first, "a"), (second, "b")),
            FindingCode.RUNNING_REPORT: (("A", "E", str(first)), ("B", "E", str(second))),
        }.get(code, (None, None))

        acc = FindingAccumulator("X")
        acc.record(code, data[0])
        snapshot = acc.to_dict()
        acc.record(code, data[1])
        assert acc.to_dict() == snapshot

    @settings(max_examples=50)
    @given(codes=st.lists(st.sampled_from(INFORMATIONAL), max_size=10))
    def test_property_informational_never_sets_problem(self, codes):
        acc = FindingAccumulator("X")
        for code in codes:
            acc.record(code)
        assert acc.problem is False

    @settings(max_examples=50)
    @given(codes=st.lists(st.sampled_from(list(FindingCode)), min_size=1, max_size=15))
    def test_property_problem_iff_error_recorded(self, codes):
        acc = FindingAccumulator("X")
        for code in codes:
            acc.record(code, "payload" if code in ACCUMULATING else None)
        recorded_errors = [c for c in acc.codes if c.is_error]
        assert acc.problem == bool(recorded_errors)


class TestReport:
    """Тесты итогового отчёта"""

    def test_to_dict(self):
        acc = FindingAccumulator("GO")
        acc.log_file_path = "/repo/GO/3/parsing.log"
        acc.record(FindingCode.NO_METRICS)
        report = Report(ontologies={"GO": acc}, generated_at=datetime(2024, 3, 5, 14, 7))

        assert report.to_dict() == {
            "ontologies": {
                "GO": {
                    "problem": True,
                    "logFilePath": "/repo/GO/3/parsing.log",
                    "errNoMetricsLatestReadySubmission": "The latest ready submission has no metrics",
                }
            },
            "date_generated": "03/05/2024 02:07PM",
        }

    def test_problems(self):
        ok = FindingAccumulator("A")
        bad = FindingAccumulator("B")
        bad.record(FindingCode.NO_SUBMISSIONS)
        report = Report(ontologies={"A": ok, "B": bad})
        assert report.problems() == [bad]
        assert report.date_generated is None
