"""
Finding policies and the per-ontology finding accumulator.

Every finding code has exactly one policy, chosen once from FINDING_POLICIES:
- FIXED: a constant message, first write wins
- ACCUMULATING: payloads appended in recording order
- FORMATTED: message built from the payload, first write wins

errRunningReport is formatted like the other index and staleness codes, so
the report carries one message for the first failing component.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from .models import Finding, FindingCode


REPORT_DATE_FORMAT = "%m/%d/%Y %I:%M%p"


class PolicyKind(Enum):
    FIXED = "fixed"
    ACCUMULATING = "accumulating"
    FORMATTED = "formatted"


@dataclass(frozen=True)
class FindingPolicy:
    """Как код находки хранится в отчёте."""

    kind: PolicyKind
    text: Optional[str] = None
    formatter: Optional[Callable[[Any], str]] = None

    @classmethod
    def fixed(cls, text: str) -> "FindingPolicy":
        return cls(kind=PolicyKind.FIXED, text=text)

    @classmethod
    def accumulating(cls) -> "FindingPolicy":
        return cls(kind=PolicyKind.ACCUMULATING)

    @classmethod
    def formatted(cls, formatter: Callable[[Any], str]) -> "FindingPolicy":
        return cls(kind=PolicyKind.FORMATTED, formatter=formatter)


def _revisions_behind(count: int) -> str:
    plural = "s" if count > 1 else ""
    return (
        "The latest submission is not ready and is ahead of the latest ready "
        f"by {count} revision{plural}"
    )


def _running_report(data) -> str:
    component, error_class, message = data
    return f"Error while running report on component {component}: {error_class}: {message}"


def _index_results(component: str) -> Callable[[Any], str]:
    def fmt(data) -> str:
        hits, text = data
        amount = "FEW" if hits > 0 else "NO"
        return f"{component} - {amount} results for: {text}"
    return fmt


FINDING_POLICIES: Dict[FindingCode, FindingPolicy] = {
    FindingCode.SUMMARY_ONLY: FindingPolicy.fixed("Ontology is summary-only"),
    FindingCode.FLAT: FindingPolicy.fixed("This ontology is designated as FLAT"),
    FindingCode.SUMMARY_ONLY_WITH_SUBMISSIONS: FindingPolicy.fixed(
        "Ontology has submissions but it is set to summary-only"
    ),
    FindingCode.NO_SUBMISSIONS: FindingPolicy.fixed("Ontology has no submissions"),
    FindingCode.NO_READY_SUBMISSION: FindingPolicy.fixed(
        "Ontology has no submissions in a ready state"
    ),
    FindingCode.NO_LATEST_READY_SUBMISSION: FindingPolicy.formatted(_revisions_behind),
    FindingCode.NO_CLASSES: FindingPolicy.fixed("The latest ready submission has no classes"),
    FindingCode.NO_ROOTS: FindingPolicy.fixed("The latest ready submission has no roots"),
    FindingCode.NO_METRICS: FindingPolicy.fixed("The latest ready submission has no metrics"),
    FindingCode.INCORRECT_METRICS: FindingPolicy.fixed(
        "The latest ready submission has incorrect metrics"
    ),
    FindingCode.NO_ANNOTATOR: FindingPolicy.formatted(_index_results("Annotator")),
    FindingCode.NO_SEARCH: FindingPolicy.formatted(_index_results("Search")),
    FindingCode.RUNNING_REPORT: FindingPolicy.formatted(_running_report),
    FindingCode.ERROR_STATUS: FindingPolicy.accumulating(),
    FindingCode.MISSING_STATUS: FindingPolicy.accumulating(),
}


class FindingAccumulator:
    """
    Накопитель находок одной онтологии (только добавление).

    Любой код ``err*`` выставляет ``problem`` в True, информационные коды
    его не трогают.
    """

    def __init__(self, acronym: str, policies: Dict[FindingCode, FindingPolicy] = None):
        self.acronym = acronym
        self.problem = False
        self.log_file_path = ""
        self.findings: List[Finding] = []
        self._policies = policies or FINDING_POLICIES
        self._entries: Dict[FindingCode, Any] = {}

    def record(self, code: FindingCode, data: Any = None) -> bool:
        """
        Записать находку.

        Returns:
            True, если находка изменила накопитель, False, если запись проигнорирована
        """
        policy = self._policies[code]

        if policy.kind is PolicyKind.ACCUMULATING:
            if data is None:
                return False
            self._entries.setdefault(code, []).append(data)
        elif policy.kind is PolicyKind.FORMATTED:
            if data is None or code in self._entries:
                return False
            self._entries[code] = policy.formatter(data)
        else:
            if code in self._entries:
                return False
            self._entries[code] = policy.text

        self.findings.append(Finding(code=code, payload=data))
        if code.is_error:
            self.problem = True
        return True

    def extend(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.record(finding.code, finding.payload)

    def has(self, code: FindingCode) -> bool:
        return code in self._entries

    def get(self, code: FindingCode) -> Any:
        return self._entries.get(code)

    @property
    def codes(self) -> List[FindingCode]:
        return list(self._entries)

    def to_dict(self) -> Dict[str, Any]:
        """Запись этой онтологии в сохраняемом отчёте."""
        entry: Dict[str, Any] = {
            "problem": self.problem,
            "logFilePath": self.log_file_path,
        }
        for code, value in self._entries.items():
            entry[code.value] = list(value) if isinstance(value, list) else value
        return entry


@dataclass
class Report:
    """Результат одного запуска аудита."""

    ontologies: Dict[str, FindingAccumulator] = field(default_factory=dict)
    generated_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    @property
    def date_generated(self) -> Optional[str]:
        if self.generated_at is None:
            return None
        return self.generated_at.strftime(REPORT_DATE_FORMAT)

    def problems(self) -> List[FindingAccumulator]:
        return [acc for acc in self.ontologies.values() if acc.problem]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ontologies": {acronym: acc.to_dict() for acronym, acc in self.ontologies.items()},
            "date_generated": self.date_generated,
        }
