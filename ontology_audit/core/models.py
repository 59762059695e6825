"""
Core data models for the audit engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


ERROR_STATUS_PREFIX = "ERROR_"
ANONYMOUS_ID_MARKER = ".well-known/genid"


class FindingCode(Enum):
    """Коды находок по онтологии. Значения совпадают с ключами отчёта."""
    SUMMARY_ONLY = "summaryOnly"
    FLAT = "flat"
    SUMMARY_ONLY_WITH_SUBMISSIONS = "errSummaryOnlyWithSubmissions"
    NO_SUBMISSIONS = "errNoSubmissions"
    NO_READY_SUBMISSION = "errNoReadySubmission"
    NO_LATEST_READY_SUBMISSION = "errNoLatestReadySubmission"
    NO_CLASSES = "errNoClassesLatestReadySubmission"
    NO_ROOTS = "errNoRootsLatestReadySubmission"
    NO_METRICS = "errNoMetricsLatestReadySubmission"
    INCORRECT_METRICS = "errIncorrectMetricsLatestReadySubmission"
    NO_ANNOTATOR = "errNoAnnotator"
    NO_SEARCH = "errNoSearch"
    RUNNING_REPORT = "errRunningReport"
    ERROR_STATUS = "errErrorStatus"
    MISSING_STATUS = "errMissingStatus"

    @property
    def is_error(self) -> bool:
        """Коды ``err*`` помечают онтологию как проблемную."""
        return self.value.startswith("err")


@dataclass(frozen=True)
class SubmissionStatus:
    """Статус, присвоенный сабмишену."""

    id: str

    @property
    def code(self) -> str:
        """Последний сегмент IRI статуса, например ``RDF`` или ``ERROR_RDF``."""
        return self.id.rstrip("/").rsplit("/", 1)[-1]

    @property
    def is_error(self) -> bool:
        return self.code.startswith(ERROR_STATUS_PREFIX)

    @classmethod
    def from_code(cls, code: str, base: str = "http://data.bioontology.org/submission_status/") -> "SubmissionStatus":
        return cls(id=f"{base}{code}")


@dataclass(frozen=True)
class Metrics:
    """Счётчики, посчитанные для одного сабмишена."""

    classes: int = 0
    properties: int = 0
    individuals: int = 0
    max_depth: int = 0


@dataclass(frozen=True)
class Submission:
    """Версия (сабмишен) онтологии."""

    id: str
    submission_id: int
    statuses: Tuple[SubmissionStatus, ...] = ()
    ready: Optional[bool] = None
    metrics: Optional[Metrics] = None
    upload_file_path: Optional[str] = None

    @property
    def status_codes(self) -> List[str]:
        return [st.code for st in self.statuses]

    @property
    def error_statuses(self) -> List[SubmissionStatus]:
        return [st for st in self.statuses if st.is_error]

    def has_status(self, code: str) -> bool:
        return code in self.status_codes


@dataclass(frozen=True)
class Ontology:
    """Проверяемая онтология."""

    id: str
    acronym: str
    summary_only: bool = False
    flat: bool = False


@dataclass(frozen=True)
class ClassRecord:
    """Класс сабмишена в том виде, в каком его видит выборка меток."""

    id: str
    pref_label: Optional[str] = None


@dataclass
class ClassPage:
    """Страница классов и признак наличия следующей страницы."""

    items: List[ClassRecord] = field(default_factory=list)
    has_next: bool = False


@dataclass(frozen=True)
class Finding:
    """Закодированное наблюдение по одной онтологии."""

    code: FindingCode
    payload: Any = None

    @property
    def is_error(self) -> bool:
        return self.code.is_error


@dataclass
class ReconcileSummary:
    """Счётчики исходов сверки путей загруженных файлов."""

    ok: int = 0
    unrecorded: int = 0
    relocated: int = 0
    repointed: int = 0
    missing: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "ok": self.ok,
            "unrecorded": self.unrecorded,
            "relocated": self.relocated,
            "repointed": self.repointed,
            "missing": self.missing,
            "failed": self.failed,
        }
