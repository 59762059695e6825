"""
Shared run context and the per-ontology audit subject.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Optional

from ..config import DEFAULT_STOP_WORDS, AuditConfig
from .models import Ontology, Submission, SubmissionStatus

if TYPE_CHECKING:
    from ..clients.index import IndexClient
    from ..sources.base import EntitySource


def latest_submission(submissions: List[Submission]) -> Optional[Submission]:
    """Сабмишен с наибольшим id; при равенстве побеждает более поздний в порядке хранилища."""
    latest = None
    for sub in submissions:
        if latest is None or sub.submission_id >= latest.submission_id:
            latest = sub
    return latest


@dataclass
class AuditContext:
    """
    Общее состояние запуска, доступное всем проверкам и сверке.

    Каталог статусов загружается runner'ом один раз перед первой онтологией.
    Флаг dry_run читает сверка путей: при нём ничего не копируется и не пишется.
    """

    config: AuditConfig
    source: "EntitySource"
    annotator: Optional["IndexClient"] = None
    search: Optional["IndexClient"] = None
    stop_words: FrozenSet[str] = DEFAULT_STOP_WORDS
    status_catalog: List[SubmissionStatus] = field(default_factory=list)
    dry_run: bool = False
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("ontology_audit"))

    def is_ready(self, submission: Submission) -> bool:
        """Нет статусов ошибок и сабмишен готов по флагу либо по полному набору ready-статусов."""
        if submission.error_statuses:
            return False
        if submission.ready is not None:
            return submission.ready
        return all(submission.has_status(code) for code in self.config.ready_status_codes)

    def expected_status_codes(self) -> List[str]:
        """Статусы каталога (кроме ошибок и необязательных), которые должны быть у готового сабмишена."""
        optional = set(self.config.optional_status_codes)
        codes = []
        for status in self.status_catalog:
            if status.is_error or status.code in optional or status.code in codes:
                continue
            codes.append(status.code)
        return codes


@dataclass
class AuditSubject:
    """
    Онтология вместе с загруженными сабмишенами.

    Выборка меток делается один раз на онтологию: результат хранится в
    sampled_labels, а ошибка выборки в sampling_error.
    """

    ontology: Ontology
    submissions: List[Submission] = field(default_factory=list)
    sampled_labels: Optional[List[str]] = None
    sampling_error: Optional[BaseException] = None

    @property
    def acronym(self) -> str:
        return self.ontology.acronym

    @property
    def latest_any(self) -> Optional[Submission]:
        return latest_submission(self.submissions)

    def latest_ready(self, is_ready: Callable[[Submission], bool]) -> Optional[Submission]:
        return latest_submission([sub for sub in self.submissions if is_ready(sub)])

    def submissions_after(self, submission: Submission) -> int:
        """Сколько сабмишенов имеют строго больший id."""
        return sum(1 for sub in self.submissions if sub.submission_id > submission.submission_id)
