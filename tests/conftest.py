"""
Pytest configuration and fixtures.

In-memory заглушки хранилища метаданных и индексов: triple store, Solr
и аннотатор для тестов не нужны.

Использование:
    pytest tests/ -v
"""

from typing import Dict, Iterable, List, Optional

import pytest

from ontology_audit.config import AuditConfig
from ontology_audit.core.context import AuditContext, AuditSubject
from ontology_audit.core.errors import RemoteUnavailableError
from ontology_audit.core.models import (
    ClassPage,
    ClassRecord,
    Metrics,
    Ontology,
    Submission,
    SubmissionStatus,
)
from ontology_audit.clients.index import IndexClient
from ontology_audit.sources.base import EntitySource


READY_CODES = ["UPLOADED", "RDF", "RDF_LABELS"]
COMPLETE_CODES = ["UPLOADED", "RDF", "RDF_LABELS", "OBSOLETE", "METRICS", "INDEXED", "ANNOTATOR"]
CATALOG_CODES = COMPLETE_CODES + ["DIFF", "ARCHIVED", "ERROR_RDF", "ERROR_METRICS", "ERROR_INDEXED"]


# ═══════════════════════════════════════════════════════
# BUILDERS
# ═══════════════════════════════════════════════════════

def statuses(*codes: str):
    return tuple(SubmissionStatus.from_code(code) for code in codes)


def make_ontology(acronym: str, **kwargs) -> Ontology:
    return Ontology(id=f"http://data.bioontology.org/ontologies/{acronym}", acronym=acronym, **kwargs)


def make_submission(acronym: str, submission_id: int, codes=COMPLETE_CODES, **kwargs) -> Submission:
    return Submission(
        id=f"http://data.bioontology.org/ontologies/{acronym}/submissions/{submission_id}",
        submission_id=submission_id,
        statuses=statuses(*codes),
        **kwargs,
    )


def make_classes(acronym: str, labels: Iterable[Optional[str]]) -> List[ClassRecord]:
    return [
        ClassRecord(id=f"http://purl.example.org/{acronym}/class_{i}", pref_label=label)
        for i, label in enumerate(labels)
    ]


# ═══════════════════════════════════════════════════════
# FAKES
# ═══════════════════════════════════════════════════════

class FakeEntitySource(EntitySource):
    """EntitySource на словарях."""

    def __init__(
        self,
        ontologies: Iterable[Ontology] = (),
        submissions: Optional[Dict[str, List[Submission]]] = None,
        roots: Optional[Dict[str, int]] = None,
        classes: Optional[Dict[str, List[ClassRecord]]] = None,
        catalog: Iterable[str] = CATALOG_CODES,
    ):
        self.ontologies = list(ontologies)
        self.submissions = submissions or {}
        self.roots = roots or {}
        self.classes = classes or {}
        self.catalog = list(catalog)
        self.errors: Dict[str, Exception] = {}
        self.pages_requested: List[int] = []
        self.updates: List[tuple] = []

    def fail(self, method: str, error: Exception) -> None:
        self.errors[method] = error

    def _maybe_fail(self, method: str) -> None:
        if method in self.errors:
            raise self.errors[method]

    async def list_entities(self, only=None):
        self._maybe_fail("list_entities")
        if only is None:
            return list(self.ontologies)
        return [ont for ont in self.ontologies if ont.acronym in set(only)]

    async def load_revisions(self, ontology):
        self._maybe_fail("load_revisions")
        return list(self.submissions.get(ontology.acronym, []))

    async def load_metrics(self, submission):
        self._maybe_fail("load_metrics")
        return submission.metrics

    async def load_status_catalog(self):
        return [SubmissionStatus.from_code(code) for code in self.catalog]

    async def count_roots(self, submission):
        self._maybe_fail("count_roots")
        return self.roots.get(submission.id, 1)

    async def page_classes(self, submission, page, page_size):
        self.pages_requested.append(page)
        self._maybe_fail("page_classes")
        records = self.classes.get(submission.id, [])
        start = (page - 1) * page_size
        items = records[start:start + page_size]
        return ClassPage(items=items, has_next=start + page_size < len(records))

    async def update_upload_path(self, submission, path):
        self._maybe_fail("update_upload_path")
        self.updates.append((submission.id, path))


class FakeIndexClient(IndexClient):
    """Индекс, отвечающий фиксированным числом совпадений (или числом меток)."""

    def __init__(self, hits: Optional[int] = None, error: Optional[Exception] = None, name: str = "fake"):
        self.hits = hits
        self.error = error
        self.name = name
        self.queries: List[tuple] = []

    async def query(self, text, acronym):
        self.queries.append((text, acronym))
        if self.error is not None:
            raise self.error
        if self.hits is None:
            return len(text.split(" | "))
        return self.hits


# ═══════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════

@pytest.fixture
def config(tmp_path):
    """Тестовая конфигурация во временной директории."""
    return AuditConfig(
        repository_folder=tmp_path / "repository",
        report_path=tmp_path / "reports" / "ontologies_report.json",
        stop_words_file=None,
        redis_url="",
        check_timeout_seconds=5.0,
        max_parallel_entities=1,
        label_page_size=1000,
        label_sample_size=10,
        min_metrics_total=10,
        ready_status_codes=list(READY_CODES),
        optional_status_codes=["DIFF", "ARCHIVED", "RDF_LABELS"],
    )


@pytest.fixture
def source():
    return FakeEntitySource()


@pytest.fixture
def context(config, source):
    """Контекст с fake source и двумя исправными индексами."""
    ctx = AuditContext(
        config=config,
        source=source,
        annotator=FakeIndexClient(name="annotator"),
        search=FakeIndexClient(name="search"),
    )
    ctx.status_catalog = [SubmissionStatus.from_code(code) for code in CATALOG_CODES]
    return ctx


def subject_for(ontology: Ontology, *submissions: Submission) -> AuditSubject:
    return AuditSubject(ontology=ontology, submissions=list(submissions))


def healthy_metrics() -> Metrics:
    return Metrics(classes=20, properties=5)
