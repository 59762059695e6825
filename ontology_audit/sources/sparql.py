"""
EntitySource over a SPARQL 1.1 HTTP endpoint.

Metadata lives under the ``http://data.bioontology.org/metadata/`` vocabulary;
the classes of a submission live in the named graph of the submission IRI.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from ..config import AuditConfig
from ..core.errors import RemoteUnavailableError
from ..core.models import ClassPage, ClassRecord, Metrics, Ontology, Submission, SubmissionStatus
from .base import EntitySource

logger = logging.getLogger(__name__)


META = "http://data.bioontology.org/metadata/"
OWL_CLASS = "http://www.w3.org/2002/07/owl#Class"
OWL_THING = "http://www.w3.org/2002/07/owl#Thing"
RDFS_SUBCLASS_OF = "http://www.w3.org/2000/01/rdf-schema#subClassOf"
PREF_LABEL = f"{META}def/prefLabel"

RESULTS_JSON = "application/sparql-results+json"


def sparql_literal(value: str) -> str:
    """Экранировать строку как SPARQL-литерал."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def _value(row: Dict[str, Any], name: str) -> Optional[str]:
    cell = row.get(name)
    return cell.get("value") if cell else None


def _as_bool(raw: Optional[str]) -> bool:
    return raw is not None and raw.strip().lower() in ("true", "1")


def _as_int(raw: Optional[str]) -> int:
    return int(float(raw)) if raw else 0


class SparqlEntitySource(EntitySource):
    """Хранилище метаданных онтологий через SPARQL query/update endpoint'ы."""

    def __init__(
        self,
        query_url: str,
        update_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.query_url = query_url
        self.update_url = update_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @classmethod
    def from_config(cls, config: AuditConfig) -> "SparqlEntitySource":
        return cls(
            query_url=config.sparql_query_url,
            update_url=config.sparql_update_url,
            timeout_seconds=config.http_timeout_seconds,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    # ==================== Transport ====================

    async def _select(self, query: str) -> List[Dict[str, Any]]:
        try:
            response = await self.client.post(
                self.query_url,
                data={"query": query},
                headers={"Accept": RESULTS_JSON},
            )
            response.raise_for_status()
            return response.json()["results"]["bindings"]
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(f"SPARQL query failed: {e}") from e
        except (ValueError, KeyError) as e:
            raise RemoteUnavailableError(f"Malformed SPARQL response: {e}") from e

    async def _update(self, update: str) -> None:
        if not self.update_url:
            raise RemoteUnavailableError("No SPARQL update endpoint configured")
        try:
            response = await self.client.post(self.update_url, data={"update": update})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(f"SPARQL update failed: {e}") from e

    # ==================== Reads ====================

    async def list_entities(self, only: Optional[Iterable[str]] = None) -> List[Ontology]:
        acronym_filter = ""
        if only is not None:
            acronyms = sorted(set(only))
            if not acronyms:
                return []
            values = ", ".join(sparql_literal(a) for a in acronyms)
            acronym_filter = f"FILTER(STR(?acronym) IN ({values}))"

        rows = await self._select(f"""
            SELECT ?id ?acronym ?summaryOnly ?flat WHERE {{
                ?id a <{META}Ontology> ;
                    <{META}acronym> ?acronym .
                OPTIONAL {{ ?id <{META}summaryOnly> ?summaryOnly }}
                OPTIONAL {{ ?id <{META}flat> ?flat }}
                {acronym_filter}
            }}
        """)

        ontologies: Dict[str, Ontology] = {}
        for row in rows:
            ont_id = _value(row, "id")
            if ont_id in ontologies:
                continue
            ontologies[ont_id] = Ontology(
                id=ont_id,
                acronym=_value(row, "acronym"),
                summary_only=_as_bool(_value(row, "summaryOnly")),
                flat=_as_bool(_value(row, "flat")),
            )
        return list(ontologies.values())

    async def load_revisions(self, ontology: Ontology) -> List[Submission]:
        rows = await self._select(f"""
            SELECT ?id ?submissionId ?status ?uploadFilePath WHERE {{
                ?id a <{META}OntologySubmission> ;
                    <{META}ontology> <{ontology.id}> ;
                    <{META}submissionId> ?submissionId .
                OPTIONAL {{ ?id <{META}submissionStatus> ?status }}
                OPTIONAL {{ ?id <{META}uploadFilePath> ?uploadFilePath }}
            }}
        """)

        # Одна строка на пару (сабмишен, статус), собираем обратно в порядке хранилища
        grouped: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            sub_id = _value(row, "id")
            entry = grouped.setdefault(sub_id, {
                "submission_id": _as_int(_value(row, "submissionId")),
                "statuses": [],
                "upload_file_path": _value(row, "uploadFilePath"),
            })
            status = _value(row, "status")
            if status and status not in entry["statuses"]:
                entry["statuses"].append(status)

        return [
            Submission(
                id=sub_id,
                submission_id=entry["submission_id"],
                statuses=tuple(SubmissionStatus(id=s) for s in entry["statuses"]),
                upload_file_path=entry["upload_file_path"],
            )
            for sub_id, entry in grouped.items()
        ]

    async def load_metrics(self, submission: Submission) -> Optional[Metrics]:
        if submission.metrics is not None:
            return submission.metrics

        rows = await self._select(f"""
            SELECT ?classes ?properties ?individuals ?maxDepth WHERE {{
                <{submission.id}> <{META}metrics> ?m .
                OPTIONAL {{ ?m <{META}classes> ?classes }}
                OPTIONAL {{ ?m <{META}properties> ?properties }}
                OPTIONAL {{ ?m <{META}individuals> ?individuals }}
                OPTIONAL {{ ?m <{META}maxDepth> ?maxDepth }}
            }} LIMIT 1
        """)
        if not rows:
            return None

        row = rows[0]
        return Metrics(
            classes=_as_int(_value(row, "classes")),
            properties=_as_int(_value(row, "properties")),
            individuals=_as_int(_value(row, "individuals")),
            max_depth=_as_int(_value(row, "maxDepth")),
        )

    async def load_status_catalog(self) -> List[SubmissionStatus]:
        rows = await self._select(f"""
            SELECT DISTINCT ?id WHERE {{ ?id a <{META}SubmissionStatus> }}
        """)
        return [SubmissionStatus(id=_value(row, "id")) for row in rows]

    async def count_roots(self, submission: Submission) -> int:
        rows = await self._select(f"""
            SELECT (COUNT(DISTINCT ?c) AS ?n) FROM <{submission.id}> WHERE {{
                ?c a <{OWL_CLASS}> .
                FILTER(!isBlank(?c))
                FILTER NOT EXISTS {{
                    ?c <{RDFS_SUBCLASS_OF}> ?parent .
                    FILTER(?parent != <{OWL_THING}> && !isBlank(?parent))
                }}
            }}
        """)
        return _as_int(_value(rows[0], "n")) if rows else 0

    async def page_classes(self, submission: Submission, page: int, page_size: int) -> ClassPage:
        offset = (page - 1) * page_size
        # Лишняя строка показывает, есть ли следующая страница
        rows = await self._select(f"""
            SELECT ?c (SAMPLE(?l) AS ?label) FROM <{submission.id}> WHERE {{
                ?c a <{OWL_CLASS}> .
                OPTIONAL {{ ?c <{PREF_LABEL}> ?l }}
            }}
            GROUP BY ?c ORDER BY ?c
            LIMIT {page_size + 1} OFFSET {offset}
        """)
        items = [
            ClassRecord(id=_value(row, "c"), pref_label=_value(row, "label"))
            for row in rows[:page_size]
        ]
        return ClassPage(items=items, has_next=len(rows) > page_size)

    # ==================== Writes ====================

    async def update_upload_path(self, submission: Submission, path: str) -> None:
        graph = f"{META}OntologySubmission"
        await self._update(f"""
            WITH <{graph}>
            DELETE {{ <{submission.id}> <{META}uploadFilePath> ?old }}
            INSERT {{ <{submission.id}> <{META}uploadFilePath> {sparql_literal(path)} }}
            WHERE {{ OPTIONAL {{ <{submission.id}> <{META}uploadFilePath> ?old }} }}
        """)
        logger.debug(f"Updated uploadFilePath of {submission.id} to {path}")
