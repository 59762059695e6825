"""
Search and annotator index clients.

Both answer one question for the consistency checks: how many hits does a
piece of text get within one ontology.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..config import AuditConfig
from ..core.errors import RemoteUnavailableError

logger = logging.getLogger(__name__)


_SOLR_SPECIAL = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/])')
_WHITESPACE = re.compile(r"\s+")


def solr_escape(text: str) -> str:
    """Экранировать синтаксис запросов Solr и заменить пробельные последовательности на экранированный пробел."""
    escaped = _SOLR_SPECIAL.sub(r"\\\1", text)
    return _WHITESPACE.sub(r"\\ ", escaped)


class IndexClient(ABC):
    """Индекс, у которого можно спросить число совпадений для текста."""

    name = "index"

    @abstractmethod
    async def query(self, text: str, acronym: str) -> int:
        """Число совпадений ``text`` внутри онтологии ``acronym``."""

    async def close(self) -> None:
        return None


class _HttpIndexClient(IndexClient):

    def __init__(self, base_url: str, timeout_seconds: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            raise RemoteUnavailableError(f"{self.name} returned malformed JSON: {e}") from e


class SolrSearchClient(_HttpIndexClient):
    """Поисковое ядро терминов (Solr, edismax)."""

    name = "search"

    @classmethod
    def from_config(cls, config: AuditConfig) -> "SolrSearchClient":
        return cls(config.search_url, timeout_seconds=config.http_timeout_seconds)

    @staticmethod
    def query_params(acronym: str) -> Dict[str, Any]:
        return {
            "defType": "edismax",
            "stopwords": "true",
            "lowercaseOperators": "true",
            "fl": "*,score",
            "hl": "on",
            "hl.simple.pre": "<em>",
            "hl.simple.post": "</em>",
            "qf": "resource_id^100 prefLabelExact^90 prefLabel^70 synonymExact^50 synonym^10 notation cui semanticType",
            "hl.fl": "resource_id prefLabelExact prefLabel synonymExact synonym notation cui semanticType",
            "fq": f'submissionAcronym:"{acronym}" AND obsolete:false',
            "start": 0,
            "rows": 50,
            "wt": "json",
        }

    async def query(self, text: str, acronym: str) -> int:
        params = self.query_params(acronym)
        params["q"] = solr_escape(text)
        data = await self._get_json(f"{self.base_url}/select", params)
        try:
            return int(data["response"]["numFound"])
        except (KeyError, TypeError) as e:
            raise RemoteUnavailableError(f"Unexpected search response: {data!r}") from e


class AnnotatorClient(_HttpIndexClient):
    """REST endpoint аннотатора; число совпадений равно числу аннотаций."""

    name = "annotator"

    def __init__(self, base_url: str, api_key: str = "", **kwargs):
        super().__init__(base_url, **kwargs)
        self.api_key = api_key

    @classmethod
    def from_config(cls, config: AuditConfig) -> "AnnotatorClient":
        return cls(
            config.annotator_url,
            api_key=config.annotator_api_key,
            timeout_seconds=config.http_timeout_seconds,
        )

    async def query(self, text: str, acronym: str) -> int:
        params = {"text": text, "ontologies": acronym, "display_context": "false"}
        if self.api_key:
            params["apikey"] = self.api_key
        data = await self._get_json(self.base_url, params)
        if not isinstance(data, list):
            raise RemoteUnavailableError(f"Unexpected annotator response: {data!r}")
        return len(data)
