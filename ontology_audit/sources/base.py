"""
Contract between the audit engine and the ontology metadata store.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..core.models import ClassPage, Metrics, Ontology, Submission, SubmissionStatus


class EntitySource(ABC):
    """
    Доступ к онтологиям и их сабмишенам.

    Любой вызов может выбросить RemoteUnavailableError.
    """

    @abstractmethod
    async def list_entities(self, only: Optional[Iterable[str]] = None) -> List[Ontology]:
        """Онтологии, при необходимости только с указанными акронимами."""

    @abstractmethod
    async def load_revisions(self, ontology: Ontology) -> List[Submission]:
        """Сабмишены онтологии в порядке хранилища."""

    @abstractmethod
    async def load_metrics(self, submission: Submission) -> Optional[Metrics]:
        """Метрики сабмишена, None если они не считались."""

    @abstractmethod
    async def load_status_catalog(self) -> List[SubmissionStatus]:
        """Все статусы сабмишенов, известные хранилищу."""

    @abstractmethod
    async def count_roots(self, submission: Submission) -> int:
        """Количество корневых классов сабмишена."""

    @abstractmethod
    async def page_classes(self, submission: Submission, page: int, page_size: int) -> ClassPage:
        """Одна страница (нумерация с 1) классов с их prefLabel."""

    async def update_upload_path(self, submission: Submission, path: str) -> None:
        """Указать сабмишену новый путь загруженного файла."""
        raise NotImplementedError(f"{type(self).__name__} is read-only")

    async def close(self) -> None:
        """Закрыть соединения."""
        return None
