"""
Reconcile recorded upload file paths with the files on disk.

For every submission the uploaded file is expected in
``<repository>/<acronym>/<submission id>/``. Files recorded elsewhere are
copied there, records pointing at missing files are repointed when the file
is already in place, and anything else is reported.
"""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from .core.context import AuditContext
from .core.models import Ontology, ReconcileSummary, Submission
from .repository import is_within, submission_dir
from .sources.base import EntitySource

logger = logging.getLogger(__name__)


class Outcome(Enum):
    OK = "ok"
    UNRECORDED = "unrecorded"
    RELOCATED = "relocated"
    REPOINTED = "repointed"
    MISSING = "missing"
    FAILED = "failed"


class UploadReconciler:
    """Обходит сабмишены и исправляет их uploadFilePath."""

    def __init__(
        self,
        source: EntitySource,
        repository_folder: Union[str, Path],
        dry_run: bool = False,
        log_all: bool = False,
    ):
        """
        Args:
            source: Хранилище метаданных с записанными путями
            repository_folder: Корень репозитория на диске
            dry_run: Только логировать, что изменилось бы
            log_all: Логировать и сабмишены, которым ничего не нужно
        """
        self.source = source
        self.repository_folder = Path(repository_folder)
        self.dry_run = dry_run
        self.log_all = log_all

    @classmethod
    def from_context(cls, context: AuditContext, log_all: bool = False) -> "UploadReconciler":
        """Сверка по source, репозиторию и флагу dry_run контекста."""
        return cls(
            context.source,
            context.config.repository_folder,
            dry_run=context.dry_run,
            log_all=log_all,
        )

    async def run(self, only: Optional[Iterable[str]] = None) -> ReconcileSummary:
        summary = ReconcileSummary()
        wanted = set(only) if only is not None else None

        ontologies = await self.source.list_entities(wanted)
        if wanted is not None:
            for acronym in sorted(wanted - {ont.acronym for ont in ontologies}):
                logger.warning(f"Ontology {acronym} not found, skipping")
        ontologies.sort(key=lambda ont: ont.acronym.casefold())

        if self.dry_run:
            logger.info("Dry run: no files will be copied and no records updated")

        for i, ontology in enumerate(ontologies, 1):
            logger.info(f"Reconciling {ontology.acronym} - {i} of {len(ontologies)} ontologies.")
            try:
                submissions = await self.source.load_revisions(ontology)
            except Exception as e:
                logger.error(f"{ontology.acronym}: could not load submissions: {e}", exc_info=True)
                summary.failed += 1
                continue

            for submission in sorted(submissions, key=lambda sub: sub.submission_id):
                outcome = await self.reconcile_submission(ontology, submission)
                setattr(summary, outcome.value, getattr(summary, outcome.value) + 1)

        logger.info(f"Finished reconciling upload paths: {summary.to_dict()}")
        return summary

    async def reconcile_submission(self, ontology: Ontology, submission: Submission) -> Outcome:
        label = f"{ontology.acronym}/{submission.submission_id}"
        recorded = submission.upload_file_path

        if not recorded:
            if self.log_all:
                logger.info(f"{label}: no uploadFilePath recorded")
            return Outcome.UNRECORDED

        expected_dir = submission_dir(self.repository_folder, ontology.acronym, submission.submission_id)
        recorded_path = Path(recorded)
        target = expected_dir / recorded_path.name

        try:
            if recorded_path.is_file():
                if is_within(recorded_path, expected_dir):
                    if self.log_all:
                        logger.info(f"{label}: {recorded_path} is in place")
                    return Outcome.OK
                await self._relocate(label, submission, recorded_path, target)
                return Outcome.RELOCATED

            if target.is_file():
                await self._repoint(label, submission, target)
                return Outcome.REPOINTED
        except Exception as e:
            logger.error(f"{label}: failed to reconcile {recorded_path}: {e}", exc_info=True)
            return Outcome.FAILED

        logger.error(f"{label}: uploaded file missing, recorded as {recorded_path}, not in {expected_dir}")
        return Outcome.MISSING

    async def _relocate(self, label: str, submission: Submission, source_path: Path, target: Path) -> None:
        if self.dry_run:
            logger.info(f"{label}: would copy {source_path} to {target}")
            return

        target.parent.mkdir(parents=True, exist_ok=True)
        if not target.exists():
            shutil.copy2(source_path, target)
            logger.info(f"{label}: copied {source_path} to {target}")
        await self.source.update_upload_path(submission, str(target))
        logger.info(f"{label}: uploadFilePath set to {target}")

    async def _repoint(self, label: str, submission: Submission, target: Path) -> None:
        if self.dry_run:
            logger.info(f"{label}: would set uploadFilePath to {target}")
            return

        await self.source.update_upload_path(submission, str(target))
        logger.info(f"{label}: uploadFilePath set to {target}")
