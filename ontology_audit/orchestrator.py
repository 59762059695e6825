"""
Report runner: drives the check pipeline over every ontology.

Features:
- Optional acronym filter, unknown acronyms reported as warnings
- Case-insensitive ordering by acronym
- Bounded concurrency across ontologies (sequential by default)
- Per-ontology timing and progress logging
- Failures contained to the ontology they happened in
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .checkers import default_pipeline
from .core.base_checker import BaseCheck
from .core.context import AuditContext, AuditSubject
from .core.findings import FindingAccumulator, Report
from .core.models import FindingCode, Ontology
from .reports.generator import ReportSink


logger = logging.getLogger(__name__)


class ReportRunner:
    """Запускает sanity-отчёт по онтологиям EntitySource."""

    def __init__(
        self,
        context: AuditContext,
        checks: Optional[Sequence[BaseCheck]] = None,
        sink: Optional[ReportSink] = None,
    ):
        """
        Args:
            context: Общий контекст запуска (конфиг, source, клиенты индексов)
            checks: Пайплайн в порядке запуска (по умолчанию default_pipeline())
            sink: Куда отдать готовый отчёт (None = только вернуть)
        """
        self.context = context
        self.checks: List[BaseCheck] = list(checks) if checks is not None else default_pipeline()
        self.sink = sink

    async def run(self, only: Optional[Iterable[str]] = None) -> Report:
        """
        Проверить все онтологии и передать отчёт в sink.

        Args:
            only: Ограничить запуск этими акронимами

        Returns:
            Готовый отчёт
        """
        logger.info("Running ontologies report...")
        start_time = time.perf_counter()

        ontologies = await self._select_ontologies(only)
        self.context.status_catalog = await self.context.source.load_status_catalog()

        total = len(ontologies)
        semaphore = asyncio.Semaphore(self.context.config.max_parallel_entities)

        async def audit_bounded(position: int, ontology: Ontology) -> FindingAccumulator:
            async with semaphore:
                return await self.audit_ontology(ontology, position, total)

        accumulators = await asyncio.gather(
            *(audit_bounded(i, ontology) for i, ontology in enumerate(ontologies, 1))
        )

        report = Report(
            ontologies={acc.acronym: acc for acc in accumulators},
            generated_at=datetime.now(),
            duration_seconds=time.perf_counter() - start_time,
        )

        if self.sink is not None:
            path = self.sink.write(report)
            logger.info(f"Finished generating ontologies report. Wrote report data to {path}.")
        else:
            logger.info("Finished generating ontologies report.")

        return report

    async def _select_ontologies(self, only: Optional[Iterable[str]]) -> List[Ontology]:
        wanted = None
        if only is not None:
            wanted = {acronym.strip() for acronym in only if acronym and acronym.strip()}

        ontologies = await self.context.source.list_entities(wanted)

        if wanted is not None:
            ontologies = [ont for ont in ontologies if ont.acronym in wanted]
            for acronym in sorted(wanted - {ont.acronym for ont in ontologies}):
                logger.warning(f"Ontology {acronym} not found, skipping")

        # Одна запись на акроним в отчёте
        unique = {}
        for ontology in ontologies:
            if ontology.acronym in unique:
                logger.warning(f"Duplicate ontology acronym {ontology.acronym} ({ontology.id}), ignoring")
                continue
            unique[ontology.acronym] = ontology

        return sorted(unique.values(), key=lambda ont: ont.acronym.casefold())

    async def audit_ontology(self, ontology: Ontology, position: int = 1, total: int = 1) -> FindingAccumulator:
        """Прогнать пайплайн для одной онтологии; обычные ошибки не выбрасывает."""
        accumulator = FindingAccumulator(ontology.acronym)
        logger.info(f"Processing report for {ontology.acronym} - {position} of {total} ontologies.")
        start_time = time.perf_counter()

        try:
            submissions = await self.context.source.load_revisions(ontology)
        except Exception as e:
            logger.error(f"Could not load submissions of {ontology.acronym}: {e}", exc_info=True)
            accumulator.record(FindingCode.RUNNING_REPORT, ("load_revisions", type(e).__name__, str(e)))
        else:
            await self.run_pipeline(AuditSubject(ontology=ontology, submissions=submissions), accumulator)

        duration = time.perf_counter() - start_time
        logger.info(f"Finished report for {ontology.acronym} in {duration:.3f} sec.")
        return accumulator

    async def run_pipeline(self, subject: AuditSubject, accumulator: FindingAccumulator) -> None:
        """Запускать проверки по порядку, пока одна из них не остановит пайплайн."""
        for check in self.checks:
            try:
                result = await check.run(subject, self.context)
            except Exception as e:
                logger.error(f"{check.name} failed for {subject.acronym}: {e}", exc_info=True)
                accumulator.record(FindingCode.RUNNING_REPORT, (check.name, type(e).__name__, str(e)))
                return

            accumulator.extend(result.findings)
            if result.log_file_path:
                accumulator.log_file_path = result.log_file_path
            if result.stop:
                return
