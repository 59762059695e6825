"""
Search and annotator index consistency checks.

A sample of class labels from the latest ready submission is sent to each
index; fewer hits than labels means the index is missing content.
"""

import asyncio
from typing import List, Optional

from ..clients.index import IndexClient
from ..core.base_checker import CheckResult, GuardedCheck
from ..core.context import AuditContext, AuditSubject
from ..core.models import Finding, FindingCode
from .labels import sample_labels

LABEL_SEPARATOR = " | "


async def subject_labels(subject: AuditSubject, context: AuditContext) -> List[str]:
    """
    Выборка меток онтологии, загружается один раз.

    Ошибка (и отмена по таймауту) запоминается в subject.sampling_error
    и пробрасывается дальше.
    """
    if subject.sampled_labels is None:
        submission = subject.latest_ready(context.is_ready)
        if submission is None:
            return []
        config = context.config
        try:
            subject.sampled_labels = await sample_labels(
                context.source,
                submission,
                page_size=config.label_page_size,
                sample_size=config.label_sample_size,
                min_length=config.min_label_length,
                stop_words=context.stop_words,
            )
        except (Exception, asyncio.CancelledError) as e:
            subject.sampling_error = e
            raise
    return subject.sampled_labels


class ClassLabelsCheck(GuardedCheck):
    """У последнего готового сабмишена должны быть пригодные классы."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        if subject.latest_ready(context.is_ready) is None:
            return CheckResult.proceed()

        labels = await subject_labels(subject, context)
        if not labels:
            return CheckResult.proceed(Finding(FindingCode.NO_CLASSES))
        return CheckResult.proceed()


class IndexConsistencyCheck(GuardedCheck):
    """Базовый класс проверок, отправляющих выборку меток в один индекс."""

    code: FindingCode

    def client(self, context: AuditContext) -> Optional[IndexClient]:
        raise NotImplementedError

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        client = self.client(context)
        if client is None:
            self.logger.debug(f"{self.name}: no index client configured, skipping")
            return CheckResult.proceed()

        # Ошибка выборки уже записана ClassLabelsCheck
        if subject.sampling_error is not None:
            self.logger.debug(f"{self.name}: label sampling failed for {subject.acronym}, skipping")
            return CheckResult.proceed()

        labels = await subject_labels(subject, context)
        if not labels:
            return CheckResult.proceed()

        text = LABEL_SEPARATOR.join(labels)
        hits = await client.query(text, subject.acronym)
        if hits < len(labels):
            return CheckResult.proceed(Finding(self.code, (hits, text)))
        return CheckResult.proceed()


class AnnotatorConsistencyCheck(IndexConsistencyCheck):
    code = FindingCode.NO_ANNOTATOR

    def client(self, context: AuditContext) -> Optional[IndexClient]:
        return context.annotator


class SearchConsistencyCheck(IndexConsistencyCheck):
    code = FindingCode.NO_SEARCH

    def client(self, context: AuditContext) -> Optional[IndexClient]:
        return context.search
