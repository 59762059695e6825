"""
Structural checks on the latest ready submission.

Checks:
- RootsCheck - the class hierarchy has roots (unless the ontology is flat)
- MetricsCheck - metrics exist and look sane
"""

from typing import List

from ..core.base_checker import CheckResult, GuardedCheck
from ..core.context import AuditContext, AuditSubject
from ..core.models import Finding, FindingCode


class RootsCheck(GuardedCheck):
    """Flat-онтологии отмечаются, остальным нужны корневые классы."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        if subject.ontology.flat:
            return CheckResult.proceed(Finding(FindingCode.FLAT))

        submission = subject.latest_ready(context.is_ready)
        if submission is None:
            return CheckResult.proceed()

        roots = await context.source.count_roots(submission)
        if roots > 0:
            return CheckResult.proceed()
        return CheckResult.proceed(Finding(FindingCode.NO_ROOTS))

    def recovery_findings(self) -> List[Finding]:
        # Корни, которые не удалось загрузить, считаются отсутствующими
        return [Finding(FindingCode.NO_ROOTS)]


class MetricsCheck(GuardedCheck):
    """Метрики должны быть посчитаны и содержать достаточно классов и свойств."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        submission = subject.latest_ready(context.is_ready)
        if submission is None:
            return CheckResult.proceed()

        metrics = await context.source.load_metrics(submission)
        if metrics is None:
            return CheckResult.proceed(Finding(FindingCode.NO_METRICS))

        if metrics.classes + metrics.properties < context.config.min_metrics_total:
            return CheckResult.proceed(Finding(FindingCode.INCORRECT_METRICS))
        return CheckResult.proceed()
