"""
Submission lifecycle checks.

Checks:
- SummaryOnlyCheck - summary-only ontologies are reported and skipped
- SubmissionsExistCheck - at least one submission exists
- ReadySubmissionCheck - at least one submission is ready
- LatestSubmissionCheck - the latest submission is the ready one
"""

from ..core.base_checker import CheckResult, PreconditionCheck
from ..core.context import AuditContext, AuditSubject
from ..core.models import Finding, FindingCode
from ..repository import latest_log_file


class SummaryOnlyCheck(PreconditionCheck):
    """У summary-only онтологий не должно быть сабмишенов."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        if not subject.ontology.summary_only:
            return CheckResult.proceed()

        if subject.submissions:
            return CheckResult.abort(Finding(FindingCode.SUMMARY_ONLY_WITH_SUBMISSIONS))
        return CheckResult.abort(Finding(FindingCode.SUMMARY_ONLY))


class SubmissionsExistCheck(PreconditionCheck):
    """Без сабмишенов проверять больше нечего."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        latest_any = subject.latest_any
        if latest_any is None:
            return CheckResult.abort(Finding(FindingCode.NO_SUBMISSIONS))

        log_file_path = latest_log_file(
            context.config.repository_folder, subject.acronym, latest_any.submission_id
        )
        return CheckResult.proceed(log_file_path=log_file_path)


class ReadySubmissionCheck(PreconditionCheck):
    """
    Без готового сабмишена остальные проверки не имеют смысла.

    Статусы ошибок последнего сабмишена объясняют, почему он не готов.
    """

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        if subject.latest_ready(context.is_ready) is not None:
            return CheckResult.proceed()

        findings = [Finding(FindingCode.NO_READY_SUBMISSION)]
        latest_any = subject.latest_any
        if latest_any is not None:
            findings.extend(
                Finding(FindingCode.ERROR_STATUS, status.code)
                for status in latest_any.error_statuses
            )
        return CheckResult.abort(*findings)


class LatestSubmissionCheck(PreconditionCheck):
    """Насколько последний сабмишен опережает последний готовый."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        latest_any = subject.latest_any
        latest_ready = subject.latest_ready(context.is_ready)
        if latest_any is None or latest_ready is None:
            return CheckResult.proceed()

        if latest_any.submission_id == latest_ready.submission_id:
            return CheckResult.proceed()

        behind = subject.submissions_after(latest_ready)
        return CheckResult.proceed(Finding(FindingCode.NO_LATEST_READY_SUBMISSION, behind))
