"""
Status completeness of the latest ready submission.

Error statuses are reported by ReadySubmissionCheck: a submission carrying
one is never ready, so only missing statuses are left to check here.
"""

from ..core.base_checker import CheckResult, PreconditionCheck
from ..core.context import AuditContext, AuditSubject
from ..core.models import Finding, FindingCode


class SubmissionStatusCheck(PreconditionCheck):
    """Ожидаемые статусы, которые так и не были выставлены."""

    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        submission = subject.latest_ready(context.is_ready)
        if submission is None:
            return CheckResult.proceed()

        return CheckResult.proceed(*(
            Finding(FindingCode.MISSING_STATUS, code)
            for code in context.expected_status_codes()
            if not submission.has_status(code)
        ))
