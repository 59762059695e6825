"""
Base classes for pipeline checks.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from .context import AuditContext, AuditSubject
from .models import Finding, FindingCode

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Находки одной проверки и признак продолжения пайплайна."""

    findings: List[Finding] = field(default_factory=list)
    stop: bool = False
    log_file_path: Optional[str] = None

    @classmethod
    def proceed(cls, *findings: Finding, log_file_path: Optional[str] = None) -> "CheckResult":
        return cls(findings=list(findings), stop=False, log_file_path=log_file_path)

    @classmethod
    def abort(cls, *findings: Finding) -> "CheckResult":
        return cls(findings=list(findings), stop=True)


class BaseCheck(ABC):
    """
    Базовый класс для всех проверок пайплайна.

    Предоставляет:
    - Шаблон метода run()
    - Timeout и error handling для guarded-проверок
    - Логирование
    """

    # Guarded-проверки сами превращают свои ошибки в находку errRunningReport
    guarded = True

    def __init__(self, name: Optional[str] = None):
        self.name = name or type(self).__name__
        self.logger = logging.getLogger(f"ontology_audit.{self.name}")

    async def run(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        """
        Запустить проверку для одной онтологии.

        Returns:
            CheckResult с найденными находками
        """
        if not self.guarded:
            return await self._check(subject, context)

        timeout = context.config.check_timeout_seconds
        start_time = time.perf_counter()

        try:
            result = await asyncio.wait_for(self._check(subject, context), timeout=timeout)
        except asyncio.TimeoutError:
            self.logger.error(f"{self.name} timed out for {subject.acronym} after {timeout}s")
            return CheckResult.proceed(*self.recovery_findings(), self.failure("TimeoutError", f"timed out after {timeout}s"))
        except Exception as e:
            self.logger.error(f"{self.name} failed for {subject.acronym}: {e}", exc_info=True)
            return CheckResult.proceed(*self.recovery_findings(), self.failure(type(e).__name__, str(e)))

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.debug(
            f"{self.name} on {subject.acronym}: {len(result.findings)} findings, duration={duration_ms:.2f}ms"
        )
        return result

    @abstractmethod
    async def _check(self, subject: AuditSubject, context: AuditContext) -> CheckResult:
        """Выполнить проверку (реализуется в подклассах)."""

    def recovery_findings(self) -> List[Finding]:
        """Находки, которые записываются вместе с errRunningReport при падении проверки."""
        return []

    def failure(self, error_class: str, message: str) -> Finding:
        return Finding(FindingCode.RUNNING_REPORT, (self.name, error_class, message))


class PreconditionCheck(BaseCheck):
    """Проверки, которые могут остановить пайплайн; их ошибки доходят до runner'а."""

    guarded = False


class GuardedCheck(BaseCheck):
    """Нефатальные проверки: ошибка записывается, пайплайн продолжается."""

    guarded = True
