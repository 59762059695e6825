"""
Exceptions raised by the audit engine and its collaborators.
"""


class AuditError(Exception):
    """Базовый класс ошибок аудита."""
    pass


class RemoteUnavailableError(AuditError):
    """Triple store или индекс недоступен либо ответил некорректно."""
    pass


class ReportWriteError(AuditError):
    """Не удалось записать отчёт."""
    pass


class LockUnavailableError(AuditError):
    """Блокировку отчёта держит другой запуск."""
    pass
