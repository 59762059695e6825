"""
Report sinks.

Generates:
- Pretty-printed JSON report, overwritten on every run
- Console summary of problem ontologies by finding code
"""

import json
from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.table import Table

from ..core.errors import ReportWriteError
from ..core.findings import Report


class ReportSink(ABC):
    """Получатель готового отчёта."""

    @abstractmethod
    def write(self, report: Report) -> str:
        """
        Сохранить отчёт.

        Returns:
            Куда был записан отчёт
        """


class JsonReportSink(ReportSink):
    """Пишет отчёт как JSON с отступами по фиксированному пути."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def render(self, report: Report) -> str:
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)

    def write(self, report: Report) -> str:
        content = self.render(report)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ReportWriteError(f"Could not write report to {self.path}: {e}") from e
        return str(self.path)


def print_summary(report: Report, console: Optional[Console] = None):
    """Вывести краткую сводку отчёта в консоль."""
    console = console or Console()

    problems = report.problems()
    by_code = Counter(code.value for acc in problems for code in acc.codes if code.is_error)

    console.print()
    console.print(f"[bold]Ontologies report[/] ({report.date_generated})")
    console.print(f"Ontologies: {len(report.ontologies)}")
    console.print(f"With problems: [red]{len(problems)}[/]")
    console.print(f"Duration: {report.duration_seconds:.2f}s")

    if by_code:
        table = Table(title="Problems by finding")
        table.add_column("Finding", style="cyan")
        table.add_column("Ontologies", style="red", justify="right")
        for code, count in by_code.most_common():
            table.add_row(code, str(count))
        console.print(table)
