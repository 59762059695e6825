"""
Configuration for the audit tooling.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional


DEFAULT_STOP_WORDS = frozenset("""
A ABOUT ABOVE AFTER AGAIN AGAINST ALL AM AN AND ANY ARE AS AT BE BECAUSE BEEN
BEFORE BEING BELOW BETWEEN BOTH BUT BY CAN DID DO DOES DOING DOWN DURING EACH
FEW FOR FROM FURTHER HAD HAS HAVE HAVING HE HER HERE HERS HIM HIS HOW I IF IN
INTO IS IT ITS JUST ME MORE MOST MY NO NOR NOT NOW OF OFF ON ONCE ONLY OR OTHER
OUR OUT OVER OWN SAME SHE SHOULD SO SOME SUCH THAN THAT THE THEIR THEM THEN
THERE THESE THEY THIS THOSE THROUGH TO TOO UNDER UNTIL UP VERY WAS WE WERE WHAT
WHEN WHERE WHICH WHILE WHO WHOM WHY WILL WITH YOU YOUR
""".split())


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class AuditConfig:
    """Настройки запусков отчёта и сверки."""

    # === Paths ===
    repository_folder: Path = field(
        default_factory=lambda: Path(os.getenv("REPOSITORY_FOLDER", "/srv/ontologies/repository"))
    )
    report_path: Path = field(
        default_factory=lambda: Path(os.getenv("REPORT_PATH", "reports/ontologies_report.json"))
    )
    stop_words_file: Optional[Path] = field(
        default_factory=lambda: Path(os.environ["STOP_WORDS_FILE"]) if os.getenv("STOP_WORDS_FILE") else None
    )

    # === Triple store ===
    sparql_query_url: str = field(
        default_factory=lambda: os.getenv("SPARQL_QUERY_URL", "http://localhost:8081/sparql/")
    )
    sparql_update_url: str = field(
        default_factory=lambda: os.getenv("SPARQL_UPDATE_URL", "http://localhost:8081/update/")
    )

    # === Indexes ===
    search_url: str = field(
        default_factory=lambda: os.getenv("SEARCH_URL", "http://localhost:8983/solr/term_search_core1")
    )
    annotator_url: str = field(
        default_factory=lambda: os.getenv("ANNOTATOR_URL", "http://localhost:8080/annotator")
    )
    annotator_api_key: str = field(default_factory=lambda: os.getenv("ANNOTATOR_API_KEY", ""))

    # === Redis (run lock) ===
    redis_url: str = field(default_factory=lambda: os.getenv("REDIS_URL", ""))
    lock_name: str = "ontology_audit:report:lock"
    lock_timeout_seconds: float = field(default_factory=lambda: _env_float("LOCK_TIMEOUT_SECONDS", 6 * 3600))

    # === Execution Settings ===
    http_timeout_seconds: float = field(default_factory=lambda: _env_float("HTTP_TIMEOUT_SECONDS", 30.0))
    check_timeout_seconds: float = field(default_factory=lambda: _env_float("CHECK_TIMEOUT_SECONDS", 60.0))
    max_parallel_entities: int = field(default_factory=lambda: _env_int("MAX_PARALLEL_ENTITIES", 1))

    # === Check Settings ===
    label_page_size: int = field(default_factory=lambda: _env_int("LABEL_PAGE_SIZE", 1000))
    label_sample_size: int = field(default_factory=lambda: _env_int("LABEL_SAMPLE_SIZE", 10))
    min_label_length: int = 3
    min_metrics_total: int = field(default_factory=lambda: _env_int("MIN_METRICS_TOTAL", 10))
    ready_status_codes: List[str] = field(
        default_factory=lambda: _env_list("READY_STATUS_CODES", ["UPLOADED", "RDF", "RDF_LABELS"])
    )
    optional_status_codes: List[str] = field(
        default_factory=lambda: _env_list("OPTIONAL_STATUS_CODES", ["DIFF", "ARCHIVED", "RDF_LABELS"])
    )

    def __post_init__(self):
        """Проверить конфигурацию."""
        self.repository_folder = Path(self.repository_folder)
        self.report_path = Path(self.report_path)
        if self.stop_words_file is not None:
            self.stop_words_file = Path(self.stop_words_file)

        if self.max_parallel_entities < 1:
            raise ValueError("max_parallel_entities must be at least 1")
        if self.label_sample_size < 1 or self.label_page_size < 1:
            raise ValueError("label_sample_size and label_page_size must be positive")

    def load_stop_words(self) -> FrozenSet[str]:
        """Стоп-слова по умолчанию плюс файл из конфигурации (одно слово на строку)."""
        if self.stop_words_file is None:
            return DEFAULT_STOP_WORDS
        extra = {
            line.strip().upper()
            for line in self.stop_words_file.read_text(encoding="utf-8").splitlines()
            if line.strip()
        }
        return DEFAULT_STOP_WORDS | extra

    def has_redis_url(self) -> bool:
        """Проверить, задан ли redis URL для блокировки запуска."""
        return bool(self.redis_url)


def get_default_config() -> AuditConfig:
    """Получить конфигурацию из окружения."""
    return AuditConfig()
