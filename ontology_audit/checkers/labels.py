"""
Deterministic sampling of class labels for the index consistency checks.
"""

import logging
from typing import FrozenSet, List

from ..core.models import ANONYMOUS_ID_MARKER, ClassRecord, Submission
from ..sources.base import EntitySource

logger = logging.getLogger(__name__)


def is_usable_label(record: ClassRecord, min_length: int, stop_words: FrozenSet[str]) -> bool:
    """Отбросить пустые и короткие метки, анонимные классы и стоп-слова."""
    label = record.pref_label
    if label is None or len(label) < min_length:
        return False
    if ANONYMOUS_ID_MARKER in record.id:
        return False
    return label.upper() not in stop_words


async def sample_labels(
    source: EntitySource,
    submission: Submission,
    page_size: int,
    sample_size: int,
    min_length: int,
    stop_words: FrozenSet[str],
) -> List[str]:
    """
    Собрать до ``sample_size`` пригодных меток, листая классы постранично.

    Листание останавливается, когда выборка заполнена, страница пуста
    или следующей страницы нет.
    """
    labels: List[str] = []
    page = 1

    while True:
        try:
            result = await source.page_classes(submission, page, page_size)
        except Exception as e:
            logger.error(f"{type(e).__name__}: {e} (submission {submission.id}, page {page})")
            raise

        if not result.items:
            break

        for record in result.items:
            if not is_usable_label(record, min_length, stop_words):
                continue
            labels.append(record.pref_label)
            if len(labels) >= sample_size:
                return labels

        if not result.has_next:
            break
        page += 1

    return labels
