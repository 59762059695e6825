"""
Checks run against every ontology, in pipeline order.

Contains:
- lifecycle - summary-only, submissions, readiness, staleness
- status - status completeness
- structure - roots and metrics
- index - class labels, annotator and search coverage
"""

from typing import List

from ..core.base_checker import BaseCheck
from .index import AnnotatorConsistencyCheck, ClassLabelsCheck, SearchConsistencyCheck
from .lifecycle import (
    LatestSubmissionCheck,
    ReadySubmissionCheck,
    SubmissionsExistCheck,
    SummaryOnlyCheck,
)
from .status import SubmissionStatusCheck
from .structure import MetricsCheck, RootsCheck


def default_pipeline() -> List[BaseCheck]:
    """Проверки sanity-отчёта в порядке запуска."""
    return [
        SummaryOnlyCheck(),
        SubmissionsExistCheck(),
        ReadySubmissionCheck(),
        LatestSubmissionCheck(),
        SubmissionStatusCheck(),
        RootsCheck(),
        MetricsCheck(),
        ClassLabelsCheck(),
        AnnotatorConsistencyCheck(),
        SearchConsistencyCheck(),
    ]
