"""
Ontology Repository Sanity Audit

Maintenance tooling for an ontology repository:
- Sanity report over every managed ontology (submissions, statuses,
  metrics, search and annotator index coverage)
- Reconciliation of recorded upload file paths against files on disk

Usage:
    python -m ontology_audit.main report
    python -m ontology_audit.main reconcile --dry-run
"""

__version__ = "1.0.0"
