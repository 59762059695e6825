"""
Core components for the audit engine.

Contains:
- Data models (Ontology, Submission, Finding, Report)
- Finding policies and the per-ontology accumulator
- Base class for pipeline checks
- Shared run context
"""
