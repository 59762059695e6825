"""
Entity sources.

Contains:
- EntitySource - read/write contract over the ontology metadata store
- SparqlEntitySource - implementation over a SPARQL 1.1 HTTP endpoint
"""

from .base import EntitySource
from .sparql import SparqlEntitySource

__all__ = ["EntitySource", "SparqlEntitySource"]
