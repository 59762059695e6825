"""
Clients for the external indexes queried by the consistency checks.
"""

from .index import AnnotatorClient, IndexClient, SolrSearchClient, solr_escape

__all__ = ["AnnotatorClient", "IndexClient", "SolrSearchClient", "solr_escape"]
