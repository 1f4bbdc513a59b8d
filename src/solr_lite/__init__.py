"""
solr-lite - A lightweight client for Apache SOLR searches.

This package builds SOLR search requests from structured search parameters
(query, filters, facets, paging, highlighting, spellcheck and grouping) and
parses SOLR's JSON responses back into structured objects.
"""

import logging

__version__ = "1.0.0"

from .config import Config, SolrConfig, get_config
from .exceptions import (
    DuplicateDocumentError,
    SolrConfigurationError,
    SolrConnectionError,
    SolrLiteError,
    SolrQueryError,
)
from .facet_field import FacetField, FacetValue, RangeFacetField
from .filter_query import DiscreteFilterQuery, FilterQuery, RangeFilterQuery
from .response import Response
from .search_params import DEFAULT_PAGE_SIZE, SearchParams
from .solr import Solr

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "SolrConfig",
    "get_config",
    "SolrLiteError",
    "SolrConfigurationError",
    "SolrConnectionError",
    "SolrQueryError",
    "DuplicateDocumentError",
    "FacetField",
    "FacetValue",
    "RangeFacetField",
    "FilterQuery",
    "DiscreteFilterQuery",
    "RangeFilterQuery",
    "Response",
    "SearchParams",
    "DEFAULT_PAGE_SIZE",
    "Solr",
]
