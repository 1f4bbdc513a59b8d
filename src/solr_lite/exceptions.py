"""Exceptions raised by solr-lite."""


class SolrLiteError(Exception):
    """Base exception for solr-lite errors."""

    pass


class SolrConfigurationError(SolrLiteError):
    """Raised when the client is created without a usable configuration."""

    pass


class SolrConnectionError(SolrLiteError):
    """Raised when talking to SOLR fails at the HTTP level."""

    pass


class SolrQueryError(SolrLiteError):
    """Raised when SOLR returns something we cannot use."""

    pass


class DuplicateDocumentError(SolrQueryError):
    """Raised when a lookup by id matches more than one document."""

    pass
