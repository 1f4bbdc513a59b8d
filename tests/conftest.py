"""
Pytest configuration and fixtures for solr-lite tests.
"""

import os
import tempfile
from pathlib import Path

import pytest

from solr_lite.config import Config, LoggingConfig, SolrConfig
from solr_lite.facet_field import FacetField, RangeFacetField


@pytest.fixture
def temp_env_file():
    """Create a temporary .env file for testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".env", delete=False) as f:
        env_content = """
SOLR_BASE_URL=http://localhost:8983/solr
SOLR_COLLECTION=test_collection
SOLR_DEF_TYPE=edismax
SOLR_FACET_LIMIT=15
SOLR_BATCH_SIZE=10
LOG_LEVEL=INFO
        """
        f.write(env_content.strip())
        temp_file = f.name

    yield Path(temp_file)

    # Cleanup
    os.unlink(temp_file)


@pytest.fixture
def test_config():
    """Provide a test configuration."""
    solr_config = SolrConfig(
        base_url="http://localhost:8983/solr",
        collection="test_collection",
    )
    return Config(solr=solr_config, logging=LoggingConfig(log_level="INFO"))


@pytest.fixture
def default_facets():
    """Two plain facets, as a typical search page would request."""
    return [
        FacetField(name="fieldA", title="Field A"),
        FacetField(name="fieldB", title="Field B"),
    ]


@pytest.fixture
def range_facet():
    return RangeFacetField(
        name="year", title="Year", range_start=1800, range_end=2000, range_gap=5
    )


@pytest.fixture
def mock_solr_response():
    """SOLR /select response data for an ungrouped search."""
    return {
        "responseHeader": {
            "status": 0,
            "QTime": 15,
            "params": {"q": "test query", "wt": "json", "rows": "10", "start": "20"},
        },
        "response": {
            "numFound": 42,
            "start": 20,
            "docs": [
                {
                    "id": "doc1",
                    "title": ["Test Document 1"],
                    "category": ["books"],
                    "author": ["John Doe"],
                },
                {
                    "id": "doc2",
                    "title": ["Test Document 2"],
                    "category": ["articles"],
                    "author": ["Jane Smith"],
                },
            ],
        },
        "facet_counts": {
            "facet_queries": {},
            "facet_fields": {
                "fieldA": ["books", 5, "articles", 3, "papers", 1],
                "fieldB": ["John Doe", 4, "Jane Smith", 2],
                "not_requested": ["x", 1],
            },
            "facet_ranges": {},
        },
        "highlighting": {
            "doc1": {
                "title": ["<em>Test</em> Document 1"],
            },
            "doc2": {},
        },
        "spellcheck": {
            "suggestions": [
                "tset",
                {"numFound": 1, "startOffset": 0, "endOffset": 4, "suggestion": ["test"]},
            ],
            "correctlySpelled": False,
            "collations": ["collation", {"collationQuery": "test", "hits": 3}],
        },
        "debug": {
            "explain": {
                "doc1": "\n1.5 = weight(title:test in 0) [SchemaSimilarity], result of:\n",
                "doc2": "\n0.75 = weight(title:test in 1) [SchemaSimilarity], result of:\n",
            }
        },
    }


@pytest.fixture
def mock_grouped_response():
    """SOLR /select response data for a search grouped by ``category``."""
    return {
        "responseHeader": {
            "status": 0,
            "QTime": 3,
            "params": {"rows": "2", "start": "2", "group": "true"},
        },
        "grouped": {
            "category": {
                "matches": 3,
                "groups": [
                    {
                        "groupValue": "A",
                        "doclist": {"numFound": 2, "start": 0, "docs": [{"id": "a1"}]},
                    },
                    {
                        "groupValue": "B",
                        "doclist": {"numFound": 1, "start": 0, "docs": [{"id": "b1"}]},
                    },
                ],
            },
            "author": {
                "matches": 5,
                "groups": [],
            },
        },
        "facets": {"count": 8, "group_count": 2},
    }


@pytest.fixture(autouse=True)
def clean_env_vars():
    """Clean up environment variables before and after each test."""
    # Store original environment variables
    original_env = {}
    env_vars_to_clean = [
        "SOLR_BASE_URL",
        "SOLR_COLLECTION",
        "SOLR_DEF_TYPE",
        "SOLR_FACET_LIMIT",
        "SOLR_BATCH_SIZE",
        "LOG_LEVEL",
    ]

    for var in env_vars_to_clean:
        if var in os.environ:
            original_env[var] = os.environ[var]
        os.environ.pop(var, None)

    yield

    # Restore original environment variables
    for var in env_vars_to_clean:
        os.environ.pop(var, None)

    for var, value in original_env.items():
        os.environ[var] = value
