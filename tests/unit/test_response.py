"""
Unit tests for the response module.
"""

import json

import pytest

from solr_lite.facet_field import FacetField, RangeFacetField
from solr_lite.highlights import Highlights
from solr_lite.response import Response
from solr_lite.search_params import SearchParams


class TestResponseStatus:
    """Test cases for status and error handling."""

    def test_ok(self, mock_solr_response):
        response = Response(mock_solr_response, SearchParams())

        assert response.status == 0
        assert response.ok is True
        assert response.error_msg == ""

    def test_error(self):
        solr_response = {
            "responseHeader": {"status": 400, "QTime": 1},
            "error": {"msg": "undefined field bogus", "code": 400},
        }
        response = Response(solr_response, SearchParams())

        assert response.status == 400
        assert response.ok is False
        assert response.error_msg == "undefined field bogus"

    @pytest.mark.parametrize("status", [200, 204, 299])
    def test_http_success_codes(self, status):
        response = Response({"responseHeader": {"status": status}})

        assert response.ok is True

    def test_missing_header(self):
        response = Response({})

        assert response.status == -1
        assert response.ok is False

    def test_not_a_dict(self):
        """Test that unexpected payloads degrade to empty values."""
        response = Response(["unexpected"], SearchParams())

        assert response.status == -1
        assert response.num_found == 0
        assert response.solr_docs == []
        assert response.facets == []


class TestResponsePagination:
    """Test cases for paging values."""

    def test_pagination(self, mock_solr_response):
        response = Response(mock_solr_response, SearchParams())

        assert response.num_found == 42
        assert response.page_size == 10
        assert response.start == 20
        assert response.end == 30
        assert response.page == 3
        assert response.num_pages == 5

    def test_last_page(self, mock_solr_response):
        mock_solr_response["response"]["start"] = 40
        response = Response(mock_solr_response, SearchParams())

        assert response.end == 42
        assert response.page == 5

    def test_exact_pages(self, mock_solr_response):
        mock_solr_response["response"]["numFound"] = 40
        response = Response(mock_solr_response, SearchParams())

        assert response.num_pages == 4

    def test_zero_page_size(self, mock_solr_response):
        mock_solr_response["responseHeader"]["params"]["rows"] = "0"
        response = Response(mock_solr_response, SearchParams())

        assert response.page_size == 0
        assert response.page == 1
        assert response.num_pages == 0

    def test_missing_values(self):
        response = Response({"responseHeader": {"status": 0}})

        assert response.num_found == 0
        assert response.page_size == 0
        assert response.start == 0
        assert response.end == 0
        assert response.page == 1
        assert response.num_pages == 0

    def test_solr_docs(self, mock_solr_response):
        response = Response(mock_solr_response, SearchParams())

        assert [doc["id"] for doc in response.solr_docs] == ["doc1", "doc2"]
        assert response.items == []


class TestGroupedResponse:
    """Test cases for responses grouped by a field."""

    def test_num_found_sums_matches(self, mock_grouped_response):
        response = Response(mock_grouped_response, SearchParams())

        assert response.is_grouped is True
        assert response.num_found == 8

    def test_start_from_header(self, mock_grouped_response):
        response = Response(mock_grouped_response, SearchParams())

        assert response.start == 2
        assert response.page_size == 2
        assert response.page == 2

    def test_groups_found(self, mock_grouped_response):
        assert Response(mock_grouped_response, SearchParams()).groups_found == 2
        assert Response(mock_grouped_response).groups_found == 0
        assert (
            Response(mock_grouped_response, SearchParams(group_count=None)).groups_found
            == 0
        )

    def test_groups_found_ungrouped(self, mock_solr_response):
        assert Response(mock_solr_response, SearchParams()).groups_found == 0

    def test_group_accessors(self, mock_grouped_response):
        response = Response(mock_grouped_response, SearchParams())

        assert response.solr_groups("category") == ["A", "B"]
        assert response.solr_docs_for_group("category", "A") == [{"id": "a1"}]
        assert response.num_found_for_group("category", "A") == 2
        assert response.num_found_for_group("category", "B") == 1
        assert response.solr_docs == []

    def test_unknown_group(self, mock_grouped_response):
        response = Response(mock_grouped_response, SearchParams())

        assert response.solr_groups("missing") == []
        assert response.solr_docs_for_group("category", "Z") == []
        assert response.num_found_for_group("category", "Z") == 0


class TestResponseFacets:
    """Test cases for facet population."""

    def test_populate_facets(self, mock_solr_response, default_facets):
        """Test that requested facets receive values in SOLR order."""
        params = SearchParams(facets=default_facets)
        response = Response(mock_solr_response, params)

        field_a = response.facets[0]
        assert [(v.text, v.count) for v in field_a.values] == [
            ("books", 5),
            ("articles", 3),
            ("papers", 1),
        ]
        field_b = params.facet_for_field("fieldB")
        assert [(v.text, v.count) for v in field_b.values] == [
            ("John Doe", 4),
            ("Jane Smith", 2),
        ]

    def test_unrequested_facets_ignored(self, mock_solr_response, default_facets):
        params = SearchParams(facets=default_facets)
        response = Response(mock_solr_response, params)

        assert [f.name for f in response.facets] == ["fieldA", "fieldB"]
        assert params.facet_for_field("not_requested") is None

    def test_populate_is_idempotent(self, mock_solr_response, default_facets):
        params = SearchParams(facets=default_facets)
        response = Response(mock_solr_response, params)

        response.populate_facets()

        assert len(params.facet_for_field("fieldA").values) == 3

    def test_no_params(self, mock_solr_response):
        response = Response(mock_solr_response)

        assert response.facets == []

    def test_no_facet_counts(self, default_facets):
        params = SearchParams(facets=default_facets)
        Response({"responseHeader": {"status": 0}}, params)

        assert params.facets[0].values == []

    def test_arrarr_and_map_shapes(self, default_facets):
        """Test the json.nl=arrarr and json.nl=map renderings of facet values."""
        solr_response = {
            "facet_counts": {
                "facet_fields": {
                    "fieldA": [["books", 5], ["articles", 3]],
                    "fieldB": {"John Doe": 4},
                }
            }
        }
        params = SearchParams(facets=default_facets)
        Response(solr_response, params)

        assert [(v.text, v.count) for v in params.facets[0].values] == [
            ("books", 5),
            ("articles", 3),
        ]
        assert [(v.text, v.count) for v in params.facets[1].values] == [
            ("John Doe", 4)
        ]

    def test_facet_fields_as_flat_list(self, default_facets):
        solr_response = {
            "facet_counts": {
                "facet_fields": ["fieldA", ["books", 5], "fieldB", ["x", 1]]
            }
        }
        params = SearchParams(facets=default_facets)
        Response(solr_response, params)

        assert params.facets[0].value_count("books") == 5
        assert params.facets[1].value_count("x") == 1

    def test_odd_length_values(self, default_facets):
        """Test that a trailing value without count is dropped."""
        solr_response = {
            "facet_counts": {"facet_fields": {"fieldA": ["books", 5, "orphan"]}}
        }
        params = SearchParams(facets=default_facets)
        Response(solr_response, params)

        assert [v.text for v in params.facets[0].values] == ["books"]

    def test_non_string_values(self, default_facets):
        solr_response = {
            "facet_counts": {"facet_fields": {"fieldA": [1999, 4, True, "bad"]}}
        }
        params = SearchParams(facets=default_facets)
        Response(solr_response, params)

        assert [(v.text, v.count) for v in params.facets[0].values] == [
            ("1999", 4),
            ("True", 0),
        ]

    def test_range_facet(self, default_facets):
        """Test that range buckets become values with inclusive ends."""
        range_facet = RangeFacetField(
            name="fieldR", title="Field R", range_start=10, range_end=20, range_gap=5
        )
        solr_response = {
            "facet_counts": {
                "facet_fields": {"fieldR": ["10", 7, "15", 2]},
                "facet_ranges": {
                    "fieldR": {
                        "counts": ["10", 7, "15", 2, "bogus", 9],
                        "gap": 5,
                        "start": 10,
                        "end": 20,
                    }
                },
            }
        }
        params = SearchParams(facets=default_facets + [range_facet])
        Response(solr_response, params)

        values = params.facet_for_field("fieldR").values
        assert [(v.text, v.count) for v in values] == [("10 - 14", 7), ("15 - 19", 2)]
        assert values[0].range_start == 10
        assert values[0].range_end == 14

    def test_range_facet_without_ranges(self):
        range_facet = RangeFacetField(
            name="fieldR", title="Field R", range_start=10, range_end=20, range_gap=5
        )
        solr_response = {"facet_counts": {"facet_fields": {"fieldR": ["10", 7]}}}
        params = SearchParams(facets=[range_facet])
        Response(solr_response, params)

        assert range_facet.values == []

    def test_facet_urls_set_by_host(self, mock_solr_response, default_facets):
        params = SearchParams(facets=[FacetField(name="fieldA", title="Field A")])
        response = Response(mock_solr_response, params)

        params.set_facet_remove_url("fieldA", "books", "/search")

        assert response.facets[0].values[0].remove_url == "/search"


class TestResponseViews:
    """Test cases for the explain, spellcheck and highlighting views."""

    def test_views_are_memoized(self, mock_solr_response):
        response = Response(mock_solr_response, SearchParams())

        assert response.explainer() is response.explainer()
        assert response.spellcheck() is response.spellcheck()
        assert response.highlights() is response.highlights()

    def test_explainer(self, mock_solr_response):
        explainer = Response(mock_solr_response).explainer()

        assert explainer.document_ids() == ["doc1", "doc2"]
        assert explainer.for_document("doc1").startswith("\n1.5 = weight")
        assert explainer.score_for("doc1") == 1.5
        assert explainer.score_for("doc2") == 0.75
        assert explainer.for_document("doc3") is None
        assert explainer.score_for("doc3") is None

    def test_explainer_without_debug(self):
        explainer = Response({"responseHeader": {"status": 0}}).explainer()

        assert explainer.document_ids() == []

    def test_highlights(self, mock_solr_response):
        highlights = Response(mock_solr_response).highlights()

        assert highlights.ids() == ["doc1", "doc2"]
        assert highlights.for_id("doc1") == {"title": ["<em>Test</em> Document 1"]}
        assert highlights.for_id("doc2") == {}
        assert highlights.for_id("doc3") is None

    def test_highlights_from_raw_body(self, mock_solr_response):
        highlights = Highlights.from_response(json.dumps(mock_solr_response))

        assert highlights.ids() == ["doc1", "doc2"]


if __name__ == "__main__":
    pytest.main([__file__])
