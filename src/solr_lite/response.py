"""
Read-only view over a SOLR JSON response.

A ``Response`` wraps the decoded JSON returned by SOLR together with the
``SearchParams`` that produced it. Accessors never raise on unexpected
payloads, they degrade to zero/empty values instead.

Constructing a ``Response`` populates the ``values`` of every ``FacetField``
in the search parameters. This is the only place where solr-lite mutates
objects it does not own, so a list of facets must not be shared by searches
running at the same time.
"""

import logging
from typing import Any, Dict, List, Optional

from .explainer import Explainer
from .facet_field import FacetField
from .highlights import Highlights
from .payload import as_int, dig, dig_dict, dig_int, dig_list, named_pairs, to_number
from .search_params import SearchParams
from .spellcheck import Spellcheck

logger = logging.getLogger(__name__)


class Response:
    """The result of a SOLR request."""

    def __init__(
        self, solr_response: Dict[str, Any], params: Optional[SearchParams] = None
    ):
        """
        Wrap a SOLR response and populate the requested facets.

        Args:
            solr_response: The SOLR HTTP response decoded from JSON.
            params: The search parameters used for the request. None for
                responses not tied to a search (get by id, updates, deletes).
        """
        self.solr_response = solr_response if isinstance(solr_response, dict) else {}
        self.params = params
        # Can be set by the host to a custom representation of solr_docs
        self.items: List[Any] = []
        self._explainer: Optional[Explainer] = None
        self._spellcheck: Optional[Spellcheck] = None
        self._highlights: Optional[Highlights] = None
        self._facets_populated = False
        self.populate_facets()

    @property
    def ok(self) -> bool:
        status = self.status
        return status == 0 or 200 <= status <= 299

    @property
    def status(self) -> int:
        """Status reported in the response header, -1 if there is no header."""
        if "responseHeader" not in self.solr_response:
            return -1
        return dig_int(self.solr_response, "responseHeader", "status", default=-1)

    @property
    def error_msg(self) -> str:
        msg = dig(self.solr_response, "error", "msg")
        return msg if isinstance(msg, str) else ""

    @property
    def is_grouped(self) -> bool:
        return "grouped" in self.solr_response

    @property
    def num_found(self) -> int:
        """
        Total number of documents found, usually larger than ``len(solr_docs)``.

        For grouped responses this is the sum of the matches of every grouped field.
        """
        if self.is_grouped:
            grouped = dig_dict(self.solr_response, "grouped")
            return sum(dig_int(result, "matches") for result in grouped.values())
        return dig_int(self.solr_response, "response", "numFound")

    @property
    def groups_found(self) -> int:
        """Number of groups found, as computed by the group count facet."""
        if not self.is_grouped or self.params is None or not self.params.group_count:
            return 0
        return dig_int(self.solr_response, "facets", self.params.group_count)

    def num_found_for_group(self, group_field: str, group_value: Any) -> int:
        group = self._find_group(group_field, group_value)
        return dig_int(group, "doclist", "numFound")

    @property
    def page_size(self) -> int:
        return dig_int(self.solr_response, "responseHeader", "params", "rows")

    @property
    def start(self) -> int:
        """Start position of the documents returned (used for pagination)."""
        if self.is_grouped:
            return dig_int(self.solr_response, "responseHeader", "params", "start")
        return dig_int(self.solr_response, "response", "start")

    @property
    def end(self) -> int:
        return min(self.start + self.page_size, self.num_found)

    @property
    def page(self) -> int:
        page_size = self.page_size
        if page_size == 0:
            return 1
        return (self.start // page_size) + 1

    @property
    def num_pages(self) -> int:
        page_size = self.page_size
        if page_size == 0:
            return 0
        pages, remainder = divmod(self.num_found, page_size)
        if remainder != 0:
            pages += 1
        return pages

    @property
    def solr_docs(self) -> List[Dict[str, Any]]:
        """Raw SOLR documents. Use the group accessors for grouped responses."""
        return dig_list(self.solr_response, "response", "docs")

    def solr_groups(self, group_field: str) -> List[Any]:
        """The group values found for the given field."""
        groups = dig_list(self.solr_response, "grouped", group_field, "groups")
        return [dig(group, "groupValue") for group in groups]

    def solr_docs_for_group(
        self, group_field: str, group_value: Any
    ) -> List[Dict[str, Any]]:
        group = self._find_group(group_field, group_value)
        return dig_list(group, "doclist", "docs")

    def _find_group(self, group_field: str, group_value: Any) -> Dict[str, Any]:
        groups = dig_list(self.solr_response, "grouped", group_field, "groups")
        for group in groups:
            if dig(group, "groupValue") == group_value:
                return group
        return {}

    @property
    def facets(self) -> List[FacetField]:
        if self.params is None:
            return []
        return self.params.facets

    def populate_facets(self) -> None:
        """
        Copy the facet values returned by SOLR into the requested facets.

        Facets SOLR returns that were not requested are ignored. Range facets
        take their values from the range buckets instead of the field values.
        Values keep the order in which SOLR returned them. Runs once, later
        calls do nothing.
        """
        if self._facets_populated:
            return
        self._facets_populated = True

        if self.params is None or "facet_counts" not in self.solr_response:
            return

        solr_facets = dig(self.solr_response, "facet_counts", "facet_fields")
        for field_name, values in named_pairs(solr_facets):
            facet_field = self.params.facet_for_field(field_name)
            if facet_field is None:
                logger.debug(f"Ignoring facet not requested: {field_name}")
                continue

            if facet_field.is_range:
                self._add_range_values(facet_field)
            else:
                for text, count in named_pairs(values):
                    facet_field.add_value(str(text), max(as_int(count), 0))

    def _add_range_values(self, facet_field: FacetField) -> None:
        counts = dig(
            self.solr_response, "facet_counts", "facet_ranges", facet_field.name, "counts"
        )
        for bucket, count in named_pairs(counts):
            range_start = to_number(bucket)
            if range_start is None:
                logger.debug(
                    f"Ignoring non numeric bucket {bucket!r} for facet {facet_field.name}"
                )
                continue
            range_end = facet_field.bucket_end(range_start)
            facet_field.add_range(range_start, range_end, max(as_int(count), 0))

    def explainer(self) -> Explainer:
        if self._explainer is None:
            self._explainer = Explainer(self.solr_response)
        return self._explainer

    def spellcheck(self) -> Spellcheck:
        if self._spellcheck is None:
            self._spellcheck = Spellcheck(self.solr_response)
        return self._spellcheck

    def highlights(self) -> Highlights:
        if self._highlights is None:
            self._highlights = Highlights(self.solr_response)
        return self._highlights
