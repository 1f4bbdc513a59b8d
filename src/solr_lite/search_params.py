"""
Search parameters and their query string encodings.

``SearchParams`` holds everything needed to issue a search and knows how to
render itself as:

* the query string shown to users in the browser (``to_user_query_string``),
* the query string sent to SOLR (``to_solr_query_string``),
* a list of HTML form values (``to_form_values``),

and how to rebuild itself from the user facing query string
(``from_query_string``).
"""

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote_plus, unquote_plus

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .facet_field import FacetField
from .filter_query import FilterQuery

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


class SearchParams(BaseModel):
    """Represents the parameters to send to SOLR during a search."""

    model_config = ConfigDict(validate_assignment=True)

    q: str = Field(default="", description="The q value to pass to SOLR")
    fq: List[FilterQuery] = Field(
        default_factory=list, description="Filter queries to pass to SOLR"
    )
    facets: List[FacetField] = Field(
        default_factory=list, description="Facets to request from SOLR"
    )
    page: int = Field(default=1, ge=1, description="Page number to request")
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE, ge=0, description="Number of documents per page"
    )
    fl: Optional[List[str]] = Field(
        default=None, description="Field names to request, None for SOLR defaults"
    )
    sort: str = Field(default="", description="Sort string to pass to SOLR")
    facet_limit: Optional[int] = Field(
        default=None, description="Number of facet values to request per facet"
    )
    spellcheck: bool = Field(default=False, description="Request spellchecking")
    hl: bool = Field(default=False, description="Request hit highlighting")
    hl_fl: Optional[str] = Field(default=None, description="Fields to highlight")
    hl_snippets: int = Field(default=1, description="Number of highlight snippets")
    group_count: Optional[str] = Field(
        default="group_count",
        description="Name of the computed value holding the number of groups found",
    )

    @field_validator("facets")
    def validate_unique_facets(cls, v: List[FacetField]) -> List[FacetField]:
        """Validate that no two facets share a field name."""
        names = [f.name for f in v]
        if len(names) != len(set(names)):
            raise ValueError("Facet names must be unique")
        return v

    def facet_for_field(self, field: str) -> Optional[FacetField]:
        """
        Returns facet information about a given field.

        Args:
            field: Name of the field.

        Returns:
            The FacetField for the field, or None if it was not requested.
        """
        for facet in self.facets:
            if facet.name == field:
                return facet
        return None

    def set_facet_remove_url(self, field: str, value: str, url: str) -> None:
        """Set the ``remove_url`` for the given facet and value."""
        facet = self.facet_for_field(field)
        if facet is not None:
            facet.set_remove_url_for(value, url)

    def start_row(self) -> int:
        """The starting row number for the current page and page size."""
        return (self.page - 1) * self.page_size

    def set_start_row(self, start: int) -> None:
        """Recalculate the current page from a starting row number."""
        if self.page_size == 0:
            self.page = 1
        else:
            self.page = (start // self.page_size) + 1

    def to_user_query_string(
        self,
        facet_to_ignore: Optional[FilterQuery] = None,
        q_override: Optional[str] = None,
    ) -> str:
        """
        Calculate the query string to render in the browser for this search.

        ``q`` is written as is, it is expected to be URL escaped already (as
        ``from_query_string`` stores it through ``url_trim``).

        Args:
            facet_to_ignore: A filter to leave out of the query string. Used to
                build the "remove this filter" links. Filters are compared by
                their SOLR value so every filter producing the same SOLR
                clause is left out.
            q_override: The q value to use instead of the current one.

        Returns:
            The query string (without a leading ``&``).
        """
        parts = []
        q_value = q_override if q_override is not None else self.q
        if q_value != "" and q_value != "*":
            parts.append(f"q={q_value}")

        for filter_query in self.fq:
            if (
                facet_to_ignore is not None
                and filter_query.solr_value == facet_to_ignore.solr_value
            ):
                continue
            parts.append(f"fq={filter_query.qs_value}")

        if self.page_size != DEFAULT_PAGE_SIZE:
            parts.append(f"rows={self.page_size}")
        if self.page != 1:
            parts.append(f"page={self.page}")
        # sort is not surfaced, users cannot change it
        return "&".join(parts)

    def to_user_query_string_no_q(self) -> str:
        """The user query string for this search without the q parameter."""
        return self.to_user_query_string(None, "")

    def to_solr_query_string(
        self, extra_fqs: Optional[Sequence[FilterQuery]] = None
    ) -> str:
        """
        Calculate the query string to pass to SOLR for this search.

        Args:
            extra_fqs: Additional filters to send that the user cannot override.

        Returns:
            The query string (without a leading ``&``).
        """
        parts = []
        if self.q != "":
            parts.append(f"q={self.q}")

        for filter_query in list(self.fq) + list(extra_fqs or []):
            parts.append(f"fq={filter_query.solr_value}")

        parts.append(f"rows={self.page_size}")
        parts.append(f"start={self.start_row()}")
        if self.sort != "":
            parts.append(f"sort={quote_plus(self.sort)}")

        if self.spellcheck:
            parts.append("spellcheck=on")

        if self.hl:
            parts.append("hl=true")
            if self.hl_fl:
                parts.append(f"hl.fl={quote_plus(self.hl_fl)}")
            if self.hl_snippets > 1:
                parts.append(f"hl.snippets={self.hl_snippets}")

        if self.facets:
            parts.append("facet=on")
            # SOLR needs range facets declared in facet.range as well
            for facet in self.facets:
                if facet.is_range:
                    parts.append(f"facet.range={facet.name}")

            for facet in self.facets:
                parts.append(f"facet.field={facet.name}")
                parts.append(f"f.{facet.name}.facet.mincount=1")

                limit = facet.limit if facet.limit is not None else self.facet_limit
                if limit is not None:
                    parts.append(f"f.{facet.name}.facet.limit={limit}")

                if facet.is_range:
                    parts.append(f"f.{facet.name}.facet.range.start={facet.range_start}")
                    parts.append(f"f.{facet.name}.facet.range.end={facet.range_end}")
                    parts.append(f"f.{facet.name}.facet.range.gap={facet.range_gap}")

        return "&".join(parts)

    def to_form_values(self) -> List[Dict[str, Any]]:
        """
        Values to add to an HTML form to represent this search.

        q is not included, forms usually have a dedicated input for it. Each
        filter gets its own ``fq_<n>`` name since web frameworks tend to drop
        repeated form names.

        Returns:
            A list of ``{"name": ..., "value": ...}`` dictionaries.
        """
        values: List[Dict[str, Any]] = []
        for i, filter_query in enumerate(self.fq):
            values.append({"name": f"fq_{i}", "value": filter_query.form_value})

        if self.page_size != DEFAULT_PAGE_SIZE:
            values.append({"name": "rows", "value": self.page_size})
        if self.page != 1:
            values.append({"name": "page", "value": self.page})
        return values

    def __str__(self) -> str:
        return f"q={self.q}\nfq={[f.value for f in self.fq]}"

    @classmethod
    def from_query_string(
        cls, qs: str, facet_fields: Optional[List[FacetField]] = None
    ) -> "SearchParams":
        """
        Create a SearchParams from a user facing query string.

        This is the inverse of ``to_user_query_string``. Filters may come as
        ``fq`` (links we built) or ``fq_<n>`` (HTML form submissions).
        Unknown names, empty values and values that do not parse are skipped.

        Args:
            qs: The query string.
            facet_fields: Facets to set on the returned object.

        Returns:
            A SearchParams populated from the query string.
        """
        params = cls(facets=facet_fields or [])
        for token in (qs or "").split("&"):
            name, _, value = token.partition("=")
            if value == "":
                continue

            if name == "q":
                params.q = cls.url_trim(value)
            elif name in ("rows", "page"):
                try:
                    number = int(value)
                except ValueError:
                    logger.debug(f"Ignoring non numeric {name} value: {value}")
                    continue
                if name == "rows" and number >= 0:
                    params.page_size = number
                elif name == "page" and number >= 1:
                    params.page = number
            elif name == "fq" or name.startswith("fq_"):
                filter_query = FilterQuery.from_query_string(value)
                if filter_query is not None:
                    params.fq.append(filter_query)
                else:
                    logger.debug(f"Ignoring malformed filter query: {value}")
        return params

    @staticmethod
    def url_trim(value: Optional[str]) -> str:
        """Trim leading and trailing spaces from an escaped value, keeping it escaped."""
        if value is None:
            return ""
        return quote_plus(unquote_plus(value).strip())
