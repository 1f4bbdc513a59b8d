"""
Facet fields requested from SOLR and the values SOLR returns for them.
"""

from typing import List, Optional, Union
from urllib.parse import quote_plus

from pydantic import BaseModel, Field

Number = Union[int, float]


class FacetValue(BaseModel):
    """Represents a facet value (or range bucket) and its count."""

    text: str = ""
    count: int = Field(default=0, ge=0)
    add_url: Optional[str] = None
    remove_url: Optional[str] = None
    range_start: Optional[Number] = None
    range_end: Optional[Number] = None


class FacetField(BaseModel):
    """
    Represents a facet requested from SOLR.

    The ``values`` list stays empty until a ``Response`` populates it with the
    value/count pairs SOLR returned, in the order SOLR returned them.
    """

    name: str = Field(description="Name of the field in SOLR")
    title: str = Field(default="", description="Display label for the facet")
    limit: Optional[int] = Field(
        default=None, description="Overrides the global facet limit for this field"
    )
    values: List[FacetValue] = Field(default_factory=list)

    @property
    def is_range(self) -> bool:
        return False

    def to_qs(self, text: str) -> str:
        """Query string token that filters by the given value."""
        return f"{self.name}|{quote_plus(text)}"

    def to_qs_range(self, range_start: Number, range_end: Number) -> str:
        """Query string token that filters by the given range."""
        return f"{self.name}^{range_start},{range_end}"

    def add_value(self, text: str, count: int) -> None:
        self.values.append(FacetValue(text=text, count=count))

    def add_range(self, range_start: Number, range_end: Number, count: int) -> None:
        self.values.append(
            FacetValue(
                text=f"{range_start} - {range_end}",
                count=count,
                range_start=range_start,
                range_end=range_end,
            )
        )

    def value_count(self, text: str) -> int:
        """Count for the given value, 0 if SOLR did not return it."""
        for v in self.values:
            if v.text == text:
                return v.count
        return 0

    def set_remove_url_for(self, value: str, url: Optional[str]) -> None:
        for v in self.values:
            if v.text == value:
                v.remove_url = url

    def set_add_url_for(self, value: str, url: Optional[str]) -> None:
        for v in self.values:
            if v.text == value:
                v.add_url = url

    def set_urls_for(
        self, value: str, add_url: Optional[str], remove_url: Optional[str]
    ) -> None:
        for v in self.values:
            if v.text == value:
                v.add_url = add_url
                v.remove_url = remove_url


class RangeFacetField(FacetField):
    """A facet computed by SOLR as numeric range buckets."""

    range_start: Number = Field(description="Lower bound of the first bucket")
    range_end: Number = Field(description="Upper bound of the last bucket")
    range_gap: Number = Field(description="Size of each bucket")

    @property
    def is_range(self) -> bool:
        return True

    def bucket_end(self, bucket_start: Number) -> Number:
        """Inclusive end of the bucket that starts at ``bucket_start``."""
        return bucket_start + self.range_gap - 1
