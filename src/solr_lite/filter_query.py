"""
Filter queries (fq) for SOLR searches.

A filter query restricts a search to documents where a field matches one or
more values (discrete filters) or falls within a range (range filters). Each
filter knows how to render itself in three encodings:

* ``solr_value``: the clause sent to SOLR, URL escaped as a single unit.
* ``qs_value``: the token placed in the user facing query string
  (``field|value`` or ``field^start,end``).
* ``form_value``: the same token unescaped, for HTML forms that encode on submit.
"""

from typing import List, Optional, Sequence
from urllib.parse import quote_plus, unquote_plus

from pydantic import BaseModel, Field, field_validator, model_validator

VALUE_SEPARATOR = "|"
RANGE_MARKER = "^"
RANGE_DISPLAY_SEPARATOR = " - "


class FilterQuery(BaseModel):
    """Base class for a restriction on a single field."""

    field: str = Field(description="Name of the SOLR field to filter by")
    title: Optional[str] = Field(
        default=None, description="Display label, defaults to the field name"
    )
    remove_url: Optional[str] = Field(
        default=None, description="Link that removes this filter from the search"
    )

    @model_validator(mode="after")
    def default_title(self) -> "FilterQuery":
        """Use the field name as title when none was given."""
        if self.title is None:
            self.title = self.field
        return self

    @property
    def is_range(self) -> bool:
        return False

    @property
    def value(self) -> str:
        """Human readable value of the filter."""
        raise NotImplementedError

    @property
    def solr_value(self) -> str:
        """The fq clause as sent to SOLR (URL escaped)."""
        raise NotImplementedError

    @property
    def qs_value(self) -> str:
        """The token used in the user facing query string."""
        raise NotImplementedError

    @property
    def form_value(self) -> str:
        """The token used in HTML forms (not escaped)."""
        raise NotImplementedError

    def range_from(self) -> Optional[str]:
        """
        Start of the range shown in ``value``, without wildcards.

        Returns:
            The start, ``""`` for an open start, or None when ``value`` is not
            a range. ``range_to`` behaves the same for the end.
        """
        tokens = self._range_tokens()
        if tokens is None:
            return None
        return tokens[0].replace("*", "")

    def range_to(self) -> Optional[str]:
        """End of the range shown in ``value``, without wildcards, ``""`` if open."""
        tokens = self._range_tokens()
        if tokens is None:
            return None
        return tokens[1].replace("*", "")

    def _range_tokens(self) -> Optional[List[str]]:
        tokens = (self.value or "").split(RANGE_DISPLAY_SEPARATOR)
        if len(tokens) != 2:
            return None
        return tokens

    @classmethod
    def create(
        cls, field: str, values: Sequence[str], is_range: bool = False
    ) -> Optional["FilterQuery"]:
        """
        Create a filter from a field and its values.

        Args:
            field: Name of the SOLR field.
            values: The values to filter by. For ranges the first element is
                expected in the form ``"start,end"``.
            is_range: True to create a range filter.

        Returns:
            The filter, or None if a range string is malformed.
        """
        if is_range:
            range_string = values[0] if values else None
            return RangeFilterQuery.from_range_string(field, range_string)
        return DiscreteFilterQuery(field=field, values=list(values))

    @classmethod
    def from_query_string(cls, token: str) -> Optional["FilterQuery"]:
        """
        Parse a filter from a query string token.

        The token is expected as ``field|value``, ``field|value1|valueN`` or,
        for ranges, ``field^start,end``. Tokens coming from HTML forms and from
        links are encoded slightly differently so the whole token is unescaped
        before it is split.

        Args:
            token: The raw query string value.

        Returns:
            The filter, or None when the token cannot be parsed.
        """
        text = unquote_plus(token or "")
        if VALUE_SEPARATOR in text:
            tokens = text.split(VALUE_SEPARATOR)
            field = tokens[0]
            values = tokens[1:]
            # Trailing empty values are dropped, inner ones are kept
            while values and values[-1] == "":
                values.pop()
            if not field or not values:
                return None
            return DiscreteFilterQuery(field=field, values=values)

        if RANGE_MARKER in text:
            tokens = text.split(RANGE_MARKER)
            if len(tokens) != 2 or not tokens[0]:
                return None
            return RangeFilterQuery.from_range_string(tokens[0], tokens[1])

        return None


class DiscreteFilterQuery(FilterQuery):
    """Filter matching any of a list of values (ORed together)."""

    values: List[str] = Field(description="Values to filter by")

    @field_validator("values")
    def validate_values(cls, v: List[str]) -> List[str]:
        """Validate that at least one value was given."""
        if not v:
            raise ValueError("A filter query needs at least one value")
        return v

    @property
    def value(self) -> str:
        return VALUE_SEPARATOR.join(self.values)

    @property
    def solr_value(self) -> str:
        # The whole clause is escaped, a bare ":" breaks URL parsing on some platforms
        clause = " OR ".join(f'({self.field}:"{v}")' for v in self.values)
        return quote_plus(clause)

    @property
    def qs_value(self) -> str:
        escaped = [quote_plus(v) for v in self.values]
        return VALUE_SEPARATOR.join([self.field] + escaped)

    @property
    def form_value(self) -> str:
        return f"{self.field}{VALUE_SEPARATOR}{self.value}"


class RangeFilterQuery(FilterQuery):
    """Filter matching a range of values. Empty endpoints are open ended."""

    range_start: str = Field(default="", description="Start of the range")
    range_end: str = Field(default="", description="End of the range")

    @classmethod
    def from_range_string(
        cls, field: str, range_string: Optional[str]
    ) -> Optional["RangeFilterQuery"]:
        """
        Create a range filter from a ``"start,end"`` string.

        Returns:
            The filter, or None unless the string holds exactly two tokens.
        """
        tokens = (range_string or "").split(",")
        if len(tokens) != 2:
            return None
        return cls(field=field, range_start=tokens[0], range_end=tokens[1])

    @property
    def is_range(self) -> bool:
        return True

    @property
    def range_string(self) -> str:
        return f"{self.range_start},{self.range_end}"

    @property
    def value(self) -> str:
        return f"{self.range_start}{RANGE_DISPLAY_SEPARATOR}{self.range_end}"

    @property
    def solr_value(self) -> str:
        start = self.range_start or "*"
        end = self.range_end or "*"
        return quote_plus(f"({self.field}:[{start} TO {end}])")

    @property
    def qs_value(self) -> str:
        return f"{self.field}{RANGE_MARKER}{self.range_string}"

    @property
    def form_value(self) -> str:
        return self.qs_value
