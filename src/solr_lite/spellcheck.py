"""
Access to spellcheck suggestions and collations.

SOLR 6 and later return collations as a flat named list::

    ["collation", {"collationQuery": "wordA"}, "collation", {"collationQuery": "wordB"}]

SOLR 4 mixes them into the suggestions instead, with the collation query in a
nested list::

    [..., "collation", ["collationQuery", "wordA"], ...]

``Spellcheck.collations`` always returns the SOLR 6 shape.
"""

from typing import Any, Dict, List, Optional

from .payload import dig, dig_dict


class Spellcheck:
    """Read-only wrapper over the ``spellcheck`` section of a response."""

    def __init__(self, solr_response: Dict[str, Any]):
        self._spellcheck = dig_dict(solr_response, "spellcheck")
        self._suggestions: Optional[List[Any]] = None
        self._collations: Optional[List[Any]] = None

    def suggestions(self) -> List[Any]:
        if self._suggestions is None:
            suggestions = self._spellcheck.get("suggestions", [])
            self._suggestions = suggestions if isinstance(suggestions, list) else []
        return self._suggestions

    def collations(self) -> List[Any]:
        if self._collations is None:
            self._collations = self._build_collations()
        return self._collations

    def _build_collations(self) -> List[Any]:
        collations = self._spellcheck.get("collations")
        if collations is not None:
            return collations if isinstance(collations, list) else []

        # SOLR 4, rebuild the SOLR 6 structure from the suggestions
        rebuilt: List[Any] = []
        suggestions = self.suggestions()
        for i, item in enumerate(suggestions):
            if item != "collation":
                continue
            word = dig(suggestions, i + 1, 1)
            if word is None:
                continue
            rebuilt.append("collation")
            rebuilt.append({"collationQuery": word})
        return rebuilt

    def top_collation_query(self) -> Optional[str]:
        collations = self.collations()
        if len(collations) < 2:
            return None
        top_collation = collations[1]
        if isinstance(top_collation, str):
            return top_collation
        return dig(top_collation, "collationQuery")

    def correctly_spelled(self) -> bool:
        return bool(self._spellcheck.get("correctlySpelled", True))
