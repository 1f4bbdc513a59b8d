"""Access to the relevance explanations returned with ``debugQuery=true``."""

import re
from typing import Any, Dict, List, Optional

from .payload import dig_dict

SCORE_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?(?:[eE]-?\d+)?)")


class Explainer:
    """Read-only wrapper over the ``debug.explain`` section of a response."""

    def __init__(self, solr_response: Dict[str, Any]):
        self._explain = dig_dict(solr_response, "debug", "explain")

    def document_ids(self) -> List[str]:
        return list(self._explain.keys())

    def for_document(self, doc_id: str) -> Optional[str]:
        """The explanation text for a document, None if there is none."""
        explanation = self._explain.get(doc_id)
        return explanation if isinstance(explanation, str) else None

    def score_for(self, doc_id: str) -> Optional[float]:
        """The score at the top of the explanation for a document."""
        explanation = self.for_document(doc_id)
        if explanation is None:
            return None
        match = SCORE_PATTERN.match(explanation)
        if match is None:
            return None
        return float(match.group(1))
