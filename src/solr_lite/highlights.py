"""Access to hit highlighting information."""

import json
from typing import Any, Dict, List, Optional

from .payload import dig_dict


class Highlights:
    """Read-only wrapper over the ``highlighting`` section of a response."""

    def __init__(self, solr_response: Dict[str, Any]):
        self._highlighting = dig_dict(solr_response, "highlighting")

    @classmethod
    def from_response(cls, solr_response: str) -> "Highlights":
        """Build from the raw (JSON string) body of a SOLR response."""
        return cls(json.loads(solr_response))

    def ids(self) -> List[str]:
        return list(self._highlighting.keys())

    def for_id(self, doc_id: str) -> Optional[Dict[str, List[str]]]:
        """Highlighted snippets per field for a document, None if there are none."""
        return self._highlighting.get(doc_id)
