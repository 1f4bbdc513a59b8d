"""
Client for a single SOLR core.

This is the main public interface to submit commands (get, search, update,
delete) to SOLR. Searches are built from ``SearchParams`` and their results
wrapped in ``Response`` objects.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import quote_plus
from xml.etree import ElementTree

import pysolr

from .config import SolrConfig
from .exceptions import (
    DuplicateDocumentError,
    SolrConfigurationError,
)
from .filter_query import FilterQuery
from .response import Response
from .search_params import SearchParams
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class Solr:
    """
    Represents a SOLR core.

    Reads and writes go through an ``HttpTransport`` with hand built URLs,
    always asking SOLR for JSON. Health checks go through ``pysolr`` sharing
    the same HTTP session.
    """

    def __init__(
        self,
        solr_url: Optional[str],
        logger: Optional[logging.Logger] = None,
        transport: Optional[HttpTransport] = None,
        def_type: Optional[str] = None,
        batch_size: int = 20,
    ):
        """
        Initialize the client.

        Args:
            solr_url: URL to the SOLR core, e.g. "http://localhost:8983/solr/bibdata".
            logger: Logger for request messages (e.g. the host application's
                logger). Defaults to the transport module logger.
            transport: Optional pre-configured transport.
            def_type: Query parser (defType) to send with every request. None
                to use the value configured on the server.
            batch_size: Default number of ids requested at a time by get_many.

        Raises:
            SolrConfigurationError: If no URL is given.
        """
        if not solr_url:
            raise SolrConfigurationError("No solr_url was indicated")
        self.solr_url = solr_url.rstrip("/")
        self.transport = transport or HttpTransport(logger=logger)
        self.def_type = def_type
        self.batch_size = batch_size
        self._pysolr: Optional[pysolr.Solr] = None

    @classmethod
    def from_config(
        cls, config: SolrConfig, logger: Optional[logging.Logger] = None
    ) -> "Solr":
        return cls(
            config.core_url,
            logger=logger,
            def_type=config.def_type,
            batch_size=config.batch_size,
        )

    def _admin(self) -> pysolr.Solr:
        if self._pysolr is None:
            self._pysolr = pysolr.Solr(self.solr_url, session=self.transport.session)
        return self._pysolr

    def _def_type_param(self) -> str:
        if self.def_type is None:
            return ""
        return f"&defType={self.def_type}"

    def get(
        self, doc_id: str, q_field: str = "q", fl: str = "*"
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch a document by id.

        Args:
            doc_id: ID of the document to fetch.
            q_field: Query parameter to send the id query in.
            fl: List of fields to fetch.

        Returns:
            The document, or None if no document was found.

        Raises:
            DuplicateDocumentError: If more than one document was found.
        """
        query_string = f"{q_field}=id%3A{quote_plus(str(doc_id))}"
        query_string += f"&fl={fl}&wt=json&indent=on"
        query_string += self._def_type_param()
        url = f"{self.solr_url}/select?{query_string}"
        response = Response(self.transport.get_json(url), None)
        if response.num_found > 1:
            raise DuplicateDocumentError(f"More than one record found for id {doc_id}")
        docs = response.solr_docs
        return docs[0] if docs else None

    def get_many(
        self,
        ids: Sequence[str],
        q_field: str = "q",
        fl: str = "*",
        batch_size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch several documents by id, ``batch_size`` ids per request.

        Args:
            ids: IDs of the documents to fetch.
            q_field: Query parameter to send the id query in.
            fl: List of fields to fetch.
            batch_size: Overrides the client batch size.

        Returns:
            The documents found, in the order SOLR returned them.
        """
        docs: List[Dict[str, Any]] = []
        for batch in to_batches(list(ids), batch_size or self.batch_size):
            ids_string = " OR ".join(str(i) for i in batch)
            query_string = f"{q_field}=id%3A{quote_plus(f'({ids_string})')}"
            query_string += f"&fl={fl}&rows={len(batch)}&wt=json&indent=on"
            query_string += self._def_type_param()
            url = f"{self.solr_url}/select?{query_string}"
            response = Response(self.transport.get_json(url), None)
            docs.extend(response.solr_docs)
        return docs

    def search(
        self,
        params: SearchParams,
        extra_fqs: Optional[Sequence[FilterQuery]] = None,
        qf: Optional[str] = None,
        mm: Optional[str] = None,
        debug: bool = False,
    ) -> Response:
        """
        Issue a search request.

        Args:
            params: Search parameters.
            extra_fqs: Filters to add to the search that the user cannot override.
            qf: Overrides the server's qf value.
            mm: Overrides the server's mm value.
            debug: True to include ``debugQuery`` information in the response.

        Returns:
            The Response, with the facets in ``params`` populated.
        """
        url = self._search_url(params, extra_fqs, qf, mm, debug)
        return Response(self.transport.get_json(url), params)

    def search_group(
        self,
        params: SearchParams,
        group_field: str,
        group_limit: int,
        extra_fqs: Optional[Sequence[FilterQuery]] = None,
        qf: Optional[str] = None,
        mm: Optional[str] = None,
        debug: bool = False,
    ) -> Response:
        """
        Issue a grouped search request.

        SOLR does not report the number of groups found, only the number of
        documents across all groups. When ``params.group_count`` is set an
        extra computed facet with that name is requested to hold it.

        Args:
            params: Search parameters.
            group_field: Field to group the results by.
            group_limit: Maximum number of documents per group.

        Returns:
            The Response, with the facets in ``params`` populated.
        """
        url = self._search_url(params, extra_fqs, qf, mm, debug, group_field, group_limit)
        return Response(self.transport.get_json(url), params)

    def search_text(self, terms: str) -> Response:
        """Shortcut to search for the given terms with default parameters."""
        return self.search(SearchParams(q=terms))

    @staticmethod
    def start_row(page: int, page_size: int) -> int:
        """The row number to pass to SOLR to start at the given page."""
        return (page - 1) * page_size

    def update(self, docs: Union[str, List[Dict[str, Any]]]) -> Response:
        """
        Add or update documents and commit.

        Args:
            docs: The documents, as a list of dictionaries or a JSON string.
        """
        payload = docs if isinstance(docs, str) else json.dumps(docs)
        url = f"{self.solr_url}/update?commit=true&wt=json"
        return Response(self.transport.post_json(url, payload), None)

    def delete_by_id(self, doc_id: str) -> Response:
        """
        Delete a document by id and commit.

        Uses SOLR's XML syntax, the JSON one chokes on ids with a colon (e.g. bdr:123).
        The response is requested as JSON (wt=json), older SOLR versions
        default to XML.
        """
        root = ElementTree.Element("delete")
        ElementTree.SubElement(root, "id").text = str(doc_id)
        payload = ElementTree.tostring(root, encoding="unicode")
        url = f"{self.solr_url}/update?commit=true&wt=json"
        body = self.transport.post(url, payload, "text/xml")
        return Response(self.transport.decode(body), None)

    def delete_by_query(self, query: str) -> Response:
        """Delete all documents matching a query and commit."""
        payload = json.dumps({"delete": {"query": query}})
        url = f"{self.solr_url}/update?commit=true&wt=json"
        return Response(self.transport.post_json(url, payload), None)

    def delete_all(self) -> Response:
        return self.delete_by_query("*:*")

    def ping(self) -> bool:
        """
        Test the SOLR connection.

        Returns:
            True if the connection is successful, False otherwise.
        """
        try:
            self._admin().ping()
            return True
        except pysolr.SolrError as e:
            logger.warning(f"SOLR ping failed: {e}")
        return False

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._pysolr = None
        self.transport.close()

    def __enter__(self) -> "Solr":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _search_url(
        self,
        params: SearchParams,
        extra_fqs: Optional[Sequence[FilterQuery]],
        qf: Optional[str],
        mm: Optional[str],
        debug: bool,
        group_field: Optional[str] = None,
        group_limit: int = 0,
    ) -> str:
        parts = []
        if params.fl is not None:
            parts.append(f"fl={','.join(params.fl)}")
        parts.append("wt=json&indent=on")

        solr_qs = params.to_solr_query_string(extra_fqs or [])
        if solr_qs:
            parts.append(solr_qs)
        parts.append("q.op=AND")

        if qf is not None:
            parts.append(f"qf={quote_plus(qf)}")
        if mm is not None:
            parts.append(f"mm={quote_plus(mm)}")
        if debug:
            parts.append("debugQuery=true")

        if group_field is not None:
            parts.append(
                f"group=true&group.field={group_field}&group.limit={group_limit}"
            )
            if params.group_count is not None:
                json_facet = json.dumps(
                    {params.group_count: f"unique({group_field})"}, separators=(",", ":")
                )
                parts.append(f"json.facet={quote_plus(json_facet)}")

        if self.def_type is not None:
            parts.append(f"defType={self.def_type}")

        return f"{self.solr_url}/select?{'&'.join(parts)}"


def to_batches(items: List[Any], batch_size: int) -> List[List[Any]]:
    """Split ``items`` in consecutive batches of at most ``batch_size`` items."""
    if batch_size <= 0:
        raise ValueError("Batch size must be positive")
    return [items[i : i + batch_size] for i in range(0, len(items), batch_size)]
