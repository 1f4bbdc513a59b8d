"""
HTTP transport used by the ``Solr`` client.

Issues GET and POST requests against SOLR over a shared ``requests.Session``
and logs every request with its elapsed time. The logger is injected so hosts
can route these messages wherever they want.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import requests

from .exceptions import SolrConnectionError, SolrQueryError


class HttpTransport:
    """Sends requests to SOLR and returns the response bodies."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the transport.

        Args:
            session: Optional pre-configured requests session.
            logger: Logger for request messages. Defaults to this module's logger.
        """
        self._session = session
        self.logger = logger or logging.getLogger(__name__)

    @property
    def session(self) -> requests.Session:
        """The session used for requests, created on first use."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def get_json(self, url: str) -> Dict[str, Any]:
        """
        Issue a GET request and decode the JSON body.

        The body is decoded regardless of the HTTP status since SOLR reports
        errors in the JSON body as well.

        Raises:
            SolrConnectionError: If the request fails.
            SolrQueryError: If the body is not JSON.
        """
        start = time.time()
        self.logger.info(f"Solr HTTP GET {url}")
        try:
            response = self.session.get(
                url, headers={"Content-Type": "application/json"}
            )
        except requests.RequestException as e:
            self.logger.error(f"Solr HTTP GET failed: {e}")
            raise SolrConnectionError(f"Failed to connect to SOLR: {e}")
        self._log_elapsed(start, "Solr HTTP GET")
        return self.decode(response.text)

    def post(self, url: str, body: str, content_type: str) -> str:
        """
        Issue a POST request and return the raw body.

        Raises:
            SolrConnectionError: If the request fails.
        """
        start = time.time()
        self.logger.info(f"Solr HTTP POST {url}")
        try:
            response = self.session.post(
                url, data=body.encode("utf-8"), headers={"Content-Type": content_type}
            )
        except requests.RequestException as e:
            self.logger.error(f"Solr HTTP POST failed: {e}")
            raise SolrConnectionError(f"Failed to connect to SOLR: {e}")
        self._log_elapsed(start, "Solr HTTP POST")
        return response.text

    def post_json(self, url: str, body: str) -> Dict[str, Any]:
        """POST a JSON body and decode the JSON response."""
        return self.decode(self.post(url, body, "application/json"))

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def decode(self, text: str) -> Dict[str, Any]:
        """Decode a SOLR response body, raising SolrQueryError if it is not JSON."""
        try:
            return json.loads(text)
        except ValueError as e:
            self.logger.error(f"SOLR returned a non JSON response: {text[:200]}")
            raise SolrQueryError(f"SOLR returned a non JSON response: {e}")

    def _log_elapsed(self, start: float, msg: str) -> None:
        elapsed_ms = int((time.time() - start) * 1000)
        self.logger.info(f"{msg} took {elapsed_ms} ms")
