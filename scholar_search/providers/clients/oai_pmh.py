"""OAI-PMH client for ``ListRecords`` harvesting."""

from __future__ import annotations

from typing import Dict, Optional

from scholar_search.providers.clients.base import BaseHttpClient

XML_HEADERS = {"Accept": "application/xml, text/xml;q=0.9, */*;q=0.8"}


class OaiPmhClient(BaseHttpClient):
    """Lightweight wrapper around an OAI-PMH repository endpoint.

    The protocol has no keyword search; records are listed by datestamp window
    and the caller filters them.
    """

    BASE_URL = "http://148.215.1.70/redalyc/oai"
    SOURCE = "Redalyc"

    def list_records(
        self,
        *,
        from_date: Optional[str] = None,
        until_date: Optional[str] = None,
        metadata_prefix: str = "oai_dc",
        set_spec: Optional[str] = None,
        resumption_token: Optional[str] = None,
    ) -> bytes:
        """Fetch one ``ListRecords`` batch and return the raw XML body."""

        params: Dict[str, str] = {"verb": "ListRecords"}
        if resumption_token:
            # Resumption requests must carry the token as the only argument.
            params["resumptionToken"] = resumption_token
        else:
            params["metadataPrefix"] = metadata_prefix
            if from_date:
                params["from"] = from_date
            if until_date:
                params["until"] = until_date
            if set_spec:
                params["set"] = set_spec

        response = self._request("GET", "", params=params, headers=XML_HEADERS)
        return response.content
