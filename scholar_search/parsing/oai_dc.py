"""Parse OAI-PMH ``ListRecords`` responses carrying ``oai_dc`` metadata.

Each ``record`` element is turned into a :class:`BibliographicRecord` using
the unqualified Dublin Core fields (title, creator, subject, date, identifier
and source). The parser expects structurally well-formed XML and lets
``lxml.etree.XMLSyntaxError`` propagate for anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from lxml import etree

from scholar_search.core.identifiers import (
    UNTITLED,
    doi_to_url,
    is_doi_like,
    is_url_like,
    pick_record_id,
)
from scholar_search.core.models import BibliographicRecord

NSMAP = {
    "oai": "http://www.openarchives.org/OAI/2.0/",
    "oai_dc": "http://www.openarchives.org/OAI/2.0/oai_dc/",
    "dc": "http://purl.org/dc/elements/1.1/",
}

DC_FIELDS = ("title", "creator", "subject", "date", "identifier", "source")

Document = Union[bytes, str]


@dataclass
class OaiBatch:
    """One ``ListRecords`` response: parsed records plus the protocol envelope."""

    records: List[BibliographicRecord] = field(default_factory=list)
    resumption_token: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


def _get_text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def _parse_document(document: Document) -> etree._Element:
    if isinstance(document, str):
        document = document.encode("utf-8")
    return etree.fromstring(document)


def _collect_fields(dc: Optional[etree._Element]) -> Dict[str, List[str]]:
    values: Dict[str, List[str]] = {name: [] for name in DC_FIELDS}
    if dc is None:
        return values

    for name in DC_FIELDS:
        for element in dc.findall(f"dc:{name}", namespaces=NSMAP):
            text = _get_text(element)
            if text:
                values[name].append(text)
    return values


def _is_deleted(record: etree._Element) -> bool:
    header = record.find("oai:header", namespaces=NSMAP)
    return header is not None and header.get("status") == "deleted"


def _record_from_element(record: etree._Element, source_label: str) -> BibliographicRecord:
    dc = record.find("oai:metadata/oai_dc:dc", namespaces=NSMAP)
    values = _collect_fields(dc)

    title = values["title"][0] if values["title"] else UNTITLED
    identifiers = values["identifier"]
    # First match wins; later DOIs or URLs on the same record are ignored.
    doi = next((value for value in identifiers if is_doi_like(value)), "")
    url = next((value for value in identifiers if is_url_like(value)), "") or doi_to_url(doi)

    return BibliographicRecord(
        id=pick_record_id(url, doi, title),
        title=title,
        source=source_label,
        authors=tuple(values["creator"]),
        subjects=tuple(values["subject"]),
        date=values["date"][0] if values["date"] else "",
        doi=doi,
        url=url,
        journal=values["source"][0] if values["source"] else "",
    )


def _records_from_root(root: etree._Element, source_label: str) -> List[BibliographicRecord]:
    return [
        _record_from_element(record, source_label)
        for record in root.iter(f"{{{NSMAP['oai']}}}record")
        if not _is_deleted(record)
    ]


def parse_oai_dc(document: Document, *, source_label: str) -> List[BibliographicRecord]:
    """Parse every ``record`` in ``document`` into bibliographic records."""

    return _records_from_root(_parse_document(document), source_label)


def parse_list_records(document: Document, *, source_label: str) -> OaiBatch:
    """Parse records along with the resumption token and any OAI error."""

    root = _parse_document(document)
    batch = OaiBatch(records=_records_from_root(root, source_label))

    token = root.find(".//oai:resumptionToken", namespaces=NSMAP)
    if token is not None:
        batch.resumption_token = _get_text(token) or None

    error = root.find("oai:error", namespaces=NSMAP)
    if error is not None:
        batch.error_code = error.get("code") or "unknown"
        batch.error_message = _get_text(error) or batch.error_code
    return batch


__all__ = ["NSMAP", "OaiBatch", "parse_list_records", "parse_oai_dc"]
