import sys
from pathlib import Path
from typing import Iterable, Optional

import pytest

# Ensure repository root is on the import path for local package imports during tests.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXTURES = Path(__file__).resolve().parent / "fixtures"

OAI_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<OAI-PMH xmlns="http://www.openarchives.org/OAI/2.0/">
  <responseDate>2024-03-01T12:00:00Z</responseDate>
  {error}
  <ListRecords>
    {records}
    {token}
  </ListRecords>
</OAI-PMH>"""

OAI_RECORD_TEMPLATE = """<record>
  <header><identifier>oai:test:{index}</identifier><datestamp>2024-01-01</datestamp></header>
  <metadata>
    <oai_dc:dc xmlns:oai_dc="http://www.openarchives.org/OAI/2.0/oai_dc/"
               xmlns:dc="http://purl.org/dc/elements/1.1/">
      <dc:title>{title}</dc:title>
      {subjects}
      <dc:identifier>https://repo.example/{index}</dc:identifier>
    </oai_dc:dc>
  </metadata>
</record>"""


def build_oai_document(
    titles: Iterable[str],
    *,
    subjects: Optional[dict] = None,
    token: Optional[str] = None,
    error: Optional[tuple] = None,
    start: int = 0,
) -> bytes:
    """Render a small ListRecords document with one record per title."""

    subjects = subjects or {}
    records = "\n".join(
        OAI_RECORD_TEMPLATE.format(
            index=start + idx,
            title=title,
            subjects="".join(
                f"<dc:subject>{subject}</dc:subject>" for subject in subjects.get(title, [])
            ),
        )
        for idx, title in enumerate(titles)
    )
    token_xml = f"<resumptionToken>{token}</resumptionToken>" if token else ""
    error_xml = f'<error code="{error[0]}">{error[1]}</error>' if error else ""
    return OAI_TEMPLATE.format(records=records, token=token_xml, error=error_xml).encode("utf-8")


@pytest.fixture()
def oai_list_records() -> bytes:
    return (FIXTURES / "oai" / "list_records.xml").read_bytes()


@pytest.fixture()
def oai_document_builder():
    return build_oai_document
