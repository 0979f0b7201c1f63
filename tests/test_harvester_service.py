import pytest

from scholar_search.core.models import SearchQuery
from scholar_search.providers.clients.base import ParseError, RetrievalError
from scholar_search.services.harvester_service import RepositoryHarvesterService


class StubOaiClient:
    def __init__(self, documents):
        self._documents = list(documents)
        self.calls = []

    def list_records(self, **kwargs):
        self.calls.append(kwargs)
        return self._documents[min(len(self.calls), len(self._documents)) - 1]


def _service(documents, **kwargs):
    client = StubOaiClient(documents)
    return RepositoryHarvesterService(client, source_label="Redalyc", **kwargs), client


def test_empty_keyword_returns_every_record_in_window(oai_document_builder):
    service, client = _service([oai_document_builder(["Alpha", "Beta", "Gamma"])])

    page = service.harvest("", date_from="2024-01-01", date_to="2024-02-01")

    assert [record.title for record in page.records] == ["Alpha", "Beta", "Gamma"]
    assert page.total == 3
    assert page.source == "Redalyc"
    assert client.calls[0]["from_date"] == "2024-01-01"
    assert client.calls[0]["until_date"] == "2024-02-01"
    assert client.calls[0]["metadata_prefix"] == "oai_dc"


def test_keyword_matches_title_or_subject_case_insensitively(oai_document_builder):
    document = oai_document_builder(
        ["Salud mental en adolescentes", "Economía regional", "Clima andino"],
        subjects={"Economía regional": ["Políticas de SALUD"]},
    )
    service, _ = _service([document])

    page = service.harvest("salud")

    assert [record.title for record in page.records] == [
        "Salud mental en adolescentes",
        "Economía regional",
    ]
    assert page.total == 2


def test_keyword_with_regex_metacharacters_is_literal(oai_list_records):
    service, _ = _service([oai_list_records])

    assert service.harvest("(C.I.)").total == 1
    assert service.harvest("C.I").total == 1
    assert service.harvest("C*I").total == 0


def test_pagination_slices_filtered_records_and_reports_filtered_total(oai_document_builder):
    titles = [f"Paper {idx}" for idx in range(25)]
    service, _ = _service([oai_document_builder(titles)])

    page = service.harvest("paper", page=2, page_size=10)

    assert [record.title for record in page.records] == [f"Paper {idx}" for idx in range(10, 20)]
    assert page.total == 25


def test_page_beyond_results_is_empty_but_keeps_total(oai_document_builder):
    service, _ = _service([oai_document_builder(["A", "B"])])

    page = service.harvest("", page=3, page_size=10)

    assert page.records == ()
    assert page.total == 2


def test_default_page_size_comes_from_service(oai_document_builder):
    service, _ = _service([oai_document_builder([f"T{idx}" for idx in range(5)])], page_size=2)

    page = service.search(SearchQuery(keyword="", page=2))

    assert [record.title for record in page.records] == ["T2", "T3"]
    assert page.total == 5


def test_no_records_match_error_is_an_empty_result(oai_document_builder):
    service, _ = _service([oai_document_builder([], error=("noRecordsMatch", "Nothing here"))])

    page = service.harvest("anything")

    assert page.records == ()
    assert page.total == 0


def test_other_protocol_errors_raise_retrieval_error(oai_document_builder):
    service, _ = _service([oai_document_builder([], error=("badArgument", "Illegal date"))])

    with pytest.raises(RetrievalError) as excinfo:
        service.harvest("")

    assert "badArgument" in str(excinfo.value)
    assert excinfo.value.source == "Redalyc"


def test_malformed_document_raises_parse_error():
    service, _ = _service([b"<OAI-PMH><ListRecords>"])

    with pytest.raises(ParseError) as excinfo:
        service.harvest("")

    assert excinfo.value.source == "Redalyc"


def test_single_batch_by_default_even_with_resumption_token(oai_document_builder):
    service, client = _service([oai_document_builder(["A"], token="next")])

    page = service.harvest("")

    assert page.total == 1
    assert len(client.calls) == 1


def test_follows_resumption_tokens_up_to_max_batches(oai_document_builder):
    documents = [
        oai_document_builder(["A", "B"], token="t1"),
        oai_document_builder(["C"], token="t2", start=2),
        oai_document_builder(["D"], start=3),
    ]
    service, client = _service(documents, max_batches=2)

    page = service.harvest("")

    assert [record.title for record in page.records] == ["A", "B", "C"]
    assert len(client.calls) == 2
    assert client.calls[0]["resumption_token"] is None
    assert client.calls[1]["resumption_token"] == "t1"


def test_repeated_search_is_identical(oai_document_builder):
    document = oai_document_builder(["Uno", "Dos"], subjects={"Dos": ["uno"]})
    service, _ = _service([document])

    first = service.harvest("uno")
    second = service.harvest("uno")

    assert first == second
