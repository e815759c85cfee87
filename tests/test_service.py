import pytest
from unittest.mock import MagicMock, patch

from py_neo_miipa import queries
from py_neo_miipa.catalog import default_catalog
from py_neo_miipa.exceptions import UnknownCatalogEntryError
from py_neo_miipa.models import (
    EpidemiologyMetric, ImportSummary, Indication, MetricType, Mutation, MutationPrevalence
)
from py_neo_miipa.service import MiipaService


@pytest.fixture
def store():
    s = MagicMock()
    s.read.side_effect = lambda work: work(MagicMock())
    return s


def _metrics(prevalence, incidence, region="USA"):
    return [
        EpidemiologyMetric(type=MetricType.PREVALENCE, value=prevalence, region=region),
        EpidemiologyMetric(type=MetricType.INCIDENCE, value=incidence, region=region),
    ]


@patch.object(queries, "fetch_epidemiology")
@patch.object(queries, "fetch_all_indications")
def test_list_top_indications(mock_all, mock_epi, store):
    mock_all.return_value = [
        Indication(id="ind-a", name="Alpha"),
        Indication(id="ind-b", name="Beta"),
        Indication(id="ind-c", name="Gamma"),
    ]
    mock_epi.return_value = {
        "ind-a": _metrics(100, 50),
        "ind-b": _metrics(300, 10) + _metrics(1000, 1000, region="EU"),
    }
    service = MiipaService(store)

    ranked = service.list_top_indications(limit=2, regions=["USA"])

    assert [(s.id, s.rank, s.total_prevalence) for s in ranked] == [("ind-b", 1, 300), ("ind-a", 2, 100)]

    by_incidence = service.list_top_indications(regions=["USA"], sort_by="incidence", sort_order="asc")
    assert [s.id for s in by_incidence] == ["ind-c", "ind-b", "ind-a"]
    assert by_incidence[0].total_incidence == 0


@patch.object(queries, "fetch_epidemiology", return_value={})
@patch.object(queries, "fetch_all_indications", return_value=[Indication(id="ind-a", name="Alpha")])
def test_indications_cannot_sort_by_actionability(_, __, store):
    with pytest.raises(ValueError):
        MiipaService(store).list_top_indications(sort_by="actionability")


@patch.object(queries, "fetch_epidemiology")
@patch.object(queries, "fetch_prevalence_links")
@patch.object(queries, "fetch_mutation_listing")
def test_list_all_mutations(mock_listing, mock_links, mock_epi, store):
    mock_listing.return_value = [
        queries.MutationListingRow(Mutation(id="m-a", name="A", alteration="V600E"), "BRAF", 3),
        queries.MutationListingRow(Mutation(id="m-b", name="B", oncogenic="Likely Oncogenic"), "KRAS", 3),
        queries.MutationListingRow(Mutation(id="m-c", name="C"), None, 0),
    ]
    mock_links.return_value = [
        queries.PrevalenceLink("m-b", "ind-x", MutationPrevalence(percentage_of_patients=10)),
    ]
    mock_epi.return_value = {"ind-x": _metrics(1000, 100)}
    service = MiipaService(store)

    by_actionability = service.list_all_mutations(regions=["USA"])
    assert [m.id for m in by_actionability] == ["m-a", "m-b", "m-c"]
    assert by_actionability[0].oncogenic == "Unknown"
    assert by_actionability[0].gene == "BRAF"
    assert by_actionability[1].estimated_patients == 100
    assert by_actionability[1].estimated_new_cases == 10

    by_prevalence = service.list_all_mutations(limit=1, sort_by="prevalence", regions=["USA"])
    assert [(m.id, m.rank) for m in by_prevalence] == [("m-b", 1)]


def test_add_indication_unknown_name_never_touches_the_store(store):
    with pytest.raises(UnknownCatalogEntryError):
        MiipaService(store).add_indication("Not A Cancer")
    store.write.assert_not_called()
    store.read.assert_not_called()


@patch("py_neo_miipa.service.IngestionEngine")
def test_add_indication_by_alias(mock_engine, store):
    mock_engine.return_value.import_bundle.return_value = ImportSummary(mutations=5, therapies=5, epidemiology_entries=7, prevalence_entries=5)
    generator = MagicMock()
    service = MiipaService(store, catalog=default_catalog(), generator=generator)

    result = service.add_indication("plasma cell myeloma")

    assert result.success
    assert result.indication_name == "Multiple Myeloma"
    assert result.counts.epidemiology_entries == 7
    generator.generate_bundle.assert_called_once_with(default_catalog().find("Multiple Myeloma"))
    mock_engine.return_value.import_bundle.assert_called_once_with(generator.generate_bundle.return_value)


def test_find_undiscovered_uses_default_limit(store):
    service = MiipaService(store)
    service.discovery = MagicMock()
    service.find_undiscovered_indications("lung")
    service.discovery.find_undiscovered.assert_called_once_with("lung", 10)
