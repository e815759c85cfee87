import pytest
from unittest.mock import MagicMock, call

from py_neo_miipa.catalog import default_catalog
from py_neo_miipa.exceptions import IngestionError
from py_neo_miipa.ingestion import CONSTRAINTS, IngestionEngine
from py_neo_miipa.research import ResearchDataGenerator


@pytest.fixture
def bundle():
    return ResearchDataGenerator(source="Deep_Research", year=2024).generate_bundle(default_catalog().find("Multiple Myeloma"))


def _store_with(tx):
    store = MagicMock()
    store.write.side_effect = lambda work: work(tx)
    return store


def _tx_returning_ids():
    tx = MagicMock()
    record = MagicMock()
    record.data.return_value = {"id": "x"}
    tx.run.side_effect = lambda query, params: [record]
    return tx


def test_import_runs_in_one_write_transaction(bundle):
    tx = _tx_returning_ids()
    store = _store_with(tx)

    summary = IngestionEngine(store).import_bundle(bundle)

    store.write.assert_called_once()
    store.read.assert_not_called()
    assert summary.mutations == 5
    assert summary.therapies == 5
    assert summary.epidemiology_entries == 7
    assert summary.prevalence_entries == 5
    # indication + mutations + therapies + epidemiology + prevalence
    assert tx.run.call_count == 1 + 5 + 5 + 7 + 5


def test_import_passes_graph_parameters(bundle):
    tx = _tx_returning_ids()
    IngestionEngine(_store_with(tx)).import_bundle(bundle)

    params = [c.args[1] for c in tx.run.call_args_list]
    assert params[0]["id"] == "ind-multiple-myeloma"
    assert params[0]["oncotree_code"] == "MM"
    therapy_params = [p for p in params if p.get("id", "").startswith("therapy-")]
    assert therapy_params[0]["id"] == "therapy-bortezomib"
    assert therapy_params[0]["indication_id"] == "ind-multiple-myeloma"
    epi_params = [p for p in params if p.get("id", "").startswith("epi-")]
    assert epi_params[0]["type"] == "PREVALENCE"
    assert all("percentage" not in p for p in params)


def test_statement_matching_nothing_aborts_import(bundle):
    tx = MagicMock()
    tx.run.return_value = []

    with pytest.raises(IngestionError):
        IngestionEngine(_store_with(tx)).import_bundle(bundle)
    assert tx.run.call_count == 1


def test_ensure_constraints_covers_upsert_keys():
    store = MagicMock()
    IngestionEngine(store).ensure_constraints()

    assert store.execute.call_args_list == [call(statement) for statement in CONSTRAINTS]
    joined = " ".join(CONSTRAINTS)
    for key in ("Indication) REQUIRE i.id", "Gene) REQUIRE g.hugoSymbol", "Mutation) REQUIRE m.id",
                "Therapy) REQUIRE t.id", "Region) REQUIRE r.name"):
        assert key in joined
    assert "EpidemiologyMetric" not in joined
    assert "MutationPrevalence" not in joined
