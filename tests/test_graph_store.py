import pytest
from unittest.mock import MagicMock, patch
from neo4j.exceptions import ServiceUnavailable

from py_neo_miipa.exceptions import GraphDataError, StoreUnavailableError
from py_neo_miipa.graph_store import GraphStore, fetch, to_model
from py_neo_miipa.models import MutationPrevalence, Therapy


def test_read_runs_work_in_a_read_transaction():
    driver = MagicMock()
    session = driver.session.return_value.__enter__.return_value
    session.execute_read.return_value = "result"
    work = MagicMock()

    assert GraphStore(driver, database="oncology").read(work) == "result"
    driver.session.assert_called_once_with(database="oncology")
    session.execute_read.assert_called_once_with(work)


def test_driver_outage_becomes_store_unavailable():
    driver = MagicMock()
    driver.session.return_value.__enter__.return_value.execute_write.side_effect = ServiceUnavailable("down")
    with pytest.raises(StoreUnavailableError):
        GraphStore(driver).write(MagicMock())


def test_execute_passes_database():
    driver = MagicMock()
    GraphStore(driver, database="oncology").execute("RETURN 1")
    driver.execute_query.assert_called_once_with("RETURN 1", parameters_=None, database_="oncology")


@patch("py_neo_miipa.graph_store.GraphDatabase")
def test_from_settings_uses_configured_credentials(mock_graph_database):
    store = GraphStore.from_settings()
    mock_graph_database.driver.assert_called_once()
    assert store.driver is mock_graph_database.driver.return_value


def test_fetch_materializes_records():
    tx = MagicMock()
    record = MagicMock()
    record.data.return_value = {"id": "ind-x"}
    tx.run.return_value = [record]
    assert fetch(tx, "MATCH (i) RETURN i.id AS id", limit=1) == [{"id": "ind-x"}]
    tx.run.assert_called_once_with("MATCH (i) RETURN i.id AS id", {"limit": 1})


def test_to_model_reads_camel_case_properties():
    therapy = to_model(Therapy, {"name": "Vemurafenib", "brandNames": ["Zelboraf"], "approvalStatus": "APPROVED", "annualCostUSA": 1.5})
    assert therapy.brand_names == ["Zelboraf"]
    assert therapy.status == "APPROVED"
    assert therapy.annual_cost_usa == 1.5


def test_to_model_rejects_invalid_nodes():
    with pytest.raises(GraphDataError):
        to_model(MutationPrevalence, {"id": "mp-bad", "percentageOfPatients": 140})
