from unittest.mock import MagicMock

from py_neo_miipa import queries
from py_neo_miipa.catalog import KnownEntityCatalog, default_catalog
from py_neo_miipa.discovery import DiscoveryEngine, filter_undiscovered
from py_neo_miipa.models import CatalogEntry

ENTRIES = (
    CatalogEntry(name="Breast Cancer", aliases=("Breast Carcinoma", "Invasive Breast Cancer"), oncotree_code="BREAST"),
    CatalogEntry(name="Ovarian Cancer", aliases=("Ovarian Carcinoma",), oncotree_code="OV"),
    CatalogEntry(name="Glioblastoma", aliases=("GBM",), oncotree_code="GBM"),
)


def test_entry_is_excluded_when_any_alias_exists():
    """'carcinoma' hits the Breast Carcinoma alias, but Breast Cancer itself is in the graph."""
    matches = filter_undiscovered(ENTRIES, {"breast cancer"}, "carcinoma", 10)
    assert [e.name for e in matches] == ["Ovarian Cancer"]


def test_entry_is_excluded_when_stored_under_an_alias():
    matches = filter_undiscovered(ENTRIES, {"gbm"}, "glio", 10)
    assert matches == []


def test_query_is_case_insensitive_and_matches_aliases():
    matches = filter_undiscovered(ENTRIES, set(), "GBM", 10)
    assert [e.name for e in matches] == ["Glioblastoma"]


def test_limit_and_catalog_order():
    assert [e.name for e in filter_undiscovered(ENTRIES, set(), "cancer", 1)] == ["Breast Cancer"]
    assert filter_undiscovered(ENTRIES, set(), "cancer", 0) == []


def test_engine_reads_existing_names_from_store():
    store = MagicMock()
    store.read.return_value = {"non-small cell lung cancer"}
    engine = DiscoveryEngine(store, default_catalog())

    matches = engine.find_undiscovered("lung", 10)

    store.read.assert_called_once_with(queries.fetch_existing_names)
    assert [e.name for e in matches] == ["Small Cell Lung Cancer"]
    assert len(matches) <= 10


def test_empty_graph_returns_every_match_up_to_limit():
    store = MagicMock()
    store.read.return_value = set()
    engine = DiscoveryEngine(store, KnownEntityCatalog(ENTRIES))
    assert len(engine.find_undiscovered("", 2)) == 2
