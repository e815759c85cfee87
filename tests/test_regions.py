import pytest

from py_neo_miipa.config import settings
from py_neo_miipa.regions import RegionFilter, parse_regions, region_filter


def test_none_selects_configured_defaults(monkeypatch):
    monkeypatch.setattr(settings, "default_regions", ["USA", "EU"])
    selected = region_filter(None)
    assert selected.names == ["USA", "EU"]
    assert "APAC" not in selected


def test_explicit_empty_selects_nothing():
    selected = region_filter([])
    assert len(selected) == 0
    assert "USA" not in selected


def test_filter_keeps_order_and_drops_duplicates():
    selected = region_filter(["EU", "USA", "EU"])
    assert selected.names == ["EU", "USA"]
    assert selected == RegionFilter(["USA", "EU"])


def test_unknown_region_is_kept_verbatim():
    """Region names are open-ended; nothing is normalized."""
    selected = region_filter(["LATAM", "usa"])
    assert "LATAM" in selected
    assert "USA" not in selected


def test_existing_filter_passes_through():
    f = RegionFilter(["APAC"])
    assert region_filter(f) is f


@pytest.mark.parametrize("raw, expected", [
    (None, None),
    ("USA", ["USA"]),
    ("USA, EU ,APAC", ["USA", "EU", "APAC"]),
    ("USA,,", ["USA"]),
    ("", []),
])
def test_parse_regions(raw, expected):
    assert parse_regions(raw) == expected


def test_bare_string_is_one_region():
    selected = region_filter("USA")
    assert selected.names == ["USA"]
    assert "U" not in selected
