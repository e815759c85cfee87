import pytest

from py_neo_miipa.catalog import default_catalog
from py_neo_miipa.models import CatalogEntry, MetricType
from py_neo_miipa.research import (
    DEFAULT_MUTATIONS, ResearchDataGenerator, indication_id_for, mutation_id_for,
    slugify, therapy_id_for
)


@pytest.fixture
def generator():
    return ResearchDataGenerator(source="Deep_Research", year=2024)


@pytest.mark.parametrize("name, expected", [
    ("Multiple Myeloma", "multiple-myeloma"),
    ("HER2+ Breast Cancer", "her2-breast-cancer"),
    ("Atezolizumab + Bevacizumab", "atezolizumab-bevacizumab"),
    ("Diffuse Large B-Cell Lymphoma", "diffuse-large-b-cell-lymphoma"),
])
def test_slugify(name, expected):
    assert slugify(name) == expected


def test_id_helpers():
    assert indication_id_for("Multiple Myeloma") == "ind-multiple-myeloma"
    assert therapy_id_for("Bortezomib") == "therapy-bortezomib"
    assert mutation_id_for("BRAF", "V600E") == "mut-braf-v600e"
    assert mutation_id_for("KRAS", "Oncogenic Mutation") == "mut-kras-oncogenic-mutation"


def test_curated_bundle(generator):
    bundle = generator.generate_bundle(default_catalog().find("Multiple Myeloma"))

    assert bundle.indication.id == "ind-multiple-myeloma"
    assert bundle.indication.oncotree_code == "MM"
    assert bundle.indication.aliases == ["MM", "Plasma Cell Myeloma"]
    assert len(bundle.mutations) == 5
    assert len(bundle.therapies) == 5
    assert len(bundle.epidemiology) == 7
    assert len(bundle.mutation_prevalence) == 5
    braf = next(m for m in bundle.mutations if m.gene == "BRAF")
    assert braf.id == "mut-braf-v600e"
    assert braf.name == "BRAF V600E"


def test_epidemiology_derives_other_regions_from_usa(generator):
    bundle = generator.generate_bundle(default_catalog().find("Multiple Myeloma"))
    values = {(e.type, e.region): e.value for e in bundle.epidemiology}

    assert values[(MetricType.PREVALENCE, "USA")] == 150000
    assert values[(MetricType.PREVALENCE, "EU")] == 180000
    assert values[(MetricType.PREVALENCE, "APAC")] == 300000
    assert values[(MetricType.INCIDENCE, "USA")] == 35000
    assert values[(MetricType.INCIDENCE, "EU")] == 38500
    assert values[(MetricType.INCIDENCE, "APAC")] == 63000
    assert values[(MetricType.FIVE_YEAR_SURVIVAL, "USA")] == 55
    assert bundle.epidemiology[0].id == "epi-ind-multiple-myeloma-prev-usa"
    assert {e.unit for e in bundle.epidemiology if e.type == MetricType.INCIDENCE} == {"cases/year"}


def test_prevalence_entries_are_global(generator):
    bundle = generator.generate_bundle(default_catalog().find("Multiple Myeloma"))
    entry = bundle.mutation_prevalence[0]
    assert entry.region == "GLOBAL"
    assert entry.id == f"mp-{entry.mutation_id}-ind-multiple-myeloma"
    assert entry.year == 2024


def test_uncurated_indication_uses_generic_data_and_no_therapies(generator):
    entry = CatalogEntry(name="Chordoma", aliases=(), oncotree_code="CHDM")
    bundle = generator.generate_bundle(entry)

    assert [m.gene for m in bundle.mutations] == [gene for gene, _, _ in DEFAULT_MUTATIONS]
    assert bundle.therapies == []
    values = {(e.type, e.region): e.value for e in bundle.epidemiology}
    assert values[(MetricType.PREVALENCE, "USA")] == 50000
    assert values[(MetricType.INCIDENCE, "APAC")] == 18000


def test_source_defaults_from_settings():
    generator = ResearchDataGenerator()
    bundle = generator.generate_bundle(CatalogEntry(name="Chordoma", oncotree_code="CHDM"))
    assert bundle.indication.source == "Deep_Research"
    assert all(m.source == "Deep_Research" for m in bundle.mutations)
