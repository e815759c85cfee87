# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Generates the research bundle for a catalog indication.

NOTE: These tables are curated estimates (OncoKB, SEER, GLOBOCAN) for a handful
of indications, not a live data feed. Indications without a curated entry get
generic driver-mutation placeholders and generic epidemiology, but never
invented therapies.
"""
import re
from typing import Dict, List, Optional

from .config import settings
from .epidemiology import round_half_up
from .models import (
    CatalogEntry, EpidemiologyEntry, MetricType, PrevalenceEntry, ResearchBundle,
    ResearchIndication, ResearchMutation, ResearchTherapy
)
from .regions import GLOBAL_REGION

# Indication name -> [(gene, alteration, % of patients)]
CURATED_MUTATIONS = {
    "Small Cell Lung Cancer": [
        ("TP53", "Mutation", 90), ("RB1", "Mutation", 90), ("NOTCH1", "Mutation", 25),
        ("MYC", "Amplification", 20), ("PTEN", "Mutation", 10),
    ],
    "Triple Negative Breast Cancer": [
        ("TP53", "Mutation", 80), ("BRCA1", "Oncogenic Mutation", 15), ("BRCA2", "Oncogenic Mutation", 10),
        ("PIK3CA", "Oncogenic Mutation", 10), ("PTEN", "Mutation", 10),
    ],
    "Hepatocellular Carcinoma": [
        ("TP53", "Mutation", 30), ("CTNNB1", "Mutation", 30), ("TERT", "Promoter Mutation", 60),
        ("ARID1A", "Mutation", 10), ("AXIN1", "Mutation", 10),
    ],
    "Multiple Myeloma": [
        ("KRAS", "Oncogenic Mutation", 25), ("NRAS", "Oncogenic Mutation", 20), ("BRAF", "V600E", 4),
        ("TP53", "Mutation", 10), ("DIS3", "Mutation", 10),
    ],
    "Chronic Lymphocytic Leukemia": [
        ("TP53", "Mutation", 10), ("ATM", "Mutation", 15), ("SF3B1", "Mutation", 15),
        ("NOTCH1", "Mutation", 12), ("BIRC3", "Mutation", 5),
    ],
    "Diffuse Large B-Cell Lymphoma": [
        ("MYD88", "L265P", 30), ("CD79B", "Mutation", 20), ("EZH2", "Mutation", 20),
        ("BCL2", "Translocation", 30), ("TP53", "Mutation", 20),
    ],
    "Head and Neck Cancer": [
        ("TP53", "Mutation", 70), ("PIK3CA", "Oncogenic Mutation", 20), ("CDKN2A", "Deletion", 25),
        ("EGFR", "Amplification", 15), ("NOTCH1", "Mutation", 15),
    ],
    "Endometrial Cancer": [
        ("PTEN", "Mutation", 50), ("PIK3CA", "Oncogenic Mutation", 40), ("TP53", "Mutation", 30),
        ("KRAS", "Oncogenic Mutation", 20), ("ARID1A", "Mutation", 30), ("POLE", "Mutation", 10),
    ],
    "Cervical Cancer": [
        ("PIK3CA", "Oncogenic Mutation", 25), ("PTEN", "Mutation", 10), ("TP53", "Mutation", 5),
        ("KRAS", "Oncogenic Mutation", 8), ("STK11", "Mutation", 5),
    ],
    "Esophageal Cancer": [
        ("TP53", "Mutation", 80), ("CDKN2A", "Deletion", 30), ("ERBB2", "Amplification", 20),
        ("PIK3CA", "Oncogenic Mutation", 10), ("KRAS", "Oncogenic Mutation", 5),
    ],
}

# Generic drivers used when an indication has no curated mutation table
DEFAULT_MUTATIONS = [
    ("TP53", "Mutation", 40),
    ("KRAS", "Oncogenic Mutation", 15),
    ("PIK3CA", "Oncogenic Mutation", 10),
]

# Indication name -> [(therapy, mechanism, target genes)]
CURATED_THERAPIES = {
    "Small Cell Lung Cancer": [
        ("Lurbinectedin", "RNA Polymerase II Inhibitor", []),
        ("Topotecan", "Topoisomerase I Inhibitor", ["TOP1"]),
        ("Atezolizumab", "PD-L1 Inhibitor", ["CD274"]),
        ("Durvalumab", "PD-L1 Inhibitor", ["CD274"]),
    ],
    "Triple Negative Breast Cancer": [
        ("Pembrolizumab", "PD-1 Inhibitor", ["PDCD1"]),
        ("Sacituzumab Govitecan", "ADC (Trop-2)", ["TACSTD2"]),
        ("Olaparib", "PARP Inhibitor", ["PARP1", "PARP2"]),
        ("Talazoparib", "PARP Inhibitor", ["PARP1", "PARP2"]),
    ],
    "Hepatocellular Carcinoma": [
        ("Sorafenib", "Multi-kinase Inhibitor", ["RAF1", "VEGFR2", "KIT"]),
        ("Lenvatinib", "Multi-kinase Inhibitor", ["VEGFR1", "VEGFR2", "FGFR1"]),
        ("Atezolizumab + Bevacizumab", "PD-L1 + VEGF Inhibitor", ["CD274", "VEGFA"]),
        ("Cabozantinib", "Multi-kinase Inhibitor", ["MET", "VEGFR2", "AXL"]),
    ],
    "Multiple Myeloma": [
        ("Bortezomib", "Proteasome Inhibitor", ["PSMB5"]),
        ("Lenalidomide", "Immunomodulator", ["CRBN"]),
        ("Daratumumab", "CD38 Antibody", ["CD38"]),
        ("Carfilzomib", "Proteasome Inhibitor", ["PSMB5"]),
        ("Pomalidomide", "Immunomodulator", ["CRBN"]),
    ],
    "Chronic Lymphocytic Leukemia": [
        ("Ibrutinib", "BTK Inhibitor", ["BTK"]),
        ("Acalabrutinib", "BTK Inhibitor", ["BTK"]),
        ("Venetoclax", "BCL-2 Inhibitor", ["BCL2"]),
        ("Obinutuzumab", "CD20 Antibody", ["MS4A1"]),
    ],
}

# Indication name -> USA (prevalence, incidence, 5-year survival %)
CURATED_EPIDEMIOLOGY = {
    "Small Cell Lung Cancer": (35000, 30000, 7),
    "Triple Negative Breast Cancer": (200000, 45000, 77),
    "Hepatocellular Carcinoma": (90000, 42000, 20),
    "Multiple Myeloma": (150000, 35000, 55),
    "Chronic Lymphocytic Leukemia": (200000, 21000, 87),
    "Diffuse Large B-Cell Lymphoma": (100000, 25000, 64),
    "Head and Neck Cancer": (300000, 66000, 67),
    "Endometrial Cancer": (800000, 66000, 81),
    "Cervical Cancer": (280000, 14000, 66),
    "Esophageal Cancer": (50000, 21000, 20),
}
DEFAULT_EPIDEMIOLOGY = (50000, 10000, 50)

# Multipliers applied to the USA figure to derive other regions
REGION_FACTORS = {
    MetricType.PREVALENCE: {"EU": 1.2, "APAC": 2.0},
    MetricType.INCIDENCE: {"EU": 1.1, "APAC": 1.8},
}

METRIC_UNITS = {
    MetricType.PREVALENCE: "patients",
    MetricType.INCIDENCE: "cases/year",
    MetricType.FIVE_YEAR_SURVIVAL: "%",
}

METRIC_ID_TAGS = {
    MetricType.PREVALENCE: "prev",
    MetricType.INCIDENCE: "inc",
    MetricType.FIVE_YEAR_SURVIVAL: "surv",
}


def slugify(name: str) -> str:
    """Lowercases and collapses every run of non-alphanumerics into a single '-'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower())

def indication_id_for(name: str) -> str:
    return f"ind-{slugify(name)}"

def therapy_id_for(name: str) -> str:
    return f"therapy-{slugify(name)}"

def mutation_id_for(gene: str, alteration: str) -> str:
    return f"mut-{gene.lower()}-{slugify(alteration)}"


class ResearchDataGenerator:
    """
    Produces a ResearchBundle for a catalog entry from the curated tables.
    """

    def __init__(self, source: Optional[str] = None, year: Optional[int] = None):
        self.source = source or settings.research_source
        self.year = year or settings.research_year

    def generate_bundle(self, entry: CatalogEntry) -> ResearchBundle:
        indication = ResearchIndication(
            id=indication_id_for(entry.name),
            name=entry.name,
            aliases=list(entry.aliases),
            oncotree_code=entry.oncotree_code,
            source=self.source,
        )
        mutations = self._mutations(entry.name)
        return ResearchBundle(
            indication=indication,
            mutations=mutations,
            therapies=self._therapies(entry.name),
            epidemiology=self._epidemiology(indication.id, entry.name),
            mutation_prevalence=self._mutation_prevalence(indication.id, mutations),
        )

    def _mutations(self, indication_name: str) -> List[ResearchMutation]:
        rows = CURATED_MUTATIONS.get(indication_name, DEFAULT_MUTATIONS)
        return [
            ResearchMutation(
                id=mutation_id_for(gene, alteration),
                gene=gene,
                name=f"{gene} {alteration}",
                alteration=alteration,
                source=self.source,
                percentage=percentage,
            )
            for gene, alteration, percentage in rows
        ]

    def _therapies(self, indication_name: str) -> List[ResearchTherapy]:
        return [
            ResearchTherapy(name=name, mechanism=mechanism, targets=list(targets))
            for name, mechanism, targets in CURATED_THERAPIES.get(indication_name, [])
        ]

    def _epidemiology(self, indication_id: str, indication_name: str) -> List[EpidemiologyEntry]:
        prevalence, incidence, survival = CURATED_EPIDEMIOLOGY.get(indication_name, DEFAULT_EPIDEMIOLOGY)
        usa_values: Dict[MetricType, float] = {
            MetricType.PREVALENCE: prevalence,
            MetricType.INCIDENCE: incidence,
        }
        entries = []
        for metric_type, usa_value in usa_values.items():
            entries.append(self._epi_entry(indication_id, "USA", metric_type, usa_value))
            for region, factor in REGION_FACTORS[metric_type].items():
                entries.append(self._epi_entry(indication_id, region, metric_type, round_half_up(usa_value * factor)))
        entries.append(self._epi_entry(indication_id, "USA", MetricType.FIVE_YEAR_SURVIVAL, survival))
        return entries

    def _epi_entry(self, indication_id: str, region: str, metric_type: MetricType, value: float) -> EpidemiologyEntry:
        return EpidemiologyEntry(
            id=f"epi-{indication_id}-{METRIC_ID_TAGS[metric_type]}-{region.lower()}",
            indication_id=indication_id,
            region=region,
            type=metric_type,
            value=value,
            unit=METRIC_UNITS[metric_type],
            year=self.year,
            source=self.source,
        )

    def _mutation_prevalence(self, indication_id: str, mutations: List[ResearchMutation]) -> List[PrevalenceEntry]:
        return [
            PrevalenceEntry(
                id=f"mp-{m.id}-{indication_id}",
                mutation_id=m.id,
                indication_id=indication_id,
                percentage_of_patients=m.percentage,
                region=GLOBAL_REGION,
                source=self.source,
                year=self.year,
            )
            for m in mutations
        ]
