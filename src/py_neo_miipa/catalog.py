# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
The registry of known oncology indications.

This is the universe of indications a research import may add to the graph.
Classification codes are OncoTree codes: http://oncotree.mskcc.org

NOTE: The list is curated by hand and is not exhaustive.
"""
from functools import lru_cache
from typing import Iterator, Optional, Tuple

from .models import CatalogEntry

# (canonical name, aliases, OncoTree code)
KNOWN_ONCOLOGY_INDICATIONS = (
    # Solid Tumors
    ("Non-Small Cell Lung Cancer", ["NSCLC", "Lung Adenocarcinoma", "Lung Squamous Cell Carcinoma"], "NSCLC"),
    ("Small Cell Lung Cancer", ["SCLC"], "SCLC"),
    ("Breast Cancer", ["Breast Carcinoma", "Invasive Breast Cancer"], "BREAST"),
    ("Triple Negative Breast Cancer", ["TNBC"], "TNBC"),
    ("HER2+ Breast Cancer", ["HER2 Positive Breast Cancer"], "BRCA"),
    ("Colorectal Cancer", ["CRC", "Colon Cancer", "Rectal Cancer"], "CRC"),
    ("Melanoma", ["Cutaneous Melanoma", "Malignant Melanoma"], "MEL"),
    ("Uveal Melanoma", ["Ocular Melanoma", "Eye Melanoma"], "UM"),
    ("Prostate Cancer", ["Prostate Adenocarcinoma", "Castration-Resistant Prostate Cancer", "CRPC"], "PRAD"),
    ("Ovarian Cancer", ["Ovarian Carcinoma", "High-Grade Serous Ovarian Cancer"], "OV"),
    ("Pancreatic Cancer", ["Pancreatic Adenocarcinoma", "PDAC"], "PAAD"),
    ("Gastric Cancer", ["Stomach Cancer", "Gastric Adenocarcinoma"], "STAD"),
    ("Esophageal Cancer", ["Esophageal Adenocarcinoma", "Esophageal Squamous Cell Carcinoma"], "ESCA"),
    ("Hepatocellular Carcinoma", ["HCC", "Liver Cancer", "Primary Liver Cancer"], "HCC"),
    ("Cholangiocarcinoma", ["Bile Duct Cancer", "Intrahepatic Cholangiocarcinoma"], "CHOL"),
    ("Renal Cell Carcinoma", ["RCC", "Kidney Cancer", "Clear Cell RCC"], "RCC"),
    ("Bladder Cancer", ["Urothelial Carcinoma", "Transitional Cell Carcinoma"], "BLCA"),
    ("Head and Neck Cancer", ["HNSCC", "Head and Neck Squamous Cell Carcinoma"], "HNSC"),
    ("Thyroid Cancer", ["Papillary Thyroid Cancer", "Follicular Thyroid Cancer", "Medullary Thyroid Cancer"], "THCA"),
    ("Anaplastic Thyroid Cancer", ["ATC", "Undifferentiated Thyroid Cancer"], "THAP"),
    ("Glioblastoma", ["GBM", "Glioblastoma Multiforme", "Grade IV Glioma"], "GBM"),
    ("Glioma", ["Brain Tumor", "Astrocytoma", "Oligodendroglioma"], "DIFG"),
    ("Mesothelioma", ["Malignant Pleural Mesothelioma", "MPM"], "MESO"),
    ("Sarcoma", ["Soft Tissue Sarcoma", "STS"], "SARC"),
    ("Gastrointestinal Stromal Tumor", ["GIST"], "GIST"),
    ("Ewing Sarcoma", ["Ewing's Sarcoma"], "ES"),
    ("Osteosarcoma", ["Bone Cancer", "Osteogenic Sarcoma"], "OS"),
    ("Cervical Cancer", ["Cervical Carcinoma", "Cervical Squamous Cell Carcinoma"], "CESC"),
    ("Endometrial Cancer", ["Uterine Cancer", "Endometrial Carcinoma"], "UCEC"),
    ("Testicular Cancer", ["Testicular Germ Cell Tumor", "Seminoma", "Non-Seminoma"], "TGCT"),
    ("Neuroblastoma", ["NB", "Pediatric Neuroblastoma"], "NBL"),
    ("Wilms Tumor", ["Nephroblastoma", "Pediatric Kidney Cancer"], "WT"),
    ("Retinoblastoma", ["Eye Cancer", "Pediatric Retinoblastoma"], "RB"),
    ("Merkel Cell Carcinoma", ["MCC", "Neuroendocrine Carcinoma of Skin"], "MCC"),
    ("Basal Cell Carcinoma", ["BCC", "Skin Cancer"], "BCC"),
    ("Squamous Cell Carcinoma of Skin", ["Cutaneous SCC", "cSCC"], "CSCC"),
    ("Adrenocortical Carcinoma", ["ACC", "Adrenal Cancer"], "ACC"),
    ("Pheochromocytoma", ["PHEO", "Paraganglioma"], "PCPG"),
    ("Neuroendocrine Tumor", ["NET", "Carcinoid Tumor"], "NET"),

    # Hematologic Malignancies
    ("Acute Myeloid Leukemia", ["AML", "Acute Myelogenous Leukemia"], "AML"),
    ("Acute Lymphoblastic Leukemia", ["ALL", "Acute Lymphocytic Leukemia"], "ALL"),
    ("Chronic Myeloid Leukemia", ["CML", "Chronic Myelogenous Leukemia"], "CML"),
    ("Chronic Lymphocytic Leukemia", ["CLL", "Small Lymphocytic Lymphoma"], "CLL"),
    ("Myelodysplastic Syndrome", ["MDS", "Myelodysplasia"], "MDS"),
    ("Myeloproliferative Neoplasm", ["MPN", "Polycythemia Vera", "Essential Thrombocythemia", "Myelofibrosis"], "MPN"),
    ("Multiple Myeloma", ["MM", "Plasma Cell Myeloma"], "MM"),
    ("Hodgkin Lymphoma", ["HL", "Hodgkin's Disease"], "HL"),
    ("Non-Hodgkin Lymphoma", ["NHL"], "NHL"),
    ("Diffuse Large B-Cell Lymphoma", ["DLBCL"], "DLBCL"),
    ("Follicular Lymphoma", ["FL"], "FL"),
    ("Mantle Cell Lymphoma", ["MCL"], "MCL"),
    ("Marginal Zone Lymphoma", ["MZL", "MALT Lymphoma"], "MZL"),
    ("Burkitt Lymphoma", ["BL"], "BL"),
    ("T-Cell Lymphoma", ["TCL", "Peripheral T-Cell Lymphoma", "PTCL"], "PTCL"),
    ("Cutaneous T-Cell Lymphoma", ["CTCL", "Mycosis Fungoides", "Sezary Syndrome"], "CTCL"),
    ("Waldenstrom Macroglobulinemia", ["WM", "Lymphoplasmacytic Lymphoma"], "WM"),
    ("Hairy Cell Leukemia", ["HCL"], "HCL"),
    ("Systemic Mastocytosis", ["SM", "Mast Cell Disease"], "SM"),

    # Rare Tumors
    ("Thymoma", ["Thymic Carcinoma", "Thymic Tumor"], "THYM"),
    ("Desmoid Tumor", ["Aggressive Fibromatosis", "Desmoid Fibromatosis"], "DES"),
    ("Chordoma", ["Spinal Chordoma", "Skull Base Chordoma"], "CHOR"),
    ("Giant Cell Tumor of Bone", ["GCT", "Osteoclastoma"], "GCT"),
    ("Dermatofibrosarcoma Protuberans", ["DFSP"], "DFSP"),
    ("Inflammatory Myofibroblastic Tumor", ["IMT"], "IMT"),
    ("Epithelioid Hemangioendothelioma", ["EHE"], "EHE"),
    ("Alveolar Soft Part Sarcoma", ["ASPS"], "ASPS"),
    ("Clear Cell Sarcoma", ["CCS", "Melanoma of Soft Parts"], "CCS"),
    ("Perivascular Epithelioid Cell Tumor", ["PEComa"], "PEC"),
)


class KnownEntityCatalog:
    """
    Read-only registry of catalog entries. Entries keep their declaration order,
    which is also the order discovery results are returned in.
    """

    def __init__(self, entries: Tuple[CatalogEntry, ...]):
        self._entries = tuple(entries)
        self._by_name = {}
        for entry in self._entries:
            for key in (entry.name, *entry.aliases):
                # First declaration wins if two entries share an alias
                self._by_name.setdefault(key.lower(), entry)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    def find(self, name: str) -> Optional[CatalogEntry]:
        """Exact, case-insensitive lookup by canonical name or alias."""
        return self._by_name.get(name.strip().lower())


@lru_cache(maxsize=None)
def default_catalog() -> KnownEntityCatalog:
    """The process-wide catalog, built on first use."""
    return KnownEntityCatalog(tuple(
        CatalogEntry(name=name, aliases=tuple(aliases), oncotree_code=code)
        for name, aliases, code in KNOWN_ONCOLOGY_INDICATIONS
    ))
