# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MetricType(str, Enum):
    PREVALENCE = "PREVALENCE"
    INCIDENCE = "INCIDENCE"
    FIVE_YEAR_SURVIVAL = "FIVE_YEAR_SURVIVAL"
    MEDIAN_SURVIVAL_YEARS = "MEDIAN_SURVIVAL_YEARS"


class GraphRecord(BaseModel):
    """
    Base for records deserialized from node properties.
    Graph properties are camelCase; fields accept either the alias or the field name.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Graph entities ---

class Indication(GraphRecord):
    """A disease (cancer type). This is a node in the graph with the :Indication label."""
    id: str
    name: str
    aliases: List[str] = Field(default_factory=list)
    oncotree_code: Optional[str] = Field(None, alias="oncotreeCode")
    source: Optional[str] = None

class Gene(GraphRecord):
    """A gene, keyed by its HUGO symbol."""
    hugo_symbol: str = Field(alias="hugoSymbol")
    name: Optional[str] = None
    id: Optional[str] = None

class Mutation(GraphRecord):
    """A specific genetic alteration belonging to one :Gene."""
    id: str
    name: str
    gene: Optional[str] = None  # HUGO symbol, denormalized onto the node
    alteration: Optional[str] = None
    oncogenic: Optional[str] = None
    source: Optional[str] = None
    alias: Optional[str] = None

class EpidemiologyMetric(GraphRecord):
    """
    A single epidemiology fact for an indication in a region.
    `region` and `indication` are filled in from the traversal, not stored on the node.
    """
    id: Optional[str] = None
    type: MetricType
    value: float
    unit: Optional[str] = None
    year: Optional[int] = None
    source: Optional[str] = None
    region: Optional[str] = None
    indication: Optional[str] = None

class MutationPrevalence(GraphRecord):
    """Share of an indication's patients carrying a mutation."""
    id: Optional[str] = None
    percentage_of_patients: float = Field(alias="percentageOfPatients", ge=0, le=100)
    year: Optional[int] = None
    source: Optional[str] = None
    region: Optional[str] = None

class Therapy(GraphRecord):
    id: Optional[str] = None
    name: str
    mechanism: Optional[str] = None
    status: Optional[str] = Field(None, validation_alias=AliasChoices("status", "approvalStatus"))
    annual_cost_usa: Optional[float] = Field(None, alias="annualCostUSA")
    targets: List[str] = Field(default_factory=list)
    brand_names: List[str] = Field(default_factory=list, alias="brandNames")
    source: Optional[str] = None

class DiagnosticModality(GraphRecord):
    id: Optional[str] = None
    name: str
    type: Optional[str] = None  # modality type, e.g. 'Liquid Biopsy'
    invasiveness: Optional[str] = None
    indication: Optional[str] = None  # set when reached through an indication

class Actionability(GraphRecord):
    """
    Clinical-evidence record linking a mutation to therapy.
    Covers both :Actionability and :TherapeuticActionability nodes; `kind` holds the label.
    """
    kind: str = "Actionability"
    level: Optional[str] = None
    evidence: Optional[str] = None
    drugs: List[str] = Field(default_factory=list)
    fda_approved: Optional[bool] = Field(None, alias="fdaApproved")
    indication: Optional[str] = None


# --- Read-path results ---

class IndicationTotals(BaseModel):
    indication_id: str
    total_prevalence: int = 0
    total_incidence: int = 0

class MutationEstimate(BaseModel):
    """
    Patient estimate for one (mutation, indication) pair.
    percentage_of_patients is None when no prevalence was recorded; the estimates are then 0.
    """
    mutation_id: str
    indication_id: str
    percentage_of_patients: Optional[float] = None
    estimated_prevalence_patients: int = 0
    estimated_incidence_patients: int = 0

class CrossIndicationEstimate(BaseModel):
    mutation_id: str
    estimated_patients: int = 0
    estimated_new_cases: int = 0

class IndicationSummary(BaseModel):
    id: str
    name: str
    rank: int = 0
    total_prevalence: int = 0
    total_incidence: int = 0

class MutationSummary(BaseModel):
    id: str
    name: str
    rank: int = 0
    gene: Optional[str] = None
    alteration: Optional[str] = None
    oncogenic: str = "Unknown"
    actionability_count: int = 0
    estimated_patients: int = 0
    estimated_new_cases: int = 0

class DossierMutation(Mutation):
    percentage_of_patients: Optional[float] = None
    estimated_prevalence_patients: int = 0
    estimated_incidence_patients: int = 0

class ResolvedTherapy(Therapy):
    """
    A therapy surfaced through a mutation's actionability.
    curated is False for synthetic records built from a bare drug name.
    """
    curated: bool = True
    indication: Optional[str] = None
    level: Optional[str] = None
    fda_approved: Optional[bool] = None

class IndicationDossier(BaseModel):
    indication: Indication
    mutations: List[DossierMutation] = Field(default_factory=list)
    epidemiology: List[EpidemiologyMetric] = Field(default_factory=list)
    therapies: List[Therapy] = Field(default_factory=list)
    diagnostics: List[DiagnosticModality] = Field(default_factory=list)

class MutationDossier(BaseModel):
    mutation: Mutation
    gene: Optional[Gene] = None
    indications: List[Indication] = Field(default_factory=list)
    epidemiology: List[EpidemiologyMetric] = Field(default_factory=list)
    actionability: List[Actionability] = Field(default_factory=list)
    therapies: List[ResolvedTherapy] = Field(default_factory=list)
    diagnostics: List[DiagnosticModality] = Field(default_factory=list)


# --- Catalog & write-path ---

class CatalogEntry(BaseModel):
    """A known oncology indication that may or may not be in the graph yet."""
    model_config = ConfigDict(frozen=True)

    name: str
    aliases: Tuple[str, ...] = ()
    oncotree_code: str

class ResearchIndication(BaseModel):
    id: str
    name: str
    aliases: List[str] = Field(default_factory=list)
    oncotree_code: str
    source: str

class ResearchMutation(BaseModel):
    id: str
    gene: str
    name: str
    alteration: str
    oncogenic: str = "Oncogenic"
    source: str
    percentage: float = Field(ge=0, le=100)

class ResearchTherapy(BaseModel):
    name: str
    mechanism: str
    targets: List[str] = Field(default_factory=list)

class EpidemiologyEntry(BaseModel):
    id: str
    indication_id: str
    region: str
    type: MetricType
    value: float
    unit: str
    year: int
    source: str

class PrevalenceEntry(BaseModel):
    id: str
    mutation_id: str
    indication_id: str
    percentage_of_patients: float = Field(ge=0, le=100)
    region: str = "GLOBAL"
    source: str
    year: int

class ResearchBundle(BaseModel):
    """
    Everything generated for one catalog entry, ready to be merged into the graph.
    """
    indication: ResearchIndication
    mutations: List[ResearchMutation] = Field(default_factory=list)
    therapies: List[ResearchTherapy] = Field(default_factory=list)
    epidemiology: List[EpidemiologyEntry] = Field(default_factory=list)
    mutation_prevalence: List[PrevalenceEntry] = Field(default_factory=list)

class ImportSummary(BaseModel):
    mutations: int = 0
    therapies: int = 0
    epidemiology_entries: int = 0
    prevalence_entries: int = 0

class AddIndicationResult(BaseModel):
    success: bool
    indication_name: str
    counts: ImportSummary
