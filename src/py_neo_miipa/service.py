# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
The public operations of the MIIPA graph core.

MiipaService is what an HTTP layer or the CLI talks to. It owns no state
beyond its collaborators; every call reads or writes the graph directly.
"""
from typing import Iterable, List, Optional

from . import queries
from .catalog import KnownEntityCatalog, default_catalog
from .config import settings
from .discovery import DiscoveryEngine
from .dossier import DossierComposer
from .epidemiology import EpidemiologyAggregator, indication_totals, round_half_up
from .exceptions import UnknownCatalogEntryError
from .graph_store import GraphStore
from .ingestion import IngestionEngine
from .models import (
    AddIndicationResult, CatalogEntry, CrossIndicationEstimate, IndicationDossier,
    IndicationSummary, IndicationTotals, MutationDossier, MutationEstimate,
    MutationSummary
)
from .ranking import SortBy, SortOrder, assign_ranks, sort_ranked
from .regions import region_filter
from .research import ResearchDataGenerator


class MiipaService:

    def __init__(
        self,
        store: GraphStore,
        catalog: Optional[KnownEntityCatalog] = None,
        generator: Optional[ResearchDataGenerator] = None
    ):
        self.store = store
        self.catalog = catalog or default_catalog()
        self.generator = generator or ResearchDataGenerator()
        self.aggregator = EpidemiologyAggregator(store)
        self.dossiers = DossierComposer(store)
        self.discovery = DiscoveryEngine(store, self.catalog)
        self.ingestion = IngestionEngine(store)

    # --- Ranked lists ---

    def list_top_indications(
        self,
        limit: Optional[int] = None,
        regions: Optional[Iterable[str]] = None,
        sort_by: SortBy = SortBy.PREVALENCE,
        sort_order: Optional[SortOrder] = None
    ) -> List[IndicationSummary]:
        """
        Every indication with its region-filtered totals, sorted and truncated to `limit`.
        Indications without any epidemiology are listed with zero totals.
        """
        limit = settings.default_indication_limit if limit is None else limit
        selected = region_filter(regions)

        def work(tx):
            return queries.fetch_all_indications(tx), queries.fetch_epidemiology(tx)

        indications, metrics = self.store.read(work)
        summaries = []
        for indication in indications:
            prevalence, incidence = indication_totals(metrics.get(indication.id, []), selected)
            summaries.append(IndicationSummary(
                id=indication.id,
                name=indication.name,
                total_prevalence=round_half_up(prevalence),
                total_incidence=round_half_up(incidence),
            ))

        ranked = sort_ranked(summaries, sort_by, sort_order, {
            SortBy.PREVALENCE: lambda s: s.total_prevalence,
            SortBy.INCIDENCE: lambda s: s.total_incidence,
        })
        return assign_ranks(ranked[:max(limit, 0)])

    def list_all_mutations(
        self,
        limit: Optional[int] = None,
        sort_by: SortBy = SortBy.ACTIONABILITY,
        sort_order: Optional[SortOrder] = None,
        regions: Optional[Iterable[str]] = None
    ) -> List[MutationSummary]:
        """
        Every mutation with its actionability count and cross-indication estimates,
        sorted and truncated to `limit`.
        """
        limit = settings.default_mutation_limit if limit is None else limit
        selected = region_filter(regions)

        def work(tx):
            return (
                queries.fetch_mutation_listing(tx),
                queries.fetch_prevalence_links(tx),
                queries.fetch_epidemiology(tx),
            )

        listing, links, metrics = self.store.read(work)
        estimates = EpidemiologyAggregator.estimates_by_mutation(links, metrics, selected)

        summaries = []
        for row in listing:
            patients, new_cases = estimates.get(row.mutation.id, (0, 0))
            summaries.append(MutationSummary(
                id=row.mutation.id,
                name=row.mutation.name,
                gene=row.gene or row.mutation.gene,
                alteration=row.mutation.alteration,
                oncogenic=row.mutation.oncogenic or "Unknown",
                actionability_count=row.actionability_count,
                estimated_patients=patients,
                estimated_new_cases=new_cases,
            ))

        ranked = sort_ranked(summaries, sort_by, sort_order, {
            SortBy.PREVALENCE: lambda s: s.estimated_patients,
            SortBy.INCIDENCE: lambda s: s.estimated_new_cases,
            SortBy.ACTIONABILITY: lambda s: s.actionability_count,
        })
        return assign_ranks(ranked[:max(limit, 0)])

    # --- Dossiers & estimates ---

    def get_indication_dossier(self, indication_id: str, regions: Optional[Iterable[str]] = None) -> IndicationDossier:
        return self.dossiers.compose_indication_dossier(indication_id, regions)

    def get_mutation_dossier(self, mutation_id: str, regions: Optional[Iterable[str]] = None) -> MutationDossier:
        return self.dossiers.compose_mutation_dossier(mutation_id, regions)

    def aggregate_indication_totals(self, indication_id: str, regions: Optional[Iterable[str]] = None) -> IndicationTotals:
        return self.aggregator.aggregate_indication_totals(indication_id, regions)

    def estimate_mutation_patients(
        self,
        mutation_id: str,
        indication_id: str,
        regions: Optional[Iterable[str]] = None
    ) -> MutationEstimate:
        return self.aggregator.estimate_mutation_patients(mutation_id, indication_id, regions)

    def aggregate_across_indications(self, mutation_id: str, regions: Optional[Iterable[str]] = None) -> CrossIndicationEstimate:
        return self.aggregator.aggregate_across_indications(mutation_id, regions)

    # --- Discovery & import ---

    def find_undiscovered_indications(self, query: str, limit: Optional[int] = None) -> List[CatalogEntry]:
        limit = settings.default_discovery_limit if limit is None else limit
        return self.discovery.find_undiscovered(query, limit)

    def add_indication(self, name: str) -> AddIndicationResult:
        """
        Looks `name` up in the catalog (by canonical name or alias), generates its
        research bundle and merges it into the graph.
        Raises UnknownCatalogEntryError before touching the graph if the name is unknown.
        """
        entry = self.catalog.find(name)
        if entry is None:
            raise UnknownCatalogEntryError(name)

        bundle = self.generator.generate_bundle(entry)
        counts = self.ingestion.import_bundle(bundle)
        return AddIndicationResult(success=True, indication_name=entry.name, counts=counts)

    def ensure_schema(self):
        self.ingestion.ensure_constraints()
