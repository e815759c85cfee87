# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Builds denormalized indication and mutation dossiers.

Each relationship type is read by its own traversal inside one read
transaction; the pieces are joined here. An absent relationship contributes an
empty list or a zero estimate. Only a missing root node is an error.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from rich.console import Console

from . import queries
from .epidemiology import EpidemiologyAggregator
from .exceptions import NotFoundError
from .graph_store import GraphStore
from .models import (
    Actionability, DossierMutation, EpidemiologyMetric, IndicationDossier,
    MutationDossier, ResolvedTherapy, Therapy
)
from .regions import RegionFilter, region_filter

console = Console(stderr=True)


def merge_mutation_paths(*paths: Iterable[queries.MutationRow]) -> List[queries.MutationRow]:
    """Union of mutation rows from several traversals, de-duplicated by id in first-seen order."""
    merged: Dict[str, queries.MutationRow] = {}
    for path in paths:
        for row in path:
            merged.setdefault(row.mutation.id, row)
    return list(merged.values())

def filter_metrics(metrics: Iterable[EpidemiologyMetric], regions: RegionFilter) -> List[EpidemiologyMetric]:
    return [m for m in metrics if m.region in regions]

def _match_therapy(drug: str, therapies: Sequence[Therapy]) -> Optional[Therapy]:
    for therapy in therapies:
        if therapy.name == drug:
            return therapy
    for therapy in therapies:
        if drug in therapy.brand_names:
            return therapy
    return None

def resolve_therapies(actionability: Iterable[Actionability], therapies: Sequence[Therapy]) -> List[ResolvedTherapy]:
    """
    Turns the drug names listed on actionability records into therapy records.

    A drug with no curated :Therapy (by name or brand name) still surfaces as a
    name-only record flagged `curated=False`.
    """
    resolved = []
    seen = set()
    for record in actionability:
        for drug in record.drugs:
            if (drug, record.indication) in seen:
                continue
            seen.add((drug, record.indication))
            context = {"indication": record.indication, "level": record.level, "fda_approved": record.fda_approved}
            therapy = _match_therapy(drug, therapies)
            if therapy is not None:
                resolved.append(ResolvedTherapy.model_validate({**therapy.model_dump(), **context, "curated": True}))
            else:
                resolved.append(ResolvedTherapy(name=drug, curated=False, **context))
    return resolved


class DossierComposer:

    def __init__(self, store: GraphStore):
        self.store = store

    def compose_indication_dossier(self, indication_id: str, regions: Optional[Iterable[str]] = None) -> IndicationDossier:
        selected = region_filter(regions)

        def work(tx):
            indication = queries.fetch_indication(tx, indication_id)
            if indication is None:
                raise NotFoundError("Indication", indication_id)
            return {
                "indication": indication,
                "therapies": queries.fetch_indication_therapies(tx, indication_id),
                "diagnostics": queries.fetch_diagnostics(tx, [indication_id]),
                "metrics": queries.fetch_epidemiology(tx, [indication_id]).get(indication_id, []),
                "mutations": merge_mutation_paths(
                    queries.fetch_associated_mutations(tx, indication_id),
                    queries.fetch_actionable_mutations(tx, indication_id),
                    queries.fetch_prevalence_mutations(tx, indication_id),
                ),
                "links": queries.fetch_prevalence_links(tx, indication_id=indication_id),
            }

        data = self.store.read(work)

        # Links are ordered most recent first; keep the first percentage seen per mutation
        percentages: Dict[str, float] = {}
        for link in data["links"]:
            percentages.setdefault(link.mutation_id, link.prevalence.percentage_of_patients)

        mutations = []
        for row in data["mutations"]:
            estimate = EpidemiologyAggregator.pair_estimate(
                row.mutation.id, indication_id, percentages.get(row.mutation.id), data["metrics"], selected
            )
            mutations.append(DossierMutation.model_validate({
                **row.mutation.model_dump(),
                "gene": row.gene or row.mutation.gene,
                "percentage_of_patients": estimate.percentage_of_patients,
                "estimated_prevalence_patients": estimate.estimated_prevalence_patients,
                "estimated_incidence_patients": estimate.estimated_incidence_patients,
            }))

        console.log(f"Composed dossier for indication [bold cyan]{indication_id}[/bold cyan] with {len(mutations)} mutation(s)")
        return IndicationDossier(
            indication=data["indication"],
            mutations=mutations,
            epidemiology=filter_metrics(data["metrics"], selected),
            therapies=data["therapies"],
            diagnostics=data["diagnostics"],
        )

    def compose_mutation_dossier(self, mutation_id: str, regions: Optional[Iterable[str]] = None) -> MutationDossier:
        selected = region_filter(regions)

        def work(tx):
            found = queries.fetch_mutation(tx, mutation_id)
            if found is None:
                raise NotFoundError("Mutation", mutation_id)
            mutation, gene = found
            indications = queries.fetch_mutation_indications(tx, mutation_id)
            indication_ids = [i.id for i in indications]
            actionability = queries.fetch_actionability(tx, mutation_id)
            drugs = list(dict.fromkeys(drug for record in actionability for drug in record.drugs))
            return {
                "mutation": mutation,
                "gene": gene,
                "indications": indications,
                "metrics": queries.fetch_epidemiology(tx, indication_ids) if indication_ids else {},
                "actionability": actionability,
                "therapies": queries.fetch_therapies_by_drug(tx, drugs),
                "diagnostics": queries.fetch_diagnostics(tx, indication_ids) if indication_ids else [],
            }

        data = self.store.read(work)

        epidemiology = []
        for indication in data["indications"]:
            epidemiology.extend(filter_metrics(data["metrics"].get(indication.id, []), selected))

        console.log(f"Composed dossier for mutation [bold cyan]{mutation_id}[/bold cyan]")
        return MutationDossier(
            mutation=data["mutation"],
            gene=data["gene"],
            indications=data["indications"],
            epidemiology=epidemiology,
            actionability=data["actionability"],
            therapies=resolve_therapies(data["actionability"], data["therapies"]),
            diagnostics=data["diagnostics"],
        )
