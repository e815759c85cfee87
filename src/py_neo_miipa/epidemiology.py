# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Epidemiology aggregation.

Indication totals are sums of PREVALENCE (resp. INCIDENCE) metrics over the
requested regions. A mutation's patient estimate scales an indication total by
the share of that indication's patients carrying the mutation.

All arithmetic is done on floats; results are rounded half-up to whole people
only when they are handed back to the caller.
"""
import math
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from rich.console import Console

from . import queries
from .exceptions import NotFoundError
from .graph_store import GraphStore
from .models import (
    CrossIndicationEstimate, EpidemiologyMetric, IndicationTotals, MetricType,
    MutationEstimate
)
from .regions import RegionFilter, region_filter

console = Console(stderr=True)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def sum_metric(metrics: Iterable[EpidemiologyMetric], metric_type: MetricType, regions: RegionFilter) -> float:
    """Sums metrics of one type whose region is selected. No matching metric sums to 0."""
    return sum(
        (m.value for m in metrics if m.type == metric_type and m.region in regions),
        0.0
    )

def indication_totals(metrics: Iterable[EpidemiologyMetric], regions: RegionFilter) -> Tuple[float, float]:
    """Unrounded (prevalence, incidence) totals for one indication."""
    metrics = list(metrics)
    return (
        sum_metric(metrics, MetricType.PREVALENCE, regions),
        sum_metric(metrics, MetricType.INCIDENCE, regions),
    )

def scale_by_percentage(total: float, percentage: Optional[float]) -> float:
    if percentage is None:
        return 0.0
    return total * percentage / 100

def cross_indication_estimate(
    links: Iterable[queries.PrevalenceLink],
    metrics_by_indication: Mapping[str, List[EpidemiologyMetric]],
    regions: RegionFilter
) -> Tuple[float, float]:
    """
    Unrounded (patients, new cases) for a mutation, summed over every
    prevalence record it has. Duplicate records each contribute.
    """
    patients = new_cases = 0.0
    for link in links:
        prevalence, incidence = indication_totals(metrics_by_indication.get(link.indication_id, []), regions)
        patients += scale_by_percentage(prevalence, link.prevalence.percentage_of_patients)
        new_cases += scale_by_percentage(incidence, link.prevalence.percentage_of_patients)
    return patients, new_cases


class EpidemiologyAggregator:
    """
    Computes indication totals and mutation patient estimates from the graph.
    """

    def __init__(self, store: GraphStore):
        self.store = store

    def aggregate_indication_totals(self, indication_id: str, regions: Optional[Iterable[str]] = None) -> IndicationTotals:
        selected = region_filter(regions)

        def work(tx):
            if queries.fetch_indication(tx, indication_id) is None:
                raise NotFoundError("Indication", indication_id)
            return queries.fetch_epidemiology(tx, [indication_id]).get(indication_id, [])

        metrics = self.store.read(work)
        prevalence, incidence = indication_totals(metrics, selected)
        return IndicationTotals(
            indication_id=indication_id,
            total_prevalence=round_half_up(prevalence),
            total_incidence=round_half_up(incidence),
        )

    def estimate_mutation_patients(
        self,
        mutation_id: str,
        indication_id: str,
        regions: Optional[Iterable[str]] = None
    ) -> MutationEstimate:
        selected = region_filter(regions)

        def work(tx):
            if queries.fetch_mutation(tx, mutation_id) is None:
                raise NotFoundError("Mutation", mutation_id)
            if queries.fetch_indication(tx, indication_id) is None:
                raise NotFoundError("Indication", indication_id)
            links = queries.fetch_prevalence_links(tx, mutation_id=mutation_id, indication_id=indication_id)
            metrics = queries.fetch_epidemiology(tx, [indication_id]).get(indication_id, [])
            return links, metrics

        links, metrics = self.store.read(work)
        # Links come back most recent first, undated records last
        percentage = links[0].prevalence.percentage_of_patients if links else None
        return self.pair_estimate(mutation_id, indication_id, percentage, metrics, selected)

    def aggregate_across_indications(self, mutation_id: str, regions: Optional[Iterable[str]] = None) -> CrossIndicationEstimate:
        selected = region_filter(regions)

        def work(tx):
            if queries.fetch_mutation(tx, mutation_id) is None:
                raise NotFoundError("Mutation", mutation_id)
            links = queries.fetch_prevalence_links(tx, mutation_id=mutation_id)
            indication_ids = sorted({link.indication_id for link in links})
            metrics = queries.fetch_epidemiology(tx, indication_ids) if indication_ids else {}
            return links, metrics

        links, metrics = self.store.read(work)
        patients, new_cases = cross_indication_estimate(links, metrics, selected)
        console.log(f"Estimated {mutation_id} across {len(links)} prevalence record(s) in regions {selected.names}")
        return CrossIndicationEstimate(
            mutation_id=mutation_id,
            estimated_patients=round_half_up(patients),
            estimated_new_cases=round_half_up(new_cases),
        )

    @staticmethod
    def pair_estimate(
        mutation_id: str,
        indication_id: str,
        percentage: Optional[float],
        metrics: List[EpidemiologyMetric],
        regions: RegionFilter
    ) -> MutationEstimate:
        """Builds the per-(mutation, indication) estimate from already-fetched data."""
        prevalence, incidence = indication_totals(metrics, regions)
        return MutationEstimate(
            mutation_id=mutation_id,
            indication_id=indication_id,
            percentage_of_patients=percentage,
            estimated_prevalence_patients=round_half_up(scale_by_percentage(prevalence, percentage)),
            estimated_incidence_patients=round_half_up(scale_by_percentage(incidence, percentage)),
        )

    @staticmethod
    def estimates_by_mutation(
        links: Iterable[queries.PrevalenceLink],
        metrics_by_indication: Mapping[str, List[EpidemiologyMetric]],
        regions: RegionFilter
    ) -> Dict[str, Tuple[int, int]]:
        """Rounded cross-indication (patients, new cases) for every mutation that has prevalence links."""
        grouped: Dict[str, List[queries.PrevalenceLink]] = {}
        for link in links:
            grouped.setdefault(link.mutation_id, []).append(link)
        estimates = {}
        for mutation_id, mutation_links in grouped.items():
            patients, new_cases = cross_indication_estimate(mutation_links, metrics_by_indication, regions)
            estimates[mutation_id] = (round_half_up(patients), round_half_up(new_cases))
        return estimates
