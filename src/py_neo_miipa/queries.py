# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Read-side traversals, one per relationship type.

Each function takes a managed transaction, runs a single pattern, and returns
typed records. A missing relationship yields an empty list, never an error;
the callers decide what an empty result means.
"""
from collections import defaultdict
from typing import Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from neo4j import ManagedTransaction

from .graph_store import fetch, to_model
from .models import (
    Actionability, DiagnosticModality, EpidemiologyMetric, Gene, Indication,
    Mutation, MutationPrevalence, Therapy
)


class MutationRow(NamedTuple):
    mutation: Mutation
    gene: Optional[str]  # HUGO symbol of the :Gene it belongs to

class PrevalenceLink(NamedTuple):
    mutation_id: str
    indication_id: str
    prevalence: MutationPrevalence

class MutationListingRow(NamedTuple):
    mutation: Mutation
    gene: Optional[str]
    actionability_count: int


# --- Single nodes ---

def fetch_indication(tx: ManagedTransaction, indication_id: str) -> Optional[Indication]:
    rows = fetch(tx, "MATCH (i:Indication {id: $id}) RETURN i LIMIT 1", id=indication_id)
    return to_model(Indication, rows[0]["i"]) if rows else None

def fetch_mutation(tx: ManagedTransaction, mutation_id: str) -> Optional[Tuple[Mutation, Optional[Gene]]]:
    rows = fetch(tx, """
        MATCH (m:Mutation {id: $id})
        OPTIONAL MATCH (m)-[:IN_GENE]->(g:Gene)
        RETURN m, g
        LIMIT 1
        """, id=mutation_id)
    if not rows:
        return None
    gene = to_model(Gene, rows[0]["g"]) if rows[0]["g"] else None
    return to_model(Mutation, rows[0]["m"]), gene

def fetch_all_indications(tx: ManagedTransaction) -> List[Indication]:
    rows = fetch(tx, "MATCH (i:Indication) RETURN i")
    return [to_model(Indication, row["i"]) for row in rows]


# --- Epidemiology ---

def fetch_epidemiology(tx: ManagedTransaction, indication_ids: Optional[Sequence[str]] = None) -> Dict[str, List[EpidemiologyMetric]]:
    """
    Returns every epidemiology metric keyed by indication id, unfiltered by region.
    Passing `indication_ids=None` reads metrics for all indications.
    """
    rows = fetch(tx, """
        MATCH (i:Indication)-[:MEASURED_BY]->(e:EpidemiologyMetric)
        WHERE $ids IS NULL OR i.id IN $ids
        OPTIONAL MATCH (e)-[:FOR_REGION]->(r:Region)
        RETURN i.id AS indication_id, i.name AS indication_name, e, r.name AS region
        """, ids=list(indication_ids) if indication_ids is not None else None)
    metrics = defaultdict(list)
    for row in rows:
        props = dict(row["e"], region=row["region"], indication=row["indication_name"])
        metrics[row["indication_id"]].append(to_model(EpidemiologyMetric, props))
    return dict(metrics)


# --- Mutation <-> Indication paths ---

def _mutation_rows(rows: List[dict]) -> List[MutationRow]:
    return [MutationRow(to_model(Mutation, row["m"]), row["gene"]) for row in rows]

def fetch_associated_mutations(tx: ManagedTransaction, indication_id: str) -> List[MutationRow]:
    rows = fetch(tx, """
        MATCH (m:Mutation)-[:ASSOCIATED_WITH]->(:Indication {id: $id})
        OPTIONAL MATCH (m)-[:IN_GENE]->(g:Gene)
        RETURN DISTINCT m, coalesce(g.hugoSymbol, g.name) AS gene
        """, id=indication_id)
    return _mutation_rows(rows)

def fetch_actionable_mutations(tx: ManagedTransaction, indication_id: str) -> List[MutationRow]:
    rows = fetch(tx, """
        MATCH (m:Mutation)-[:HAS_THERAPEUTIC_ACTIONABILITY]->(:TherapeuticActionability)-[:FOR_INDICATION]->(:Indication {id: $id})
        OPTIONAL MATCH (m)-[:IN_GENE]->(g:Gene)
        RETURN DISTINCT m, coalesce(g.hugoSymbol, g.name) AS gene
        """, id=indication_id)
    return _mutation_rows(rows)

def fetch_prevalence_mutations(tx: ManagedTransaction, indication_id: str) -> List[MutationRow]:
    rows = fetch(tx, """
        MATCH (m:Mutation)-[:HAS_PREVALENCE]->(:MutationPrevalence)-[:IN_INDICATION]->(:Indication {id: $id})
        OPTIONAL MATCH (m)-[:IN_GENE]->(g:Gene)
        RETURN DISTINCT m, coalesce(g.hugoSymbol, g.name) AS gene
        """, id=indication_id)
    return _mutation_rows(rows)

def fetch_prevalence_links(
    tx: ManagedTransaction,
    mutation_id: Optional[str] = None,
    indication_id: Optional[str] = None
) -> List[PrevalenceLink]:
    """MutationPrevalence records, optionally narrowed to one mutation and/or one indication."""
    rows = fetch(tx, """
        MATCH (m:Mutation)-[:HAS_PREVALENCE]->(mp:MutationPrevalence)-[:IN_INDICATION]->(i:Indication)
        WHERE ($mutation_id IS NULL OR m.id = $mutation_id)
          AND ($indication_id IS NULL OR i.id = $indication_id)
        OPTIONAL MATCH (mp)-[:FOR_REGION]->(r:Region)
        RETURN m.id AS mutation_id, i.id AS indication_id, mp, r.name AS region
        ORDER BY mp.year IS NULL, mp.year DESC
        """, mutation_id=mutation_id, indication_id=indication_id)
    return [
        PrevalenceLink(row["mutation_id"], row["indication_id"], to_model(MutationPrevalence, dict(row["mp"], region=row["region"])))
        for row in rows
    ]

def fetch_mutation_indications(tx: ManagedTransaction, mutation_id: str) -> List[Indication]:
    rows = fetch(tx, """
        MATCH (:Mutation {id: $id})-[:ASSOCIATED_WITH]->(i:Indication)
        RETURN DISTINCT i
        ORDER BY i.name
        """, id=mutation_id)
    return [to_model(Indication, row["i"]) for row in rows]

def fetch_mutation_listing(tx: ManagedTransaction) -> List[MutationListingRow]:
    rows = fetch(tx, """
        MATCH (m:Mutation)
        OPTIONAL MATCH (m)-[:IN_GENE]->(g:Gene)
        OPTIONAL MATCH (m)-[:HAS_ACTIONABILITY|HAS_THERAPEUTIC_ACTIONABILITY]->(a)
        RETURN m, coalesce(g.hugoSymbol, g.name) AS gene, count(DISTINCT a) AS actionability_count
        """)
    return [MutationListingRow(to_model(Mutation, row["m"]), row["gene"], row["actionability_count"]) for row in rows]


# --- Therapies, diagnostics, actionability ---

def fetch_indication_therapies(tx: ManagedTransaction, indication_id: str) -> List[Therapy]:
    rows = fetch(tx, """
        MATCH (:Indication {id: $id})-[:HAS_THERAPY]->(t:Therapy)
        RETURN DISTINCT t
        ORDER BY t.name
        """, id=indication_id)
    return [to_model(Therapy, row["t"]) for row in rows]

def fetch_diagnostics(tx: ManagedTransaction, indication_ids: Sequence[str]) -> List[DiagnosticModality]:
    rows = fetch(tx, """
        MATCH (i:Indication)-[:HAS_DIAGNOSTIC]->(d:DiagnosticModality)
        WHERE i.id IN $ids
        RETURN d, i.name AS indication
        ORDER BY i.name, d.name
        """, ids=list(indication_ids))
    return [to_model(DiagnosticModality, dict(row["d"], indication=row["indication"])) for row in rows]

def fetch_actionability(tx: ManagedTransaction, mutation_id: str) -> List[Actionability]:
    """Both :Actionability and :TherapeuticActionability records, one row per scoped indication."""
    rows = fetch(tx, """
        MATCH (:Mutation {id: $id})-[:HAS_ACTIONABILITY|HAS_THERAPEUTIC_ACTIONABILITY]->(a)
        OPTIONAL MATCH (a)-[:FOR_INDICATION]->(i:Indication)
        RETURN a, labels(a) AS labels, i.name AS indication
        ORDER BY a.level, i.name
        """, id=mutation_id)
    records = []
    for row in rows:
        kind = "TherapeuticActionability" if "TherapeuticActionability" in row["labels"] else "Actionability"
        records.append(to_model(Actionability, dict(row["a"], kind=kind, indication=row["indication"])))
    return records

def fetch_therapies_by_drug(tx: ManagedTransaction, drug_names: Sequence[str]) -> List[Therapy]:
    """Therapies whose canonical name or any brand-name synonym is in `drug_names`."""
    if not drug_names:
        return []
    rows = fetch(tx, """
        MATCH (t:Therapy)
        WHERE t.name IN $drugs OR any(b IN coalesce(t.brandNames, []) WHERE b IN $drugs)
        RETURN t
        """, drugs=list(drug_names))
    return [to_model(Therapy, row["t"]) for row in rows]


# --- Discovery ---

def fetch_existing_names(tx: ManagedTransaction) -> Set[str]:
    """Lowercased names and aliases of every indication already in the graph."""
    rows = fetch(tx, "MATCH (i:Indication) RETURN i.name AS name, i.aliases AS aliases")
    names = set()
    for row in rows:
        if row["name"]:
            names.add(row["name"].lower())
        for alias in row["aliases"] or []:
            names.add(alias.lower())
    return names
