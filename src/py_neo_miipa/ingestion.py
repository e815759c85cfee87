# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from neo4j import ManagedTransaction
from rich.console import Console

from .exceptions import IngestionError
from .graph_store import GraphStore, fetch
from .models import ImportSummary, ResearchBundle
from .research import therapy_id_for

console = Console(stderr=True)


MERGE_INDICATION = """
MERGE (i:Indication {id: $id})
SET i.name = $name,
    i.aliases = $aliases,
    i.oncotreeCode = $oncotree_code,
    i.source = $source
RETURN i.id AS id
"""

# A Gene's display name is only set the first time its symbol is seen
MERGE_MUTATION = """
MERGE (m:Mutation {id: $id})
SET m.name = $name,
    m.gene = $gene,
    m.alteration = $alteration,
    m.oncogenic = $oncogenic,
    m.source = $source
MERGE (g:Gene {hugoSymbol: $gene})
    ON CREATE SET g.id = 'gene-' + toLower($gene), g.name = $gene, g.source = $source
MERGE (m)-[:IN_GENE]->(g)
WITH m
MATCH (i:Indication {id: $indication_id})
MERGE (m)-[:ASSOCIATED_WITH]->(i)
RETURN m.id AS id
"""

MERGE_THERAPY = """
MERGE (t:Therapy {id: $id})
SET t.name = $name,
    t.mechanism = $mechanism,
    t.targets = $targets,
    t.status = 'APPROVED',
    t.source = $source
WITH t
MATCH (i:Indication {id: $indication_id})
MERGE (i)-[:HAS_THERAPY]->(t)
RETURN t.id AS id
"""

# Epidemiology and prevalence records are append-only facts: always CREATE, never MERGE
CREATE_EPIDEMIOLOGY = """
MATCH (i:Indication {id: $indication_id})
MERGE (r:Region {name: $region})
CREATE (e:EpidemiologyMetric {
    id: $id,
    type: $type,
    value: $value,
    unit: $unit,
    year: $year,
    source: $source
})
CREATE (i)-[:MEASURED_BY]->(e)
CREATE (e)-[:FOR_REGION]->(r)
RETURN e.id AS id
"""

CREATE_MUTATION_PREVALENCE = """
MATCH (m:Mutation {id: $mutation_id})
MATCH (i:Indication {id: $indication_id})
MERGE (r:Region {name: $region})
CREATE (mp:MutationPrevalence {
    id: $id,
    percentageOfPatients: $percentage_of_patients,
    year: $year,
    source: $source
})
CREATE (m)-[:HAS_PREVALENCE]->(mp)
CREATE (mp)-[:IN_INDICATION]->(i)
CREATE (mp)-[:FOR_REGION]->(r)
RETURN mp.id AS id
"""

CONSTRAINTS = [
    "CREATE CONSTRAINT IF NOT EXISTS FOR (i:Indication) REQUIRE i.id IS UNIQUE",
    "CREATE CONSTRAINT IF NOT EXISTS FOR (g:Gene) REQUIRE g.hugoSymbol IS UNIQUE",
    "CREATE CONSTRAINT IF NOT EXISTS FOR (m:Mutation) REQUIRE m.id IS UNIQUE",
    "CREATE CONSTRAINT IF NOT EXISTS FOR (t:Therapy) REQUIRE t.id IS UNIQUE",
    "CREATE CONSTRAINT IF NOT EXISTS FOR (r:Region) REQUIRE r.name IS UNIQUE",
]


def _write_one(tx: ManagedTransaction, query: str, what: str, **params):
    """Runs one write statement and fails the whole transaction if it matched nothing."""
    rows = fetch(tx, query, **params)
    if not rows:
        raise IngestionError(f"Failed to write {what}: a referenced node was not found")
    return rows[0]["id"]


class IngestionEngine:
    """
    Merges research bundles into the graph.
    """

    def __init__(self, store: GraphStore):
        self.store = store

    def ensure_constraints(self):
        """Creates unique constraints for every upsert key."""
        console.log("Ensuring database constraints exist...")
        for statement in CONSTRAINTS:
            self.store.execute(statement)
        console.log("[green]Constraints are in place.[/green]")

    def import_bundle(self, bundle: ResearchBundle) -> ImportSummary:
        """
        Writes a bundle in a single transaction. If any statement fails, nothing
        from this bundle is committed and the error propagates.
        """
        indication_id = bundle.indication.id
        console.log(f"Importing research bundle for [bold cyan]{bundle.indication.name}[/bold cyan]...")

        def work(tx: ManagedTransaction) -> ImportSummary:
            _write_one(tx, MERGE_INDICATION, f"indication {indication_id}", **bundle.indication.model_dump(mode="json"))

            for mutation in bundle.mutations:
                _write_one(
                    tx, MERGE_MUTATION, f"mutation {mutation.id}",
                    indication_id=indication_id, **mutation.model_dump(mode="json", exclude={"percentage"})
                )

            for therapy in bundle.therapies:
                _write_one(
                    tx, MERGE_THERAPY, f"therapy {therapy.name}",
                    id=therapy_id_for(therapy.name), indication_id=indication_id,
                    source=bundle.indication.source, **therapy.model_dump(mode="json")
                )

            for entry in bundle.epidemiology:
                _write_one(tx, CREATE_EPIDEMIOLOGY, f"epidemiology {entry.id}", **entry.model_dump(mode="json"))

            for entry in bundle.mutation_prevalence:
                _write_one(tx, CREATE_MUTATION_PREVALENCE, f"mutation prevalence {entry.id}", **entry.model_dump(mode="json"))

            return ImportSummary(
                mutations=len(bundle.mutations),
                therapies=len(bundle.therapies),
                epidemiology_entries=len(bundle.epidemiology),
                prevalence_entries=len(bundle.mutation_prevalence),
            )

        summary = self.store.write(work)
        console.log(
            f"[green]Imported {bundle.indication.name}: {summary.mutations} mutations, {summary.therapies} therapies, "
            f"{summary.epidemiology_entries} epidemiology entries, {summary.prevalence_entries} prevalence entries.[/green]"
        )
        return summary
