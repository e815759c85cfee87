# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# We wrap the settings import in a try-except block to provide a nicer
# error message if the environment holds an invalid value.
try:
    from .config import settings
except Exception as e:
    console = Console()
    console.print(Panel(
        f"[bold red]Configuration Error:[/bold red]\n{e}\n\nPlease check your .env file and any [bold cyan]PYNEOMIIPA_*[/bold cyan] environment variables.",
        title="[bold red]Initialization Failed[/bold red]",
        border_style="red"
    ))
    sys.exit(1)

from .exceptions import MiipaError, NotFoundError, StoreUnavailableError, UnknownCatalogEntryError
from .graph_store import GraphStore
from .ranking import SortBy, SortOrder
from .regions import parse_regions
from .service import MiipaService


app = typer.Typer(
    name="py-neo-miipa",
    help="Query and grow the MIIPA oncology knowledge graph in Neo4j."
)
console = Console()

REGIONS_HELP = "Comma-separated regions to sum over (e.g. 'USA,EU'). Defaults to the configured regions."


def _fail(message: str, title: str, code: int):
    console.print(Panel(f"[bold red]{message}[/bold red]", title=f"[bold red]{title}[/bold red]", border_style="red"))
    raise typer.Exit(code=code)


@contextmanager
def open_service() -> Iterator[MiipaService]:
    """
    Connects to the configured graph, yields a service and always closes the driver.
    Domain errors are turned into a red panel and a non-zero exit code.
    """
    store = None
    try:
        store = GraphStore.from_settings()
        yield MiipaService(store)
    except (NotFoundError, UnknownCatalogEntryError) as e:
        _fail(str(e), "Not Found", 1)
    except StoreUnavailableError as e:
        _fail(f"{e}\n\nIs Neo4j running at {settings.neo4j_uri}?", "Graph Store Unavailable", 2)
    except (MiipaError, ValueError) as e:
        _fail(str(e), "Error", 1)
    finally:
        if store:
            store.close()


def _print_json(model):
    console.print_json(model.model_dump_json())


@app.command(name="top-indications", help="List indications ranked by patient population.")
def top_indications(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of indications to return."),
    regions: Optional[str] = typer.Option(None, "--regions", "-r", help=REGIONS_HELP),
    sort_by: SortBy = typer.Option(SortBy.PREVALENCE, "--sort-by", help="prevalence, incidence or alphabetical."),
    order: Optional[SortOrder] = typer.Option(None, "--order", help="asc or desc. Defaults to asc for alphabetical, desc otherwise."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
):
    with open_service() as service:
        summaries = service.list_top_indications(limit, parse_regions(regions), sort_by, order)

    if as_json:
        console.print_json(data=[s.model_dump() for s in summaries])
        return
    table = Table(title="Top Indications")
    table.add_column("Rank", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Prevalence", justify="right", style="green")
    table.add_column("Incidence", justify="right", style="green")
    for s in summaries:
        table.add_row(str(s.rank), s.id, s.name, f"{s.total_prevalence:,}", f"{s.total_incidence:,}")
    console.print(table)


@app.command(name="mutations", help="List mutations ranked by actionability or estimated patients.")
def mutations(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of mutations to return."),
    regions: Optional[str] = typer.Option(None, "--regions", "-r", help=REGIONS_HELP),
    sort_by: SortBy = typer.Option(SortBy.ACTIONABILITY, "--sort-by", help="actionability, prevalence, incidence or alphabetical."),
    order: Optional[SortOrder] = typer.Option(None, "--order", help="asc or desc."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
):
    with open_service() as service:
        summaries = service.list_all_mutations(limit, sort_by, order, parse_regions(regions))

    if as_json:
        console.print_json(data=[s.model_dump() for s in summaries])
        return
    table = Table(title="Mutations")
    table.add_column("Rank", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Gene")
    table.add_column("Alteration")
    table.add_column("Oncogenic")
    table.add_column("Actionability", justify="right")
    table.add_column("Patients", justify="right", style="green")
    table.add_column("New Cases", justify="right", style="green")
    for s in summaries:
        table.add_row(
            str(s.rank), s.id, s.gene or "", s.alteration or "", s.oncogenic,
            str(s.actionability_count), f"{s.estimated_patients:,}", f"{s.estimated_new_cases:,}"
        )
    console.print(table)


@app.command(name="indication-dossier", help="Print the full dossier of one indication as JSON.")
def indication_dossier(
    indication_id: str = typer.Argument(..., help="Indication id, e.g. 'ind-multiple-myeloma'."),
    regions: Optional[str] = typer.Option(None, "--regions", "-r", help=REGIONS_HELP),
):
    with open_service() as service:
        dossier = service.get_indication_dossier(indication_id, parse_regions(regions))
    _print_json(dossier)


@app.command(name="mutation-dossier", help="Print the full dossier of one mutation as JSON.")
def mutation_dossier(
    mutation_id: str = typer.Argument(..., help="Mutation id, e.g. 'mut-braf-v600e'."),
    regions: Optional[str] = typer.Option(None, "--regions", "-r", help=REGIONS_HELP),
):
    with open_service() as service:
        dossier = service.get_mutation_dossier(mutation_id, parse_regions(regions))
    _print_json(dossier)


@app.command(name="mutation-estimate", help="Estimate how many patients carry a mutation.")
def mutation_estimate(
    mutation_id: str = typer.Argument(..., help="Mutation id."),
    indication_id: Optional[str] = typer.Option(None, "--indication", "-i", help="Restrict the estimate to one indication."),
    regions: Optional[str] = typer.Option(None, "--regions", "-r", help=REGIONS_HELP),
):
    """
    With --indication, scales that indication's totals by the mutation's share of
    its patients. Without it, sums the estimate over every indication the mutation
    has a prevalence record for.
    """
    with open_service() as service:
        if indication_id:
            estimate = service.estimate_mutation_patients(mutation_id, indication_id, parse_regions(regions))
        else:
            estimate = service.aggregate_across_indications(mutation_id, parse_regions(regions))
    _print_json(estimate)


@app.command(name="search-new", help="Find catalog indications that are not yet in the graph.")
def search_new(
    query: str = typer.Argument(..., help="Case-insensitive text matched against names and aliases."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum number of results."),
):
    with open_service() as service:
        entries = service.find_undiscovered_indications(query, limit)

    if not entries:
        console.print(f"[yellow]No undiscovered indications match '{query}'.[/yellow]")
        return
    table = Table(title=f"Undiscovered indications matching '{query}'")
    table.add_column("Name", style="cyan")
    table.add_column("Aliases")
    table.add_column("OncoTree")
    for entry in entries:
        table.add_row(entry.name, ", ".join(entry.aliases), entry.oncotree_code)
    console.print(table)


@app.command(name="add-indication", help="Research a catalog indication and merge it into the graph.")
def add_indication(
    name: str = typer.Argument(..., help="Canonical name or alias from the catalog, e.g. 'Multiple Myeloma'."),
):
    console.print(Panel(f"[bold cyan]Adding indication: {name}[/bold cyan]", border_style="cyan"))
    with open_service() as service:
        result = service.add_indication(name)

    counts = result.counts
    console.print(Panel(
        f"[bold green]Added {result.indication_name}[/bold green]\n"
        f"Mutations: {counts.mutations}\n"
        f"Therapies: {counts.therapies}\n"
        f"Epidemiology entries: {counts.epidemiology_entries}\n"
        f"Prevalence entries: {counts.prevalence_entries}",
        title="[bold green]Import Complete[/bold green]"
    ))


@app.command(name="init-schema", help="Create the unique constraints the import relies on.")
def init_schema():
    with open_service() as service:
        service.ensure_schema()
    console.print(Panel("[bold green]Schema constraints are in place.[/bold green]", title="[bold green]Schema Initialized[/bold green]"))


if __name__ == "__main__":
    app()
