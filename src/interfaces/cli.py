"""Command-line interface for the ontology individual engine."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from dotenv import load_dotenv

from composition_root import bootstrap_backend, configure_logging, create_evaluation_pipeline
from domain.errors import InstantiationError, StoreAccessError
from domain.ontology_models import EvaluationContext, Individual
from infrastructure.neo4j_backend import Neo4jBackend

# --- Environment Loading ---
load_dotenv()
configure_logging()

# --- Typer App ---
app = typer.Typer(
    help="Validate and instantiate ontology individuals in the knowledge graph.",
    add_completion=False,
)


@app.command()
def evaluate(
    individual_path: Path = typer.Argument(..., exists=True, readable=True, help="Individual JSON document"),
    ontology: str = typer.Option(..., "--ontology", help="Ontology prefix the individual belongs to"),
    name: str = typer.Option(..., "--name", help="Individual name within the ontology"),
    commit: bool = typer.Option(False, "--commit", help="Instantiate the individual if it is clean"),
):
    """Evaluate an individual document and optionally instantiate it."""
    individual = Individual.model_validate(json.loads(individual_path.read_text()))
    ctx = EvaluationContext(ontology_name=ontology, individual_name=name)

    async def run():
        async with bootstrap_backend() as backend:
            pipeline = create_evaluation_pipeline(backend)
            if commit:
                response = await pipeline.validate_and_commit(individual, ctx)
                return response.model_dump(exclude_none=True), response.committed
            report = await pipeline.evaluate(individual, ctx)
            return report.to_dict(), report.is_clean

    try:
        result, clean = asyncio.run(run())
    except (InstantiationError, StoreAccessError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(json.dumps(result, indent=2, default=str))
    if not clean:
        raise typer.Exit(code=1)


@app.command()
def ping():
    """Check connectivity to the graph store."""

    async def run():
        async with bootstrap_backend() as backend:
            return await backend.ping()

    try:
        ok = asyncio.run(run())
    except StoreAccessError as e:
        typer.echo(f"Store unavailable: {e}", err=True)
        raise typer.Exit(code=2)
    typer.echo("ok" if ok else "unavailable")


@app.command("init-store")
def init_store():
    """Create the resource URI uniqueness constraint in Neo4j."""

    async def run():
        async with bootstrap_backend() as backend:
            if not isinstance(backend, Neo4jBackend):
                return []
            return await backend.ensure_constraints()

    created = asyncio.run(run())
    if not created:
        typer.echo("Nothing to initialise for this backend")
    for name in created:
        typer.echo(f"Constraint ready: {name}")


if __name__ == "__main__":
    app()
