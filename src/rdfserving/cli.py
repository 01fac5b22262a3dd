"""Command-line interface for the classification server."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="rdf-serving",
    help="Serve per-category probability distributions from a trained classifier.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]


@app.command()
def serve(
    config: ConfigOption,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Override the configured HTTP port."),
    ] = None,
) -> None:
    """Load the configured model generation and start the HTTP server."""
    from rdfserving.config.loader import load_config
    from rdfserving.serving.server import start_server

    console.print(f"[blue]Loading configuration from {config}[/blue]")
    serving_config = load_config(config)
    if port is not None:
        serving_config = serving_config.model_copy(
            update={"server": serving_config.server.model_copy(update={"port": port})}
        )

    try:
        start_server(serving_config)
    except FileNotFoundError as e:
        console.print(f"[red]Model not found: {e}[/red]")
        raise typer.Exit(code=1) from e
    except OSError as e:
        console.print(f"[red]Could not start server: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def classify(
    config: ConfigOption,
    line: Annotated[
        str,
        typer.Option("--line", "-l", help="Delimited input record to classify."),
    ],
    distribution: Annotated[
        bool,
        typer.Option(
            "--distribution/--best",
            help="Print every category's probability, or only the best category.",
        ),
    ] = True,
) -> None:
    """Classify one record with the configured model, without a server."""
    from rdfserving.config.loader import load_config
    from rdfserving.errors import ServingError
    from rdfserving.generation import GenerationManager
    from rdfserving.serving.service import ClassificationService

    serving_config = load_config(config)
    manager = GenerationManager()
    try:
        manager.load(
            serving_config.model.path,
            serving_config.model.categories,
            target_column=serving_config.inbound.target_index,
        )
    except FileNotFoundError as e:
        console.print(f"[red]Model not found: {e}[/red]")
        raise typer.Exit(code=1) from e

    service = ClassificationService(manager, serving_config.inbound)
    try:
        if distribution:
            output = "".join(service.classification_distribution(line))
        else:
            output = service.classify(line) + "\n"
    except ServingError as e:
        console.print(f"[red]Error {e.status_code}: {e.reason}[/red]")
        raise typer.Exit(code=1) from e

    typer.echo(output, nl=False)


@app.command()
def inspect(config: ConfigOption) -> None:
    """Show the inbound schema and the target categories of the model."""
    from rdfserving.config.loader import load_config
    from rdfserving.generation import GenerationManager

    serving_config = load_config(config)
    inbound = serving_config.inbound

    schema_table = Table(title=f"Inbound schema ({serving_config.project})")
    schema_table.add_column("Column", style="cyan")
    schema_table.add_column("Name")
    schema_table.add_column("Type", style="green")
    for column in range(inbound.total_columns):
        if column == inbound.target_index:
            kind = "target (categorical)" if inbound.is_classification else "target (numeric)"
        elif inbound.is_categorical(column):
            kind = "categorical"
        elif inbound.is_numeric(column):
            kind = "numeric"
        else:
            kind = "ignored"
        schema_table.add_row(str(column), inbound.column_name(column), kind)
    console.print(schema_table)

    manager = GenerationManager()
    try:
        generation = manager.load(
            serving_config.model.path,
            serving_config.model.categories,
            target_column=inbound.target_index,
        )
    except FileNotFoundError as e:
        console.print(f"[yellow]No model generation available: {e}[/yellow]")
        raise typer.Exit(code=1) from e

    if not inbound.is_classification:
        console.print("[dim]Numeric target: no categories[/dim]")
        return

    target_mapping = generation.category_mappings.get(inbound.target_index)
    if target_mapping is None:
        console.print("[red]Model has no mapping for the target column[/red]")
        raise typer.Exit(code=1)

    category_table = Table(title=f"Target categories (generation {generation.generation_id})")
    category_table.add_column("ID", style="cyan")
    category_table.add_column("Category", style="green")
    for category_id, name in sorted(target_mapping.inverse.items()):
        category_table.add_row(str(category_id), name)
    console.print(category_table)


@app.command()
def version() -> None:
    """Show version information."""
    from rdfserving import __version__

    console.print(f"rdf-serving version {__version__}")


if __name__ == "__main__":
    app()
