#!/usr/bin/env python3
"""
CLI interface for the HSBC credit card statement parser.
"""
import typer
from pathlib import Path
from typing import Optional
from pydantic import ValidationError
from rich.console import Console

from .core.categorizer import learn_categories, load_categories, save_categories
from .core.errors import StructuralError
from .core.profiles import DEFAULT_PROFILE, load_profile
from .core.runner import StatementParser
from .models.schema import Statement
from .tools.overview import render_overview

app = typer.Typer(help="HSBC Credit Card Statement Parser")
console = Console()


def _parse(pdf_path: Path, categories_path: Optional[Path], year: Optional[int],
           profile: str, verbose: bool = False) -> Statement:
    """Shared parse step of the commands; exits with status 1 on failure."""
    if not pdf_path.exists():
        console.print(f"[red]Error: PDF file not found: {pdf_path}[/red]")
        raise typer.Exit(1)

    try:
        categories = load_categories(categories_path) if categories_path else []
        parser = StatementParser(categories, year, profile, verbose)
        return parser.parse_file(pdf_path)
    except StructuralError as e:
        console.print(f"[red]Error: malformed statement structure: {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        # Also covers pydantic ValidationError from the category file
        console.print(f"[red]Error parsing statement: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def statement(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file"),
    categories: Optional[Path] = typer.Option(None, "--categories", "-c", help="Category JSON file"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Statement year (defaults to the current year)"),
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", "-p", help="Statement profile ID"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse a statement PDF into structured JSON."""
    result = _parse(pdf_path, categories, year, profile, verbose)

    if not result.validate_totals():
        console.print("[yellow]Warning: transactions do not add up to the statement totals[/yellow]")

    if output:
        output.write_text(result.model_dump_json(indent=2))
        console.print(f"[green]✓ Parsed successfully! Output written to: {output}[/green]")
    else:
        console.print_json(result.model_dump_json())


@app.command()
def overview(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file"),
    categories: Optional[Path] = typer.Option(None, "--categories", "-c", help="Category JSON file"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Statement year (defaults to the current year)"),
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", "-p", help="Statement profile ID")
):
    """Show spending per category."""
    result = _parse(pdf_path, categories, year, profile)
    render_overview(result, load_profile(profile), console)


@app.command("add-categories")
def add_categories(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file"),
    category_file: Path = typer.Argument(..., help="Category JSON file to update"),
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", "-p", help="Statement profile ID")
):
    """Add unmatched merchants to the Unknown category."""
    result = _parse(pdf_path, None, None, profile)

    try:
        store = load_categories(category_file)
    except ValidationError as e:
        console.print(f"[red]Error reading categories: {e}[/red]")
        raise typer.Exit(1)

    added = learn_categories(store, result.debits + result.credits)
    save_categories(category_file, store)
    console.print(f"[green]✓ Added {added} patterns to {category_file}[/green]")


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a statement JSON file and check that it reconciles."""
    try:
        data = Statement.model_validate_json(json_path.read_text())
    except (OSError, ValidationError) as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ JSON is valid[/green]")
    console.print(f"Credits: {len(data.credits)}")
    console.print(f"Debits: {len(data.debits)}")
    if data.validate_totals():
        console.print("[green]✓ Totals reconcile[/green]")
    else:
        console.print("[yellow]Totals do not reconcile[/yellow]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
