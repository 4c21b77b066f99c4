import json
import typer
from pathlib import Path
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from voice_tracker.domain.enums import Direction, FALLBACK_CATEGORIES
from voice_tracker.domain.errors import AmountNotFoundError
from voice_tracker.domain.models import ParsedTransaction
from voice_tracker.logging_setup import configure_logging
from voice_tracker.services.transaction_parser import TransactionParser

app = typer.Typer(
    name="voice-tracker",
    help="Turn spoken or typed transaction phrases into records",
    add_completion=False,
)

console = Console()

RETRY_HINT = 'Try a phrase like "beli nasi 15 ribu" or "dapat gaji 5 juta".'

class State:
    verbose: bool = False
    parser: Optional[TransactionParser] = None


state = State()

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Voice Tracker - Parse transaction phrases into structured records.
    """
    configure_logging("DEBUG" if verbose else None)

    if state.parser is None:
        state.parser = TransactionParser()

    state.verbose = verbose


def _format_rupiah(amount: Decimal) -> str:
    """Rp 1.500.000 style, as the target locale writes it"""
    grouped = f"{amount:,}".translate(str.maketrans(",.", ".,"))
    return f"Rp {grouped}"


def _to_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None


def _amount_markup(txn: ParsedTransaction) -> str:
    if txn.direction == Direction.INCOME:
        return f"[green]+{_format_rupiah(txn.amount)}[/green]"
    return f"[red]-{_format_rupiah(txn.amount)}[/red]"


@app.command(name="parse")
def parse(
    transcript: str = typer.Argument(
        ...,
        help="What was said, e.g. \"beli nasi padang goceng kemarin\"",
    ),
    today: Optional[datetime] = typer.Option(
        None,
        "--today",
        formats=["%Y-%m-%d"],
        help="Resolve relative dates against this day instead of the current date",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the record as JSON",
    ),
):
    """
    Parse a single transcript.

    Examples:
        voice-tracker parse "beli nasi padang goceng kemarin"
        voice-tracker parse "dapat gaji 5 juta" --json
        voice-tracker parse "bayar listrik 150 ribu" --today 2025-03-10
    """
    try:
        txn = state.parser.parse(transcript, today=_to_date(today))

        if as_json:
            console.print_json(json.dumps(txn.to_dict()))
            return

        direction_label = "INCOME" if txn.direction == Direction.INCOME else "EXPENSE"
        direction_color = "green" if txn.direction == Direction.INCOME else "red"
        console.print(Panel.fit(
            f"[bold]Direction:[/bold] [{direction_color}]{direction_label}[/{direction_color}]\n"
            f"[bold]Amount:[/bold]    {_amount_markup(txn)}\n"
            f"[bold]Category:[/bold]  [magenta]{txn.category.value}[/magenta]\n"
            f"[bold]Date:[/bold]      [cyan]{txn.occurred_on}[/cyan]\n"
            f"[bold]Note:[/bold]      {txn.note}",
            title=f"[bold]\"{transcript}\"[/bold]",
            border_style="cyan"
        ))

    except AmountNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        console.print(f"[yellow]{RETRY_HINT}[/yellow]")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="parse-file")
def parse_file(
    filepath: Path = typer.Argument(
        ...,
        help="Text file with one transcript per line",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    today: Optional[datetime] = typer.Option(
        None,
        "--today",
        formats=["%Y-%m-%d"],
        help="Resolve relative dates against this day instead of the current date",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the records as JSON",
    ),
):
    """
    Parse every line of a file of transcripts.

    Examples:
        voice-tracker parse-file notes.txt
        voice-tracker parse-file notes.txt --today 2025-03-10 --json
    """
    try:
        lines = filepath.read_text(encoding="utf-8").splitlines()
        result = state.parser.parse_many(lines, today=_to_date(today))

        if as_json:
            console.print_json(json.dumps({
                "parsed": [txn.to_dict() for txn in result.parsed],
                "failed": [
                    {"transcript": f.transcript, "message": f.message}
                    for f in result.failed
                ],
            }))
            return

        console.print(f"\n[bold]Parsed {len(result.parsed)} of {result.total} transcripts[/bold]")

        if result.parsed:
            table = Table(show_header=True, padding=(0, 1))
            table.add_column("Date", style="cyan", width=12)
            table.add_column("Note", style="white", max_width=40)
            table.add_column("Category", style="magenta")
            table.add_column("Amount", justify="right")

            for txn in result.parsed:
                table.add_row(
                    str(txn.occurred_on),
                    txn.note,
                    txn.category.value,
                    _amount_markup(txn),
                )

            console.print(table)
            console.print(
                f"[green]💰 Income:[/green]  {_format_rupiah(result.total_income)}\n"
                f"[red]💸 Expense:[/red] {_format_rupiah(result.total_expense)}"
            )

        if result.failed:
            console.print(f"\n[yellow]Could not find an amount in {len(result.failed)} transcripts:[/yellow]")
            for failure in result.failed:
                console.print(f"  • {failure.transcript}")

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="categories")
def categories(
    direction: Optional[str] = typer.Option(
        None,
        "--direction", "-d",
        help="Only list categories for this direction (income, expense)",
    ),
):
    """
    List the categories and their trigger words, in matching order.

    Examples:
        voice-tracker categories
        voice-tracker categories --direction income
    """
    try:
        directions = [Direction(direction.lower())] if direction else list(Direction)
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] Unknown direction '{direction}', use income or expense")
        raise typer.Exit(code=1)

    vocabulary = state.parser.vocabulary

    for d in directions:
        table = Table(title=f"{d.value.capitalize()} categories", show_header=True, padding=(0, 1))
        table.add_column("#", justify="right", style="dim")
        table.add_column("Category", style="cyan", no_wrap=True)
        table.add_column("Trigger words", style="white")

        lexicon = vocabulary.lexicon_for(d)
        for position, (category, terms) in enumerate(lexicon.items(), start=1):
            table.add_row(str(position), category.value, ", ".join(terms))

        table.add_row("", FALLBACK_CATEGORIES[d].value, "[dim](fallback)[/dim]")

        console.print(table)

    if state.verbose:
        console.print(f"\n[dim]{state.parser.categorization_engine.get_rule_chain_info()}[/dim]")


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
