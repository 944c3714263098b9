"""
Display utilities using Rich library for terminal output
"""
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import List, Tuple

from upload_cli.models import PolicyInfo, RejectedPart, UploadedFile

console = Console()


def show_header(title: str):
    """Display a header panel"""
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def show_error(message: str):
    """Display error message"""
    console.print(f"[bold red]Error:[/bold red] {message}")


def show_success(message: str):
    """Display success message"""
    console.print(f"[bold green]Success:[/bold green] {message}")


def show_info(message: str):
    """Display info message"""
    console.print(f"[cyan]{message}[/cyan]")


def display_uploaded_table(files: List[UploadedFile]):
    """Display accepted files as a formatted table"""
    table = Table(title="Accepted", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Size", justify="right")
    table.add_column("Stored As", style="yellow")

    for f in files:
        table.add_row(
            f.field_name,
            f.original_name or "-",
            f.mime_type or "-",
            f"{f.size}",
            f.path or f.storage,
        )

    console.print(table)


def display_rejected_table(parts: List[RejectedPart]):
    """Display rejected parts as a formatted table"""
    table = Table(title="Rejected", show_header=True, header_style="bold red")
    table.add_column("Field", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Reason", style="red")

    for part in parts:
        table.add_row(part.field_name or "-", part.original_name or "-", part.reason)

    console.print(table)


def display_check_table(rows: List[Tuple[str, str, int, str]]):
    """Display local admission decisions: (file, mime type, size, decision)"""
    table = Table(title="Local Check", show_header=True, header_style="bold magenta")
    table.add_column("File", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Size", justify="right")
    table.add_column("Decision")

    for name, mime_type, size, decision in rows:
        style = "green" if decision == "Accepted" else "red"
        table.add_row(name, mime_type, str(size), f"[{style}]{decision}[/{style}]")

    console.print(table)


def display_policy(policy: PolicyInfo):
    """Display active limits and allow-lists"""
    table = Table(title="Limits", show_header=True, header_style="bold magenta")
    table.add_column("Limit", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in policy.limits.items():
        table.add_row(name, "unbounded" if value is None else str(value))
    console.print(table)

    console.print(f"[green]Extensions:[/green] {', '.join(policy.allowed_extensions) or '-'}")
    console.print(f"[green]MIME types:[/green] {', '.join(policy.allowed_mime_types) or '-'}")
    console.print(f"[green]Storage:[/green] {policy.storage}")
    console.print(f"[green]Abort on first rejection:[/green] {policy.abort_on_first_rejection}")
