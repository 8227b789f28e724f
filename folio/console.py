"""Console UI for terminal output using Rich."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from folio.models.media import Essay, Photo
from folio.models.paper import Paper


class ConsoleUI:
    """Rich-based console UI for listings and notifications.

    Doubles as the CLI's notifier for :class:`~folio.controllers.crud.CrudController`.
    """

    def __init__(self, console: Optional[Console] = None):
        """Initialize console."""
        self.console = console or Console()

    def info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message in red."""
        self.console.print(f"[red]Error:[/red] {message}")

    def exported(self, count: int, filepath: Path) -> None:
        self.console.print(f"[green]Exported[/green] {count} papers → {filepath}")

    def display_papers(self, papers: list[Paper]) -> None:
        """Display papers in a formatted table."""
        table = Table(title="Papers")
        table.add_column("ID", justify="right")
        table.add_column("Year", width=6)
        table.add_column("Title", overflow="fold")
        table.add_column("Authors", overflow="fold")
        table.add_column("Venue", overflow="fold")
        table.add_column("Status")

        for paper in papers:
            status = "[green]published[/green]" if paper.published else "[yellow]draft[/yellow]"
            if paper.featured:
                status += " ★"
            table.add_row(
                str(paper.id) if paper.id else "-",
                str(paper.year) if paper.year else "-",
                paper.title,
                paper.authors,
                paper.journal or "-",
                status,
            )

        self.console.print(table)
        if not papers:
            self.console.print("No papers found.")

    def display_photos(self, photos: list[Photo]) -> None:
        table = Table(title="Photos")
        table.add_column("ID", justify="right")
        table.add_column("Title", overflow="fold")
        table.add_column("Location", overflow="fold")
        table.add_column("Image", overflow="fold")
        table.add_column("Published")
        for photo in photos:
            table.add_row(
                str(photo.id),
                photo.title,
                photo.location or "-",
                photo.image_url,
                (photo.published_at or "")[:10] if photo.published else "no",
            )
        self.console.print(table)
        if not photos:
            self.console.print("No photos yet. The gallery shows its sample set.")

    def display_essays(self, essays: list[Essay]) -> None:
        table = Table(title="Essays")
        table.add_column("ID", justify="right")
        table.add_column("Title", overflow="fold")
        table.add_column("Category")
        table.add_column("Published")
        for essay in essays:
            table.add_row(
                str(essay.id),
                essay.title,
                essay.category or "-",
                (essay.published_at or "")[:10] if essay.published else "no",
            )
        self.console.print(table)
        if not essays:
            self.console.print("No essays yet. The magazine shows its sample set.")
