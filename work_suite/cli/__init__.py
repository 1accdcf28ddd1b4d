"""
Command Line Interface for the Work Suite API.
"""

from typing import Optional

import typer
import uvicorn
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_settings
from ..content.apps import list_apps
from ..db.base import Database
from ..storage import FileStore
from ..themes.presets import get_presets

app = typer.Typer(help="Work Suite - content backend for the Work Suite apps")
console = Console()


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to run the API server on"),
    host: Optional[str] = typer.Option(None, help="Host to bind the server to"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server."""
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    rprint(Panel.fit(f"Starting Work Suite API on http://{host}:{port}", style="bold blue"))
    uvicorn.run("work_suite.main:app", host=host, port=port, reload=reload or settings.debug)


@app.command("init-db")
def init_db():
    """Create the data directory, the scope folders and the database schema."""
    settings = get_settings()
    settings.data_path.mkdir(parents=True, exist_ok=True)
    FileStore(settings.files_path).ensure_structure()

    database = Database(settings.resolved_database_url)
    database.init()
    database.close()
    console.print(f"Database ready at {settings.resolved_database_url}")
    console.print(f"Files stored under {settings.files_path}")


@app.command()
def presets(
    category: Optional[str] = typer.Option(None, help="Only show 'dark' or 'light' presets"),
):
    """List the content theme presets."""
    table = Table(title="Content Themes", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="green")
    table.add_column("Accent")
    table.add_column("Description")

    for preset in get_presets(category):
        table.add_row(
            preset["id"],
            preset["name"],
            preset["category"],
            preset["colors"]["accent"],
            preset["description"],
        )
    console.print(table)


@app.command()
def apps():
    """List the registered content apps."""
    table = Table(title="Content Apps", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Required fields", style="green")
    table.add_column("Markdown import")

    for spec in list_apps():
        table.add_row(
            spec.id,
            spec.name,
            ", ".join(spec.required) or "-",
            "yes" if spec.markdown_import else "no",
        )
    console.print(table)


if __name__ == "__main__":
    app()
