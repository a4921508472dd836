#!/usr/bin/env python3
"""
Main CLI entry point for csitui
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from csitui import __version__
from csitui.exceptions import TemplateError
from csitui.ui.layout.templates import TemplateCatalog, dump_template

console = Console()

app = typer.Typer(
    name="csitui",
    help="Tiling terminal dashboard for Wi-Fi CSI measurement streams",
    invoke_without_command=True,
    no_args_is_help=False,
)
templates_app = typer.Typer(help="Manage saved layout templates")
app.add_typer(templates_app, name="templates")

TemplatesDirOption = typer.Option(
    None,
    "--templates-dir",
    envvar="CSITUI_TEMPLATES_DIR",
    help="Directory holding layout templates",
)


@app.callback()
def main(ctx: typer.Context):
    """
    csitui - tiling dashboard for CSI measurement streams

    Run without a command to open the dashboard.
    """
    if ctx.invoked_subcommand is None:
        run_dashboard(template=None, templates_dir=None, theme=None, verbose=False)


@app.command("run")
def run_dashboard(
    template: Optional[str] = typer.Option(
        None, "--template", "-t", help="Template to open instead of the default one"
    ),
    templates_dir: Optional[Path] = TemplatesDirOption,
    theme: Optional[str] = typer.Option(None, "--theme", help="Theme to start with"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log input events"),
):
    """Open the tiling dashboard."""
    from csitui.ui.app import CsiTuiApp
    from csitui.utils.logging_utils import setup_tui_logging

    logger, _ = setup_tui_logging(__name__, verbose=verbose)
    catalog = TemplateCatalog(templates_dir)

    manager = None
    if template:
        try:
            manager = catalog.load(template)
        except TemplateError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e

    try:
        CsiTuiApp(manager=manager, catalog=catalog, theme_name=theme).run()
    except KeyboardInterrupt:
        pass
    logger.info("Dashboard closed")


@app.command()
def version():
    """Show csitui version"""
    typer.echo(f"csitui version {__version__}")


@templates_app.command("list")
def list_templates(templates_dir: Optional[Path] = TemplatesDirOption):
    """List saved templates and which one loads at startup"""
    catalog = TemplateCatalog(templates_dir)
    entries = catalog.list()

    if not entries:
        console.print(f"[yellow]No templates in {catalog.templates_dir}[/yellow]")
        return

    table = Table(title="Layout Templates")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Default", justify="center")
    table.add_column("File", style="dim", overflow="fold")
    for entry in entries:
        table.add_row(entry.name, "★" if entry.is_default else "", str(entry.path))
    console.print(table)


@templates_app.command("show")
def show_template(
    name: str = typer.Argument(..., help="Template name"),
    templates_dir: Optional[Path] = TemplatesDirOption,
):
    """Print a template after validation"""
    catalog = TemplateCatalog(templates_dir)
    try:
        manager = catalog.load(name)
    except TemplateError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[bold]{name}[/bold] · {manager.pane_count()} pane(s)")
    console.print(Syntax(dump_template(manager), "yaml"))


@templates_app.command("set-default")
def set_default(
    name: str = typer.Argument(..., help="Template name"),
    templates_dir: Optional[Path] = TemplatesDirOption,
):
    """Load NAME automatically at startup"""
    catalog = TemplateCatalog(templates_dir)
    if not catalog.set_default(name):
        console.print(f"[red]Error: could not make '{name}' the default template[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ '{name}' is now the default template[/green]")


@templates_app.command("delete")
def delete_template(
    name: str = typer.Argument(..., help="Template name"),
    templates_dir: Optional[Path] = TemplatesDirOption,
):
    """Delete a saved template"""
    catalog = TemplateCatalog(templates_dir)
    try:
        if not catalog.exists(name):
            console.print(f"[red]Error: template '{name}' not found[/red]")
            raise typer.Exit(1)
        deleted = catalog.delete(name)
    except TemplateError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    if not deleted:
        console.print(f"[red]Error: could not delete '{name}'[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted template '{name}'[/green]")


def run():
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    run()
