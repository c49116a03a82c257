"""Command-line administration for a Hyvmind deployment."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from hyvmind_core.db.enums import Role
from hyvmind_core.db.session import init_db, session_scope
from hyvmind_core.graph.access import assign_role
from hyvmind_core.graph.admin import wipe_graph_state
from hyvmind_core.graph.assembler import get_graph_data
from hyvmind_core.graph.voting import get_buzz_leaderboard
from hyvmind_core.log import configure_logging
from hyvmind_core.settings import settings

app = typer.Typer(help="Hyvmind backend administration.")
console = Console()


@app.callback()
def main(log_level: str = typer.Option(settings.log_level, help="Logging level.")) -> None:
    configure_logging(log_level)


@app.command("init-db")
def init_db_command() -> None:
    """Create all tables on the configured database (use alembic for managed deployments)."""
    init_db()
    console.print(f"[green]✓ Initialized[/green] {settings.database_url}")


@app.command("grant-role")
def grant_role(
    principal: str,
    role: Role = typer.Option(Role.admin, help="Role to assign."),
) -> None:
    """
    Assign a role directly, without an admin caller.

    Used to bootstrap the first admin of a fresh deployment.
    """
    with session_scope() as session:
        assign_role(session, principal, role, bypass=True)
    console.print(f"[green]✓[/green] {principal}: [cyan]{role.value}[/cyan]")


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt.")) -> None:
    """Delete every node, vote, BUZZ score and membership. Profiles and roles are kept."""
    if not yes:
        typer.confirm("This wipes all graph data. Continue?", abort=True)
    with session_scope() as session:
        counts = wipe_graph_state(session)

    table = Table(title="Deleted rows", show_header=True, header_style="bold cyan")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


@app.command()
def leaderboard(limit: int = typer.Option(20, help="Number of entries to show.")) -> None:
    """Print the BUZZ leaderboard."""
    with session_scope() as session:
        entries = get_buzz_leaderboard(session, limit=limit)
    if not entries:
        console.print("[yellow]No BUZZ scores yet[/yellow]")
        return

    table = Table(title="BUZZ Leaderboard", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Principal", style="cyan")
    table.add_column("Name")
    table.add_column("BUZZ", justify="right", style="green")
    for rank, entry in enumerate(entries, start=1):
        table.add_row(str(rank), entry.principal, entry.profile_name or "", str(entry.score))
    console.print(table)


@app.command("graph-stats")
def graph_stats() -> None:
    """Print node and edge counts."""
    with session_scope() as session:
        graph = get_graph_data(session)

    table = Table(title="Graph", show_header=True, header_style="bold cyan")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("curations", str(len(graph.curations)))
    table.add_row("swarms", str(len(graph.swarms)))
    table.add_row("locations", str(len(graph.locations)))
    table.add_row("law tokens", str(len(graph.law_tokens)))
    table.add_row("interpretation tokens", str(len(graph.interpretation_tokens)))
    table.add_row("edges", str(len(graph.edges)))
    console.print(table)


if __name__ == "__main__":
    app()
