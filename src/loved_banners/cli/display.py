"""Rich display helpers for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from loved_banners.core.models import BannerResult, BannerStatus

console = Console()
error_console = Console(stderr=True)

_STATUS_STYLES = {
    BannerStatus.GENERATED: "green",
    BannerStatus.CACHED: "dim",
    BannerStatus.FAILED: "bold red",
    BannerStatus.SKIPPED: "yellow",
}


def print_results(results: list[BannerResult]) -> None:
    """Display per-beatmapset banner outcomes in a table."""
    if not results:
        console.print("[dim]No beatmapsets to generate banners for.[/dim]")
        return
    table = Table(title="Voting Banners", border_style="cyan")
    table.add_column("Beatmapset", style="bold")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Output", style="dim")
    for result in results:
        request = result.request
        status = result.status.value
        if result.error is not None:
            status = f"{status}: {result.error}"
        style = _STATUS_STYLES[result.status]
        table.add_row(
            f"#{request.beatmapset_id}" if request.beatmapset_id is not None else "-",
            request.title,
            f"[{style}]{status}[/{style}]",
            str(request.output_stem),
        )
    console.print(table)


def print_summary(results: list[BannerResult]) -> None:
    counts = {status: 0 for status in BannerStatus}
    for result in results:
        counts[result.status] += 1
    console.print(
        f"Created [bold green]{counts[BannerStatus.GENERATED]}[/bold green], "
        f"cached [bold]{counts[BannerStatus.CACHED]}[/bold], "
        f"failed [bold red]{counts[BannerStatus.FAILED]}[/bold red], "
        f"skipped [bold yellow]{counts[BannerStatus.SKIPPED]}[/bold yellow]"
    )


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    error_console.print(f"[bold red]Error:[/bold red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")
