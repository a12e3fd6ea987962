"""Rich terminal output for proxyprobe."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from proxyprobe.config import FAST_THRESHOLD_MS, MEDIUM_THRESHOLD_MS
from proxyprobe.matrices.base import Matrix
from proxyprobe.models import MetricType, PingResult

console = Console()


def _color_for_ms(value: float) -> str:
    """Return a Rich color name based on latency value."""
    if value <= FAST_THRESHOLD_MS:
        return "green"
    elif value <= MEDIUM_THRESHOLD_MS:
        return "yellow"
    return "red"


def _fmt_ms(value: float, colorize: bool = True) -> Text:
    text = f"{value}ms"
    if colorize:
        return Text(text, style=_color_for_ms(value))
    return Text(text)


def _fmt_loss(value: float) -> Text:
    style = "green" if value == 0 else ("yellow" if value < 50 else "red")
    return Text(f"{value:.1f}%", style=style)


# ── Ping rendering ────────────────────────────────────────────────────


def _build_ping_table(result: PingResult) -> Table:
    table = Table(show_header=True, expand=False, border_style="dim")
    table.add_column("Phase", style="bold")
    table.add_column("Avg", justify="right")
    table.add_column("Jitter", justify="right")
    table.add_column("Max", justify="right")

    table.add_row("RTT", _fmt_ms(result.rtt), _fmt_ms(result.rtt_sd, False), _fmt_ms(result.max_rtt))
    table.add_row(
        "Request",
        _fmt_ms(result.request),
        _fmt_ms(result.request_sd, False),
        _fmt_ms(result.max_request),
    )
    return table


def _build_sample_table(result: PingResult) -> Table:
    table = Table(show_header=True, expand=False, border_style="dim")
    table.add_column("#", justify="right", style="dim")
    table.add_column("RTT", justify="right")
    table.add_column("Request", justify="right")
    table.add_column("Status", justify="right")

    samples = zip(result.rtt_list, result.request_list, result.status_codes)
    for i, (rtt, req, code) in enumerate(samples, start=1):
        status = Text(str(code), style="green" if 200 <= code < 400 else "red")
        table.add_row(str(i), _fmt_ms(rtt), _fmt_ms(req), status)
    return table


def render_ping(url: str, result: PingResult, verbose: bool = False) -> None:
    """Display the aggregated ping result for *url*."""
    console.print(f"[bold]{url}[/bold] | loss ", _fmt_loss(result.packet_loss))
    if not result.rtt_list:
        console.print("[dim italic]  No successful attempts[/dim italic]")
        return
    console.print(_build_ping_table(result))
    if verbose:
        console.print(_build_sample_table(result))


# ── Matrix rendering ──────────────────────────────────────────────────


def render_matrices(matrices: Sequence[Matrix]) -> None:
    """Display one row per requested matrix."""
    table = Table(show_header=True, expand=False, border_style="dim")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    for matrix in matrices:
        if matrix.type is MetricType.INVALID:
            value: Text = Text("n/a", style="dim")
        elif matrix.type is MetricType.PACKET_LOSS:
            value = _fmt_loss(matrix.value)
        else:
            value = _fmt_ms(matrix.value)
        table.add_row(matrix.type.value, value)

    console.print()
    console.print(table)


def render_full(
    url: str,
    matrices: Sequence[Matrix],
    ping: Optional[PingResult] = None,
    verbose: bool = False,
) -> None:
    if ping is not None:
        render_ping(url, ping, verbose=verbose)
    render_matrices(matrices)


def render_error(message: str) -> None:
    """Display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def render_warning(message: str) -> None:
    """Display a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")
