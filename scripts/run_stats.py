#!/usr/bin/env python3
"""
Address statistics calculator - replays swap history into PnL statistics.

Recalculate every trading address:
    python scripts/run_stats.py

Show a single address (calculated if nothing is stored yet):
    python scripts/run_stats.py --address 0xabc...

Force a fresh replay of a single address:
    python scripts/run_stats.py --address 0xabc... --recalculate
"""

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from rich.console import Console
from rich.table import Table

from cat_dashboard.database.models import AddressRound, AddressStats
from cat_dashboard.pipeline import AddressStatsCalculator
from cat_dashboard.utils.logging import setup_logging

console = Console()


def print_address_stats(stats: AddressStats) -> None:
    """Render one address's statistics."""
    table = Table(title=f"Address {stats.address}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Trades (buy / sell)", f"{stats.trade_count} ({stats.buy_count} / {stats.sell_count})")
    table.add_row("Position (CAT)", f"{stats.current_position_cat:,}")
    table.add_row("Open position", "yes" if stats.has_open_position else "no")
    table.add_row("Cost basis", f"${stats.current_cost_usd:,.2f}")
    table.add_row(
        "Avg buy price",
        f"${stats.avg_buy_price:.8f}" if stats.avg_buy_price is not None else "-"
    )
    table.add_row("Realized PnL", f"${stats.realized_pnl_usd:,.2f}")
    table.add_row("Unrealized PnL", f"${stats.unrealized_pnl_usd:,.2f}")
    table.add_row("Total PnL", f"${stats.total_pnl_usd:,.2f}")
    table.add_row("ROI", f"{stats.roi_total:.2f}%" if stats.roi_total is not None else "-")
    table.add_row("Rounds (profit / loss)", f"{stats.profit_round_count} / {stats.loss_round_count}")
    table.add_row("Trading pattern", stats.trading_pattern)

    labels = [
        name for name in [
            "is_new_address", "is_swing_trader", "is_profitable_realized",
            "is_profitable_total", "is_deep_loss",
        ]
        if getattr(stats, name)
    ]
    table.add_row("Labels", ", ".join(labels) or "-")

    console.print(table)


def print_address_rounds(rounds: list[AddressRound]) -> None:
    """Render the closed rounds of an address."""
    if not rounds:
        console.print("[dim]No closed rounds[/dim]")
        return

    table = Table(title="Closed rounds")
    table.add_column("#", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Bought (CAT)", justify="right")
    table.add_column("Sold (CAT)", justify="right")
    table.add_column("PnL", justify="right")
    table.add_column("Result")

    for r in rounds:
        color = {"profit": "green", "loss": "red"}.get(r.result_type, "dim")
        table.add_row(
            str(r.round_index),
            datetime.fromtimestamp(r.start_time).strftime("%Y-%m-%d %H:%M"),
            datetime.fromtimestamp(r.end_time).strftime("%Y-%m-%d %H:%M") if r.end_time else "-",
            f"{r.buy_volume_cat:,}",
            f"{r.sell_volume_cat:,}",
            f"${r.realized_pnl_usd:,.2f}",
            f"[{color}]{r.result_type or 'even'}[/{color}]",
        )

    console.print(table)


async def run_all(calculator: AddressStatsCalculator, batch_size: int) -> dict:
    last_print = [0]

    def progress(processed: int, total: int):
        if processed - last_print[0] >= 50 or processed == total:
            pct = (processed / total * 100) if total > 0 else 0
            console.print(f"  Progress: {processed}/{total} ({pct:.1f}%)")
            last_print[0] = processed

    return await calculator.calculate_all_addresses(
        batch_size=batch_size,
        progress_callback=progress
    )


@click.command()
@click.option("--address", "-a", default=None, help="Show statistics of a single address")
@click.option("--recalculate", is_flag=True, help="With --address, replay even if stats are stored")
@click.option("--batch-size", default=None, type=int, help="Addresses replayed concurrently")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--no-log-file", is_flag=True, help="Log to console only")
def main(address: str, recalculate: bool, batch_size: int, verbose: bool, no_log_file: bool):
    """Recalculate address position and PnL statistics."""
    setup_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        log_file=not no_log_file
    )

    start_time = datetime.now()
    calculator = AddressStatsCalculator()

    if address:
        stats = calculator.get_address_stats(address, recalculate=recalculate)
        if stats is None:
            console.print(f"[yellow]No trades found for {address}[/yellow]")
            return
        print_address_stats(stats)
        print_address_rounds(calculator.get_address_rounds(address))
        return

    console.print(f"Started at: {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    result = asyncio.run(run_all(calculator, batch_size))

    duration = (datetime.now() - start_time).total_seconds()

    table = Table(title="Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Total addresses", str(result["total"]))
    table.add_row("Updated", str(result["updated"]))
    table.add_row("Skipped (no trades)", str(result["skipped"]))
    table.add_row("Errors", f"[red]{result['errors']}[/red]" if result["errors"] else "0")
    table.add_row("Duration", f"{duration:.1f}s")
    console.print(table)


if __name__ == "__main__":
    main()
