#!/usr/bin/env python3
"""
AutoSwap runner.

Approves the router, then swaps every allow-listed pair once per cycle,
for a fixed number of cycles or as a daily batch.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
import signal

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt

from autoswap.core.config import Config
from autoswap.core.utils import mask_url
from autoswap.trading.gateway import LedgerGateway
from autoswap.trading.runner import DAILY, MANUAL, DailyRunner, RunMode, run
from autoswap.trading.scheduler import CycleScheduler

app = typer.Typer(help="Automated DEX swap cycles")
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("autoswap")


def prompt_run_mode(default_cycles: int) -> RunMode:
    """Ask for the run mode interactively."""
    mode = Prompt.ask(
        "Select cycle mode ([cyan]manual[/cyan]: fixed cycle count, [cyan]daily[/cyan]: 3 cycles every 24h)",
        choices=[MANUAL, DAILY],
        default=MANUAL,
    )
    if mode == DAILY:
        return RunMode(DAILY)

    while True:
        cycles = IntPrompt.ask("Number of cycles", default=default_cycles)
        if cycles > 0:
            return RunMode(MANUAL, cycles)
        console.print("[red]Cycle count must be greater than 0.[/red]")


@app.command()
def main(
    cycles: int = typer.Option(None, "--cycles", "-c", help="Number of cycles to run"),
    daily: bool = typer.Option(False, "--daily", "-d", help="Run 3 cycles every 24 hours"),
    config_path: str = typer.Option(None, "--config", help="Path to config.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """
    Run AutoSwap cycles.

    Example:
        python scripts/run.py --cycles 5
        python scripts/run.py --daily
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    load_dotenv()

    try:
        config = Config.from_env(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        console.print("\nCopy config.example.json to config.json and adjust it.")
        raise typer.Exit(1)

    problems = config.validate()
    if problems:
        console.print("[red]ERROR: Invalid configuration:[/red]")
        for problem in problems:
            console.print(f"  - {problem}")
        raise typer.Exit(1)

    if verbose:
        console.print(Panel(config.get_summary(), title="Configuration", border_style="dim"))

    if cycles is not None and cycles <= 0:
        console.print("[red]ERROR: --cycles must be greater than 0[/red]")
        raise typer.Exit(1)

    gateway = LedgerGateway(
        config.rpc_url,
        config.private_key,
        config.chain_id,
        receipt_timeout=config.receipt_timeout,
        rpc_timeout=config.rpc_timeout,
    )

    console.print(Panel(
        f"[bold]AutoSwap[/bold]\n\n"
        f"Wallet: {gateway.address}\n"
        f"Network: Chain ID {config.chain_id}\n"
        f"RPC: {mask_url(config.rpc_url)}\n"
        f"Token Recovery: {'Enabled' if config.enable_token_recovery else 'Disabled'}",
        title="Starting",
        border_style="blue",
    ))

    if not gateway.is_connected():
        console.print(f"[red]ERROR: Cannot reach RPC at {mask_url(config.rpc_url)}[/red]")
        raise typer.Exit(1)

    run_mode = RunMode.resolve(cycles, daily) or prompt_run_mode(config.cycle_count)
    logger.info(f"Run mode: {run_mode.mode} ({run_mode.cycle_count or config.daily_cycles} cycles)")

    scheduler = CycleScheduler.from_config(config, gateway)
    daily_runner = DailyRunner(
        scheduler,
        cycles_per_batch=config.daily_cycles,
        interval_seconds=config.daily_interval_seconds,
    )

    # Handle graceful shutdown
    def signal_handler(sig, frame):
        console.print("\n[yellow]Shutting down...[/yellow]")
        daily_runner.stop()
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        ok = run(scheduler, run_mode, daily_runner)
    except KeyboardInterrupt:
        console.print("[yellow]Stopped.[/yellow]")
        return

    if not ok:
        raise typer.Exit(1)

    if not run_mode.is_daily:
        console.print("\n[bold green]AutoSwap finished![/bold green]")


if __name__ == "__main__":
    app()
