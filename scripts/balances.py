#!/usr/bin/env python3
"""
Wallet overview.

Shows balance and router allowance for every catalog token. Read-only.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from autoswap.core.catalog import DEFAULT_CATALOG
from autoswap.core.config import Config
from autoswap.core.errors import LedgerQueryError
from autoswap.core.utils import format_amount
from autoswap.trading.approvals import ApprovalManager
from autoswap.trading.gateway import LedgerGateway
from autoswap.trading.oracle import BalanceOracle

app = typer.Typer(help="Show wallet balances and router allowances")
console = Console()


@app.command()
def main(
    config_path: str = typer.Option(None, "--config", help="Path to config.json"),
):
    """Print balances and allowances for all tokens."""
    load_dotenv()
    config = Config.from_env(config_path)

    if not config.private_key or not config.rpc_url:
        console.print("[red]ERROR: rpcUrl and PRIVATE_KEY are required[/red]")
        raise typer.Exit(1)

    gateway = LedgerGateway(config.rpc_url, config.private_key, config.chain_id, rpc_timeout=config.rpc_timeout)
    oracle = BalanceOracle(gateway, DEFAULT_CATALOG)
    approvals = ApprovalManager(gateway, oracle, config)

    table = Table(title=f"Wallet {gateway.address}")
    table.add_column("Token", style="cyan")
    table.add_column("Balance", justify="right")
    table.add_column("Swap Range", justify="right")
    table.add_column("Router Allowance", justify="right")

    for token in DEFAULT_CATALOG.tokens:
        try:
            balance = format_amount(oracle.get_balance(token), token)
            allowance = oracle.get_allowance(token)
            threshold = approvals.required_allowance(token)
        except LedgerQueryError as e:
            table.add_row(token.name, "[red]error[/red]", "", f"[red]{e}[/red]")
            continue

        if allowance >= threshold:
            allowance_text = "[green]approved[/green]"
        else:
            allowance_text = f"[yellow]{format_amount(allowance, token)}[/yellow]"

        table.add_row(
            token.name,
            balance,
            f"{token.min_amount:g} - {token.max_amount:g}",
            allowance_text,
        )

    console.print(table)


if __name__ == "__main__":
    app()
