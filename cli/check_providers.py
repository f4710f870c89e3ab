import asyncio

import click

from clients.web3_clients import create_web3_clients, validate_web3_clients
from config.settings import settings
from constants.constants import CHAIN_NAMES
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Check Providers CLI")


async def _check_providers() -> int:
    return await validate_web3_clients(create_web3_clients(settings.rpc))


@click.command()
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def check_providers(log_file: str):
    """Verifies that every RPC endpoint is on the chain it is configured for."""
    configure_logging(log_file or settings.app.log_file, settings.app.effective_log_level)
    chain_id = asyncio.run(_check_providers())
    click.echo(f"RPC endpoints OK, primary provider is on {CHAIN_NAMES.get(chain_id, f'chain {chain_id}')}")


if __name__ == "__main__":
    check_providers()
