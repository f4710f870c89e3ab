import asyncio

import click

from clients.tenderly_client import TenderlyClient
from clients.web3_clients import create_web3_clients, validate_web3_clients
from config.settings import settings
from models.simulation_config import GovernorType
from simulation.runner import build_governor_sim_configs, run_simulations
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Simulate Governor CLI")


async def _simulate_governor(
    dao_name: str, governor_address: str, governor_type: GovernorType, include_executed: bool, reports_dir: str
):
    clients = create_web3_clients(settings.rpc)
    await validate_web3_clients(clients)
    configs = await build_governor_sim_configs(
        dao_name,
        governor_address,
        governor_type,
        clients.primary,
        include_executed,
        settings.simulation.proposal_events_from_block,
    )
    async with TenderlyClient() as tenderly:
        return await run_simulations(configs, clients, tenderly, reports_dir=reports_dir)


@click.command()
@click.option("-d", "--dao", "dao_name", default=settings.simulation.dao_name, required=True, type=str,
              help="DAO name used in report paths, e.g. Compound. Defaults to $DAO_NAME.")
@click.option("-g", "--governor", "governor_address", default=settings.simulation.governor_address, required=True,
              type=str, help="Governor address. Defaults to $GOVERNOR_ADDRESS.")
@click.option("-t", "--governor-type", default=settings.simulation.governor_type, required=True,
              type=click.Choice([governor_type.value for governor_type in GovernorType]),
              help="Governor flavour. Defaults to $GOVERNOR_TYPE.")
@click.option("--include-executed", is_flag=True, default=False, help="Also replay executed proposals.")
@click.option("-r", "--reports-dir", default=settings.simulation.reports_dir, show_default=True, type=str,
              help="Directory the reports are written to.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def simulate_governor(
    dao_name: str, governor_address: str, governor_type: str, include_executed: bool, reports_dir: str, log_file: str
):
    """
    Simulates every proposal of a governor that can still be executed.
    """
    configure_logging(log_file or settings.app.log_file, settings.app.effective_log_level)
    logger.info(f"Simulating proposals of {dao_name} governor {governor_address}...")

    try:
        reports = asyncio.run(
            _simulate_governor(dao_name, governor_address, GovernorType(governor_type), include_executed, reports_dir)
        )
    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user.")
        return
    except Exception as e:
        logger.exception("An error occurred during simulation:")
        raise e

    click.echo(f"Simulated {len(reports)} proposal(s), reports in {reports_dir}")


if __name__ == "__main__":
    simulate_governor()
