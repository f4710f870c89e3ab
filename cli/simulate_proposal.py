import asyncio
from typing import Optional

import click

from clients.tenderly_client import TenderlyClient
from clients.web3_clients import create_web3_clients, validate_web3_clients
from config.settings import settings
from sims import load_sim, load_sim_config_file
from simulation.runner import run_simulations
from utils.logger_utils import configure_logging, get_logger

logger = get_logger("Simulate Proposal CLI")


async def _simulate(config, expand_arbitrum: bool, reports_dir: str):
    clients = create_web3_clients(settings.rpc)
    await validate_web3_clients(clients)
    async with TenderlyClient() as tenderly:
        return await run_simulations([config], clients, tenderly, expand_arbitrum, reports_dir)


@click.command()
@click.option("-s", "--sim", "sim_name", default=None, type=str,
              help="Name of a registered simulation, e.g. non-emerg-sc-atlas-fees. Defaults to $SIM_NAME.")
@click.option("-c", "--config", "config_file", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON file holding a simulation config.")
@click.option("--no-arbitrum-expand", is_flag=True, default=False,
              help="Do not simulate the L1 and retryable legs of Arbitrum proposals.")
@click.option("-r", "--reports-dir", default=settings.simulation.reports_dir, show_default=True, type=str,
              help="Directory the reports are written to.")
@click.option("--log-file", default=None, show_default=True, type=str, help="Path to the log file.")
def simulate_proposal(
    sim_name: Optional[str], config_file: Optional[str], no_arbitrum_expand: bool, reports_dir: str, log_file: str
):
    """
    Simulates one proposal config on Tenderly, runs the proposal checks
    and writes the report.
    """
    configure_logging(log_file or settings.app.log_file, settings.app.effective_log_level)

    if sim_name and config_file:
        raise click.UsageError("Pass exactly one of --sim or --config")
    # $SIM_NAME only applies when no config file was given
    if not config_file:
        sim_name = sim_name or settings.simulation.sim_name
        if not sim_name:
            raise click.UsageError("Pass exactly one of --sim or --config")
    config = load_sim_config_file(config_file) if config_file else load_sim(sim_name)
    logger.info(f"Simulating {config.type} proposal for {config.dao_name} governor {config.governor_address}")

    try:
        reports = asyncio.run(_simulate(config, not no_arbitrum_expand, reports_dir))
    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user.")
        return
    except Exception as e:
        logger.exception("An error occurred during simulation:")
        raise e

    for data, checks in reports:
        failed = [report.name for report in checks.values() if not report.result.passed]
        status = "FAILED: " + ", ".join(failed) if failed else "passed"
        click.echo(f"{data.config.type} {data.proposal.identifier}: {status}")


if __name__ == "__main__":
    simulate_proposal()
