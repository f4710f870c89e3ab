try:
    import uvloop
except ImportError:
    uvloop = None

from cli import cli
from config.settings import settings
from utils.logger_utils import configure_logging, get_logger

configure_logging(settings.app.log_file, settings.app.effective_log_level)
logger = get_logger("Proposal Sims")

if __name__ == "__main__":
    if uvloop:
        # asyncio.run() in each command picks up the uvloop policy
        uvloop.install()
        logger.debug("Using uvloop event loop policy.")
    else:
        logger.debug("uvloop not installed, using the default asyncio event loop.")

    cli(prog_name="proposal-sims")
