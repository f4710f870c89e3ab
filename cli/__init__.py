import click


from cli.check_providers import check_providers
from cli.list_sims import list_sims
from cli.simulate_governor import simulate_governor
from cli.simulate_proposal import simulate_proposal


@click.group()
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx):
    pass


# Simulate one proposal config
cli.add_command(simulate_proposal, "simulate_proposal")

# Simulate every live proposal of a governor
cli.add_command(simulate_governor, "simulate_governor")

# Registered proposal configs
cli.add_command(list_sims, "list_sims")

# RPC chain ID validation
cli.add_command(check_providers, "check_providers")
