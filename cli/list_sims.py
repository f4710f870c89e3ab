import click

from sims import list_sims as registered_sims
from sims import load_sim


@click.command()
def list_sims():
    """Lists the registered simulation configs."""
    for name in registered_sims():
        config = load_sim(name)
        click.echo(f"{name.replace('_', '-')}\t{config.type}\t{config.dao_name}\t{config.governor_address}")


if __name__ == "__main__":
    list_sims()
