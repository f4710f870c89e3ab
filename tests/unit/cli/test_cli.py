from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from cli import cli
from config.settings import AppSettings


def test_debug_overrides_log_level():
    assert AppSettings(DEBUG=True, LOG_LEVEL="WARNING").effective_log_level == "DEBUG"
    assert AppSettings(DEBUG=False, LOG_LEVEL="WARNING").effective_log_level == "WARNING"


def test_list_sims():
    result = CliRunner().invoke(cli, ["list_sims"])

    assert result.exit_code == 0
    assert "non-emerg-sc-atlas-fees\tnew\tArbitrum" in result.output
    assert "compound-executed\texecuted\tCompound" in result.output


def test_simulate_proposal_needs_exactly_one_source(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{}")

    result = CliRunner().invoke(
        cli, ["simulate_proposal", "--sim", "compound-executed", "--config", str(config_file)]
    )

    assert result.exit_code == 2
    assert "Pass exactly one of --sim or --config" in result.output


def test_simulate_proposal_runs_named_sim(tmp_path):
    with patch("cli.simulate_proposal._simulate", AsyncMock(return_value=[])) as simulate:
        result = CliRunner().invoke(
            cli,
            ["simulate_proposal", "--sim", "uniswap-new-fee-tier", "--no-arbitrum-expand", "-r", str(tmp_path)],
        )

    assert result.exit_code == 0, result.output
    config, expand_arbitrum, reports_dir = simulate.await_args.args
    assert config.dao_name == "Uniswap"
    assert expand_arbitrum is False
    assert reports_dir == str(tmp_path)


def test_simulate_proposal_config_file_wins_over_sim_name_env(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(
        '{"type": "executed", "daoName": "Compound", "governorType": "bravo", '
        '"governorAddress": "0xc0Da02939E1441F497fd74F78cE7Decb17B66529", "proposalId": 5}'
    )

    with patch("cli.simulate_proposal.settings.simulation.sim_name", "uniswap-new-fee-tier"), patch(
        "cli.simulate_proposal._simulate", AsyncMock(return_value=[])
    ) as simulate:
        result = CliRunner().invoke(cli, ["simulate_proposal", "--config", str(config_file), "-r", str(tmp_path)])

    assert result.exit_code == 0, result.output
    config = simulate.await_args.args[0]
    assert config.dao_name == "Compound"
    assert config.proposal_id == 5


def test_simulate_proposal_falls_back_to_sim_name_env(tmp_path):
    with patch("cli.simulate_proposal.settings.simulation.sim_name", "uniswap-new-fee-tier"), patch(
        "cli.simulate_proposal._simulate", AsyncMock(return_value=[])
    ) as simulate:
        result = CliRunner().invoke(cli, ["simulate_proposal", "-r", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert simulate.await_args.args[0].dao_name == "Uniswap"


def test_simulate_proposal_without_any_source(tmp_path):
    with patch("cli.simulate_proposal.settings.simulation.sim_name", None):
        result = CliRunner().invoke(cli, ["simulate_proposal", "-r", str(tmp_path)])

    assert result.exit_code == 2
    assert "Pass exactly one of --sim or --config" in result.output
