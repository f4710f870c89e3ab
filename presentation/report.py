"""
Markdown and JSON reports of a simulated proposal and its check results.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple, Union

import orjson

from clients.tenderly_client import TenderlyClient
from constants.constants import BLOCK_EXPLORERS, MAINNET_CHAIN_ID
from models.check import AllCheckResults, CheckResult
from models.simulation import SimulationData
from utils.logger_utils import get_logger

logger = get_logger("Report")

STATUS_EMOJI = {"passed": "✅", "warning": "❗", "failed": "❌"}


def report_id(data: SimulationData) -> str:
    """Proposal id, suffixed with the leg number for derived Arbitrum simulations."""
    config = data.config
    if config.type in ("arbl2tol1", "arbretryable"):
        return f"{config.parent_id}-{config.id_offset}"
    return str(data.proposal.identifier)


def explorer_url(chain_id: int) -> str:
    return BLOCK_EXPLORERS.get(chain_id, BLOCK_EXPLORERS[MAINNET_CHAIN_ID])


def _address_link(explorer: str, address: str) -> str:
    return f"[{address}]({explorer}/address/{address})"


def _block_link(explorer: str, block: int) -> str:
    return f"[{block}]({explorer}/block/{block})"


def _format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def check_status_emoji(result: CheckResult) -> str:
    return STATUS_EMOJI[result.status]


def _check_section(name: str, result: CheckResult) -> List[str]:
    lines = [f"### {name} {check_status_emoji(result)}", ""]
    if result.errors:
        lines.append("**Errors:**")
        lines.extend(f"- {message}" for message in result.errors)
        lines.append("")
    if result.warnings:
        lines.append("**Warnings:**")
        lines.extend(f"- {message}" for message in result.warnings)
        lines.append("")
    if result.info:
        lines.append("<details>")
        lines.append("<summary>Info</summary>")
        lines.append("")
        lines.extend(f"- {message}" for message in result.info)
        lines.append("")
        lines.append("</details>")
        lines.append("")
    return lines


def to_markdown_report(data: SimulationData, checks: AllCheckResults) -> str:
    proposal = data.proposal
    explorer = explorer_url(int(proposal.chainid))
    block = data.latest_block

    lines = [
        f"# {proposal.title}",
        "",
        f"_Updated as of block {_block_link(explorer, block.number)} at {_format_timestamp(block.timestamp)}_",
        "",
        f"- ID: {report_id(data)}",
        f"- Simulation type: `{data.config.type}`",
        f"- DAO: {data.config.dao_name}",
        f"- Governor: {_address_link(explorer, data.config.governor_address)}",
        f"- Proposer: {_address_link(explorer, proposal.proposer)}",
        f"- Start Block: {_block_link(explorer, proposal.start_block)}",
        f"- End Block: {_block_link(explorer, proposal.end_block)}",
        f"- Simulation: [{data.sim.simulation.id}]({TenderlyClient.simulation_url(data.sim.simulation.id)})",
        "",
        "## Actions",
        "",
    ]
    for i, (target, value, signature, calldata) in enumerate(
        zip(proposal.targets, proposal.values, proposal.signatures, proposal.calldatas)
    ):
        call = f"`{signature}` " if signature else ""
        lines.append(f"{i + 1}. {_address_link(explorer, target)} value `{value}` {call}calldata `{calldata}`")

    lines.extend(
        [
            "",
            "<details>",
            "<summary>Proposal text</summary>",
            "",
            proposal.description,
            "",
            "</details>",
            "",
            "## Checks",
            "",
        ]
    )
    for report in checks.values():
        lines.extend(_check_section(report.name, report.result))

    return "\n".join(lines).rstrip() + "\n"


def to_json_report(data: SimulationData, checks: AllCheckResults) -> bytes:
    document = {
        "id": report_id(data),
        "config": data.config.model_dump(mode="json", by_alias=True),
        "simulation_id": data.sim.simulation.id,
        "simulation_url": TenderlyClient.simulation_url(data.sim.simulation.id),
        "block": data.latest_block.model_dump(mode="json"),
        "checks": {
            check_id: {"name": report.name, "status": report.result.status, **report.result.model_dump(mode="json")}
            for check_id, report in checks.items()
        },
    }
    return orjson.dumps(document, option=orjson.OPT_INDENT_2)


def report_paths(data: SimulationData, reports_dir: Union[str, Path]) -> Tuple[Path, Path]:
    """``{reports_dir}/{dao}/{governor}/{id}.md`` and the matching ``.json``."""
    directory = Path(reports_dir) / data.config.dao_name / data.config.governor_address
    base = directory / report_id(data)
    return base.with_suffix(".md"), base.with_suffix(".json")


def write_report(data: SimulationData, checks: AllCheckResults, reports_dir: Union[str, Path]) -> Path:
    markdown_path, json_path = report_paths(data, reports_dir)
    markdown_path.parent.mkdir(parents=True, exist_ok=True)
    markdown_path.write_text(to_markdown_report(data, checks), encoding="utf-8")
    json_path.write_bytes(to_json_report(data, checks))
    logger.info(f"Report written to {markdown_path}")
    return markdown_path
