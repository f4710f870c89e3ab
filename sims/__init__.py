"""
Registered proposal configs. Every module in this package, except ``lib``,
exposes a module level ``config``.
"""

import importlib
import pkgutil
from pathlib import Path
from typing import List, Union

from models.simulation_config import SimulationConfig, parse_simulation_config

EXCLUDED_MODULES = ("lib",)


def list_sims() -> List[str]:
    return sorted(
        module.name
        for module in pkgutil.iter_modules(__path__)
        if not module.ispkg and module.name not in EXCLUDED_MODULES
    )


def load_sim(name: str) -> SimulationConfig:
    """Loads ``sims/<name>.py``; ``non-emerg-sc-atlas-fees`` and ``non_emerg_sc_atlas_fees`` are equivalent."""
    module_name = name.replace("-", "_")
    if module_name.endswith(".sim"):
        module_name = module_name[: -len(".sim")]
    if module_name not in list_sims():
        raise ValueError(f"Unknown simulation '{name}'. Available: {', '.join(list_sims())}")
    module = importlib.import_module(f"{__name__}.{module_name}")
    return module.config


def load_sim_config_file(path: Union[str, Path]) -> SimulationConfig:
    """Loads a config from a JSON file using the camelCase or snake_case field names."""
    return parse_simulation_config(Path(path).read_bytes())
