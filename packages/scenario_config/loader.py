"""Configuration loader for scenario flows.

This module provides utilities to load and validate scenario configurations
from YAML files or dictionaries. Tool handlers cannot be written in a data
file, so a tool's ``handler`` may be given as a name that is resolved through
a mapping of handler names to callables.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .errors import ConfigurationError, SchemaViolation
from .schemas import ScenarioConfig, ToolHandler
from .validator import validate_scenario


def _resolve_handlers(
    config_data: Mapping[str, Any],
    handlers: Optional[Mapping[str, ToolHandler]],
) -> Tuple[Dict[str, Any], List[str]]:
    """Return a copy of ``config_data`` with handler names replaced by callables."""
    registry = handlers if handlers is not None else {}
    unknown: List[str] = []

    nodes = config_data.get("nodes")
    if not isinstance(nodes, Mapping):
        return dict(config_data), unknown

    resolved_nodes: Dict[Any, Any] = {}
    for node_id, node in nodes.items():
        if not isinstance(node, Mapping) or not isinstance(node.get("functions"), list):
            resolved_nodes[node_id] = node
            continue

        functions = []
        for tool in node["functions"]:
            if isinstance(tool, Mapping) and isinstance(tool.get("handler"), str):
                name = tool["handler"]
                if name in registry:
                    tool = {**tool, "handler": registry[name]}
                else:
                    tool_name = tool.get("name")
                    unknown.append(
                        f"unknown handler '{name}' for tool '{tool_name}' in node '{node_id}'"
                    )
            functions.append(tool)
        resolved_nodes[node_id] = {**node, "functions": functions}

    return {**config_data, "nodes": resolved_nodes}, unknown


def load_scenario_from_dict(
    config_dict: Mapping[str, Any],
    handlers: Optional[Mapping[str, ToolHandler]] = None,
) -> ScenarioConfig:
    """Load and validate a scenario configuration from a dictionary.

    Args:
        config_dict: Scenario configuration dictionary
        handlers: Optional mapping used to resolve handler names

    Returns:
        Validated ScenarioConfig instance

    Raises:
        SchemaViolation: If validation fails or a handler name is unknown
    """
    if not isinstance(config_dict, Mapping):
        raise ConfigurationError("Scenario configuration must be a dict")

    resolved, unknown = _resolve_handlers(config_dict, handlers)

    try:
        scenario = validate_scenario(resolved)
    except SchemaViolation as e:
        raise SchemaViolation(unknown + e.violations) from e

    if unknown:
        raise SchemaViolation(unknown)
    return scenario


def load_scenario_from_yaml(
    config_path: Union[str, Path],
    handlers: Optional[Mapping[str, ToolHandler]] = None,
) -> ScenarioConfig:
    """Load and validate a scenario configuration from a YAML file.

    Args:
        config_path: Path to the YAML scenario file
        handlers: Optional mapping used to resolve handler names

    Returns:
        Validated ScenarioConfig instance

    Raises:
        ConfigurationError: If the file cannot be read or parsed
        SchemaViolation: If validation fails
        FileNotFoundError: If the scenario file doesn't exist
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {config_path}")

    if not path.is_file():
        raise ConfigurationError(f"Scenario path is not a file: {config_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read scenario file: {e}") from e

    if config_data is None:
        raise ConfigurationError("Scenario file is empty")

    if not isinstance(config_data, dict):
        raise ConfigurationError("Scenario must be a YAML object (dict)")

    return load_scenario_from_dict(config_data, handlers)
