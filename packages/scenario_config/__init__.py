"""Scenario Flows - Configuration Package."""

from .errors import ConfigurationError, SchemaViolation
from .loader import load_scenario_from_dict, load_scenario_from_yaml
from .schemas import (
    NodeDefinition,
    PlainTool,
    ScenarioConfig,
    SystemMessage,
    ToolDefinition,
    ToolHandler,
    TransitionTool,
)
from .validator import check_graph, validate_scenario

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "NodeDefinition",
    "PlainTool",
    "ScenarioConfig",
    "SchemaViolation",
    "SystemMessage",
    "ToolDefinition",
    "ToolHandler",
    "TransitionTool",
    "check_graph",
    "load_scenario_from_dict",
    "load_scenario_from_yaml",
    "validate_scenario",
]
