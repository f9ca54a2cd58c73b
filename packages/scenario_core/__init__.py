"""Scenario Flows - Core Package."""

from .manager import InvalidNodeError, ScenarioError, ScenarioManager, create_scenario
from .transition import default_handler, wrap_tool

__version__ = "0.1.0"

__all__ = [
    "InvalidNodeError",
    "ScenarioError",
    "ScenarioManager",
    "create_scenario",
    "default_handler",
    "wrap_tool",
]
