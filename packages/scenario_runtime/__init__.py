"""Scenario Flows - Runtime Package."""

from .events import ContextUpdate, RuntimeToolDefinition, SetNodeCapability, TransitionCallback
from .injector import (
    AsyncioQueueInjector,
    DeliveryError,
    EntryCoordinate,
    PipelineInjector,
    QueueInjector,
)
from .state import ScenarioState

__version__ = "0.1.0"

__all__ = [
    "AsyncioQueueInjector",
    "ContextUpdate",
    "DeliveryError",
    "EntryCoordinate",
    "PipelineInjector",
    "QueueInjector",
    "RuntimeToolDefinition",
    "ScenarioState",
    "SetNodeCapability",
    "TransitionCallback",
]
