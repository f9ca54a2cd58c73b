"""Runtime tool definitions and context-update events.

This module defines what a scenario hands to the surrounding message
pipeline on every node change: the node's system messages and the tools the
LLM may call, where transition tools carry a callback that moves the
scenario to the next node.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from scenario_config import SystemMessage, ToolHandler


class SetNodeCapability(Protocol):
    """Anything that can be moved to another node."""

    def set_node(self, node_id: str) -> None:
        """Move to ``node_id``."""
        ...


class TransitionCallback:
    """Zero-argument operation that moves a scenario to a fixed target node.

    Attributes:
        scenario: Scenario that will be transitioned
        target: Node id the scenario moves to on ``invoke()``
    """

    def __init__(self, scenario: SetNodeCapability, target: str):
        self.scenario = scenario
        self.target = target

    def invoke(self) -> None:
        """Move the scenario to the target node."""
        self.scenario.set_node(self.target)

    def __call__(self) -> None:
        self.invoke()

    def __repr__(self) -> str:
        return f"TransitionCallback(target={self.target!r})"


@dataclass(frozen=True)
class RuntimeToolDefinition:
    """Tool definition exposed to the tool-execution collaborator.

    The executor must run ``handler`` with the call arguments and, only if
    the handler succeeds, invoke ``transition_callback`` exactly once. If the
    handler fails the callback must not be invoked. A handler must not run
    while a transition of the same scenario is still pending. Plain tools
    have no callback.

    Attributes:
        name: Tool name exposed to the LLM
        description: What the tool does
        parameters: JSON schema of the tool arguments
        handler: Callable invoked with the tool arguments
        transition_callback: Callback moving the scenario after a successful call
    """

    name: str
    description: str
    parameters: Dict[str, Any]
    handler: ToolHandler
    transition_callback: Optional[TransitionCallback] = None

    @property
    def is_transition(self) -> bool:
        """Whether a successful call moves the scenario to another node."""
        return self.transition_callback is not None

    def as_function_schema(self) -> Dict[str, Any]:
        """Build the function declaration sent to the LLM.

        Returns:
            OpenAI-style tool dict without handler or callback
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": deepcopy(self.parameters),
            },
        }


@dataclass(frozen=True)
class ContextUpdate:
    """Event asking the pipeline to append messages and register tools.

    Attributes:
        messages: Role messages followed by task messages of the new node
        tools: Runtime tools available in the new node
        node_id: Node that produced this update
    """

    messages: List[SystemMessage] = field(default_factory=list)
    tools: List[RuntimeToolDefinition] = field(default_factory=list)
    node_id: Optional[str] = None

    def get_tool(self, name: str) -> Optional[RuntimeToolDefinition]:
        """Get a tool by name.

        Args:
            name: Tool name to search for

        Returns:
            RuntimeToolDefinition if found, None otherwise
        """
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None
