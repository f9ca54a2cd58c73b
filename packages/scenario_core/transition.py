"""Transition wrapper for scenario tools.

Turns the tool definitions of a node into runtime tool definitions. Transition
tools lose their ``transition_to`` field and gain a ``TransitionCallback``
bound to the scenario; plain tools are copied as they are. Nothing here runs
a handler or a callback.
"""

from copy import deepcopy
from typing import Any, Dict, Union

from loguru import logger
from scenario_config import PlainTool, TransitionTool
from scenario_runtime import RuntimeToolDefinition, SetNodeCapability, TransitionCallback


def default_handler(*args: Any, **kwargs: Any) -> Dict[str, str]:
    """Handler for transition tools declared without one. Always succeeds."""
    return {"status": "success"}


def wrap_tool(
    scenario: SetNodeCapability,
    tool: Union[PlainTool, TransitionTool],
) -> RuntimeToolDefinition:
    """Build the runtime definition of a tool.

    Args:
        scenario: Scenario a transition tool moves when its callback runs
        tool: Plain or transition tool definition

    Returns:
        RuntimeToolDefinition, with a transition callback for transition tools

    Raises:
        TypeError: If ``tool`` is neither a PlainTool nor a TransitionTool
    """
    if isinstance(tool, TransitionTool):
        logger.debug(
            "Wrapping transition tool {name} -> {target}",
            name=tool.name,
            target=tool.transition_to,
        )
        return RuntimeToolDefinition(
            name=tool.name,
            description=tool.description,
            parameters=deepcopy(tool.parameters),
            handler=tool.handler if tool.handler is not None else default_handler,
            transition_callback=TransitionCallback(scenario, tool.transition_to),
        )

    if isinstance(tool, PlainTool):
        return RuntimeToolDefinition(
            name=tool.name,
            description=tool.description,
            parameters=deepcopy(tool.parameters),
            handler=tool.handler,
        )

    raise TypeError(f"Unsupported tool definition: {type(tool).__name__}")
