"""Configuration schemas for scenario flows.

This module defines the Pydantic models describing a conversation scenario:
a graph of named nodes, each carrying system messages and the tools the LLM
may call while the node is active. Every model is closed, so unknown keys
(for example a misspelled ``transition-to``) are rejected instead of being
silently dropped.
"""

from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

ToolHandler = Callable[..., Any]


def _default_parameters() -> Dict[str, Any]:
    return {"type": "object", "properties": {}}


class SystemMessage(BaseModel):
    """A system-role message appended to the LLM context."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    role: Literal["system"] = Field(default="system", description="Message role")
    content: str = Field(..., description="Message text")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Validate content is not empty."""
        if not v or not v.strip():
            raise ValueError("Message content cannot be empty")
        return v


class _ToolBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Tool name exposed to the LLM")
    description: str = Field(default="", description="What the tool does")
    parameters: Dict[str, Any] = Field(
        default_factory=_default_parameters,
        description="JSON schema of the tool arguments",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate tool name is not empty."""
        if not v or not v.strip():
            raise ValueError("Tool name cannot be empty")
        return v.strip()


class PlainTool(_ToolBase):
    """A tool with a handler and no effect on the scenario state."""

    handler: ToolHandler = Field(..., description="Callable invoked with the tool arguments")


class TransitionTool(_ToolBase):
    """A tool that moves the scenario to another node once its handler succeeds."""

    handler: Optional[ToolHandler] = Field(
        default=None,
        description="Callable invoked with the tool arguments (defaults to success)",
    )
    transition_to: str = Field(..., description="Node to enter after a successful call")

    @field_validator("transition_to")
    @classmethod
    def validate_transition_to(cls, v: str) -> str:
        """Validate the target node id is not empty."""
        if not v or not v.strip():
            raise ValueError("Transition target cannot be empty")
        return v


def _tool_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "transition" if "transition_to" in value else "plain"
    return "transition" if isinstance(value, TransitionTool) else "plain"


ToolDefinition = Annotated[
    Union[
        Annotated[PlainTool, Tag("plain")],
        Annotated[TransitionTool, Tag("transition")],
    ],
    Discriminator(_tool_kind),
]


class NodeDefinition(BaseModel):
    """One state of the conversation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    role_messages: List[SystemMessage] = Field(
        default_factory=list,
        description="Persona/instruction messages, usually only on the first node",
    )
    task_messages: List[SystemMessage] = Field(
        ...,
        description="Messages describing the task for this node",
    )
    functions: List[ToolDefinition] = Field(
        ...,
        description="Tools available while this node is active",
    )

    @field_validator("functions")
    @classmethod
    def validate_functions(cls, v: List[Any]) -> List[Any]:
        """Validate tool names are unique within the node."""
        names = [tool.name for tool in v]
        if len(names) != len(set(names)):
            raise ValueError("Tool names must be unique within a node")
        return v

    @property
    def messages(self) -> List[SystemMessage]:
        """Role messages followed by task messages."""
        return [*self.role_messages, *self.task_messages]

    @property
    def transition_targets(self) -> List[str]:
        """Targets of every transition tool of this node, in declaration order."""
        return [tool.transition_to for tool in self.functions if isinstance(tool, TransitionTool)]


class ScenarioConfig(BaseModel):
    """Complete declarative scenario graph.

    Only the shape is checked here; graph rules (initial node defined, no
    dangling transitions) are checked by ``validate_scenario``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    initial_node: str = Field(..., description="Node entered when the scenario starts")
    nodes: Dict[str, NodeDefinition] = Field(..., description="Node definitions by id")

    @field_validator("initial_node")
    @classmethod
    def validate_initial_node(cls, v: str) -> str:
        """Validate initial node id is not empty."""
        if not v or not v.strip():
            raise ValueError("Initial node cannot be empty")
        return v

    @field_validator("nodes")
    @classmethod
    def validate_nodes(cls, v: Dict[str, NodeDefinition]) -> Dict[str, NodeDefinition]:
        """Validate at least one node is defined and ids are not blank."""
        if not v:
            raise ValueError("At least one node must be defined")
        for node_id in v:
            if not node_id or not node_id.strip():
                raise ValueError("Node ids cannot be empty")
        return v

    def get_node(self, node_id: str) -> Optional[NodeDefinition]:
        """Get a node definition by id.

        Args:
            node_id: Node id to look up

        Returns:
            NodeDefinition if found, None otherwise
        """
        return self.nodes.get(node_id)
