"""Tests for scenario configuration schemas."""

import pytest
from pydantic import ValidationError
from scenario_config.schemas import (
    NodeDefinition,
    PlainTool,
    ScenarioConfig,
    SystemMessage,
    TransitionTool,
)


def record(args):
    return args


class TestSystemMessage:
    """Tests for SystemMessage model."""

    def test_default_role(self):
        """Test role defaults to system."""
        message = SystemMessage(content="Greet the customer.")

        assert message.role == "system"
        assert message.content == "Greet the customer."

    def test_non_system_role_fails(self):
        """Test that only system messages are accepted."""
        with pytest.raises(ValidationError):
            SystemMessage(role="user", content="Hi")

    def test_empty_content_fails(self):
        """Test that empty content raises validation error."""
        with pytest.raises(ValidationError) as exc_info:
            SystemMessage(content="   ")

        assert "Message content cannot be empty" in str(exc_info.value)

    def test_extra_field_fails(self):
        """Test that unknown message fields are rejected."""
        with pytest.raises(ValidationError):
            SystemMessage(content="Hi", name="bot")


class TestToolDefinitions:
    """Tests for PlainTool and TransitionTool models."""

    def test_plain_tool(self):
        """Test plain tool configuration."""
        tool = PlainTool(name="record_time", description="Record the time", handler=record)

        assert tool.name == "record_time"
        assert tool.handler is record
        assert tool.parameters == {"type": "object", "properties": {}}

    def test_plain_tool_requires_handler(self):
        """Test that a plain tool without handler is rejected."""
        with pytest.raises(ValidationError):
            PlainTool(name="record_time")

    def test_plain_tool_handler_must_be_callable(self):
        """Test that a non-callable handler is rejected."""
        with pytest.raises(ValidationError):
            PlainTool(name="record_time", handler="record_time")

    def test_transition_tool_without_handler(self):
        """Test transition tool handler is optional."""
        tool = TransitionTool(name="go", transition_to="next")

        assert tool.handler is None
        assert tool.transition_to == "next"

    def test_empty_tool_name_fails(self):
        """Test that empty tool name raises validation error."""
        with pytest.raises(ValidationError) as exc_info:
            TransitionTool(name="", transition_to="next")

        assert "Tool name cannot be empty" in str(exc_info.value)

    def test_empty_transition_target_fails(self):
        """Test that an empty transition target is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            TransitionTool(name="go", transition_to=" ")

        assert "Transition target cannot be empty" in str(exc_info.value)

    def test_tools_are_immutable(self):
        """Test that tool definitions cannot be modified after creation."""
        tool = TransitionTool(name="go", transition_to="next")

        with pytest.raises(ValidationError):
            tool.transition_to = "elsewhere"


class TestNodeDefinition:
    """Tests for NodeDefinition model."""

    def test_tool_variant_from_dict(self):
        """Test that the tool variant is chosen by the transition_to key."""
        node = NodeDefinition.model_validate(
            {
                "task_messages": [{"content": "Ask for the time."}],
                "functions": [
                    {"name": "record_time", "handler": record},
                    {"name": "go", "transition_to": "confirm"},
                ],
            }
        )

        assert isinstance(node.functions[0], PlainTool)
        assert isinstance(node.functions[1], TransitionTool)

    def test_role_messages_optional(self):
        """Test role messages default to an empty list."""
        node = NodeDefinition(task_messages=[SystemMessage(content="Task")], functions=[])

        assert node.role_messages == []

    def test_task_messages_required(self):
        """Test that task messages are required."""
        with pytest.raises(ValidationError):
            NodeDefinition.model_validate({"functions": []})

    def test_functions_required(self):
        """Test that functions are required even when empty."""
        with pytest.raises(ValidationError):
            NodeDefinition.model_validate({"task_messages": [{"content": "Task"}]})

    def test_messages_role_first(self):
        """Test messages returns role messages before task messages."""
        role = [SystemMessage(content="r1"), SystemMessage(content="r2")]
        task = [SystemMessage(content="t1"), SystemMessage(content="t2")]
        node = NodeDefinition(role_messages=role, task_messages=task, functions=[])

        assert [m.content for m in node.messages] == ["r1", "r2", "t1", "t2"]

    def test_transition_targets(self):
        """Test transition targets in declaration order."""
        node = NodeDefinition(
            task_messages=[SystemMessage(content="Task")],
            functions=[
                TransitionTool(name="a", transition_to="x"),
                PlainTool(name="b", handler=record),
                TransitionTool(name="c", transition_to="y"),
            ],
        )

        assert node.transition_targets == ["x", "y"]

    def test_duplicate_tool_names_fail(self):
        """Test that tool names must be unique within a node."""
        with pytest.raises(ValidationError) as exc_info:
            NodeDefinition(
                task_messages=[SystemMessage(content="Task")],
                functions=[
                    TransitionTool(name="go", transition_to="x"),
                    PlainTool(name="go", handler=record),
                ],
            )

        assert "unique" in str(exc_info.value)

    def test_misspelled_transition_field_fails(self):
        """Test that a misspelled transition field is rejected, not ignored."""
        with pytest.raises(ValidationError) as exc_info:
            NodeDefinition.model_validate(
                {
                    "task_messages": [{"content": "Task"}],
                    "functions": [{"name": "go", "handler": record, "transition-to": "x"}],
                }
            )

        assert "transition-to" in str(exc_info.value)

    def test_unknown_node_field_fails(self):
        """Test that unknown node fields are rejected."""
        with pytest.raises(ValidationError):
            NodeDefinition.model_validate(
                {"task_messages": [{"content": "Task"}], "functions": [], "tools": []}
            )


class TestScenarioConfig:
    """Tests for ScenarioConfig model."""

    def test_minimal_scenario(self):
        """Test a one-node scenario."""
        scenario = ScenarioConfig.model_validate(
            {
                "initial_node": "start",
                "nodes": {"start": {"task_messages": [{"content": "Hi"}], "functions": []}},
            }
        )

        assert scenario.initial_node == "start"
        assert scenario.get_node("start") is scenario.nodes["start"]
        assert scenario.get_node("missing") is None

    def test_empty_nodes_fail(self):
        """Test that at least one node is required."""
        with pytest.raises(ValidationError) as exc_info:
            ScenarioConfig(initial_node="start", nodes={})

        assert "At least one node must be defined" in str(exc_info.value)

    def test_missing_initial_node_fails(self):
        """Test that initial_node is required."""
        with pytest.raises(ValidationError):
            ScenarioConfig.model_validate(
                {"nodes": {"start": {"task_messages": [{"content": "Hi"}], "functions": []}}}
            )

    def test_unknown_top_level_field_fails(self):
        """Test that unknown top-level fields are rejected."""
        with pytest.raises(ValidationError):
            ScenarioConfig.model_validate(
                {
                    "initial_node": "start",
                    "initial-node": "start",
                    "nodes": {"start": {"task_messages": [{"content": "Hi"}], "functions": []}},
                }
            )
