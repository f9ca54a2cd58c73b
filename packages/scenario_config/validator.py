"""Graph validator for scenario configurations.

Validation runs in two stages. The Pydantic models check shape, tool
variants and closed-world rules; the graph stage then checks that the
initial node is defined and that every ``transition_to`` target names a
defined node. The graph stage also runs on raw data that failed the shape
stage, so a single ``SchemaViolation`` reports everything that is wrong.
"""

from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import SchemaViolation
from .schemas import ScenarioConfig, TransitionTool

# (node id, tool name, target node id)
Transition = Tuple[str, Optional[str], str]


def humanize_errors(error: ValidationError) -> List[str]:
    """Convert a Pydantic validation error into readable violation strings.

    Args:
        error: Validation error raised by a scenario model

    Returns:
        One ``"<location>: <message>"`` string per error
    """
    violations = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"]
        violations.append(f"{location}: {message}" if location else message)
    return violations


def _config_transitions(config: ScenarioConfig) -> Iterator[Transition]:
    for node_id, node in config.nodes.items():
        for tool in node.functions:
            if isinstance(tool, TransitionTool):
                yield node_id, tool.name, tool.transition_to


def _raw_transitions(nodes: Mapping[Any, Any]) -> Iterator[Transition]:
    for node_id, node in nodes.items():
        functions = node.get("functions") if isinstance(node, Mapping) else None
        if not isinstance(functions, (list, tuple)):
            continue
        for tool in functions:
            if not isinstance(tool, Mapping) or "transition_to" not in tool:
                continue
            target = tool["transition_to"]
            if isinstance(target, str):
                yield node_id, tool.get("name"), target


def _graph_violations(
    initial_node: Any,
    nodes: Mapping[Any, Any],
    transitions: Iterator[Transition],
) -> List[str]:
    violations = []
    defined_nodes = set(nodes.keys())

    if isinstance(initial_node, str) and initial_node not in defined_nodes:
        violations.append(f"initial node not defined: {initial_node}")

    reported = set()
    for node_id, tool_name, target in transitions:
        if target in defined_nodes or target in reported:
            continue
        reported.add(target)
        violations.append(
            f"unreachable node: {target} (from node '{node_id}', tool '{tool_name}')"
        )

    return violations


def check_graph(config: ScenarioConfig) -> List[str]:
    """Check the graph rules of a shape-valid scenario.

    Args:
        config: Scenario whose shape has already been validated

    Returns:
        List of violations, empty if the graph is sound
    """
    return _graph_violations(config.initial_node, config.nodes, _config_transitions(config))


def validate_scenario(config: Union[ScenarioConfig, Mapping[str, Any]]) -> ScenarioConfig:
    """Validate a scenario configuration.

    Args:
        config: A ``ScenarioConfig`` or the raw mapping to build one from

    Returns:
        The validated ScenarioConfig

    Raises:
        SchemaViolation: If any structural or graph rule is violated
    """
    if isinstance(config, ScenarioConfig):
        violations = check_graph(config)
        if violations:
            raise SchemaViolation(violations)
        return config

    if not isinstance(config, Mapping):
        raise SchemaViolation([f"scenario config must be a mapping, got {type(config).__name__}"])

    try:
        scenario = ScenarioConfig.model_validate(dict(config))
    except ValidationError as e:
        violations = humanize_errors(e)
        nodes = config.get("nodes")
        if isinstance(nodes, Mapping):
            violations.extend(
                _graph_violations(config.get("initial_node"), nodes, _raw_transitions(nodes))
            )
        raise SchemaViolation(violations) from e

    violations = check_graph(scenario)
    if violations:
        raise SchemaViolation(violations)
    return scenario
