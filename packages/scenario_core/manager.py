"""Scenario state machine.

This module provides the scenario manager that tracks the active node of a
conversation. Every node change wraps the node's tools, concatenates its
role and task messages, publishes the new node and hands exactly one
``ContextUpdate`` to the pipeline injector.

The states are the node ids plus "not started"; there is no terminal state,
so a scenario may revisit nodes or loop on one node indefinitely.
"""

from threading import RLock
from typing import Any, Mapping, Optional, Union

from loguru import logger
from scenario_config import NodeDefinition, ScenarioConfig, validate_scenario
from scenario_runtime import ContextUpdate, EntryCoordinate, PipelineInjector, ScenarioState

from .metrics import DELIVERY_FAILURES, INVALID_NODE_REQUESTS, NODE_TRANSITIONS, SCENARIOS_STARTED
from .transition import wrap_tool


class ScenarioError(Exception):
    """Raised when there's an error with a running scenario."""

    pass


class InvalidNodeError(ScenarioError):
    """Raised when asked to enter a node the scenario does not define."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Invalid node: {node_id}")


class ScenarioManager:
    """State machine driving one conversation through a scenario graph.

    One manager exists per conversation session. All operations are
    serialized by a reentrant lock: ``set_node`` publishes the new node and
    delivers its context update inside the same critical section, so updates
    reach the injector in call order and ``current_node()`` never returns a
    node whose update has not been delivered. The lock is reentrant so an
    injector that synchronously runs a transition callback does not deadlock.
    """

    def __init__(
        self,
        scenario_config: Union[ScenarioConfig, Mapping[str, Any]],
        injector: PipelineInjector,
        entry_coordinate: EntryCoordinate,
        session_id: Optional[str] = None,
    ):
        """Initialize the scenario manager.

        Args:
            scenario_config: Scenario graph, validated here
            injector: Pipeline injector receiving context updates
            entry_coordinate: Pipeline entry point for every update of this scenario
            session_id: Optional session identifier (generated if not provided)

        Raises:
            SchemaViolation: If the scenario configuration is invalid
        """
        self._config = validate_scenario(scenario_config)
        self._injector = injector
        self._entry_coordinate = entry_coordinate
        self._state = ScenarioState(session_id=session_id) if session_id else ScenarioState()
        self._lock = RLock()

    @property
    def config(self) -> ScenarioConfig:
        """The validated scenario configuration."""
        return self._config

    @property
    def entry_coordinate(self) -> EntryCoordinate:
        """Pipeline entry point context updates are addressed to."""
        return self._entry_coordinate

    @property
    def session_id(self) -> str:
        """Identifier of the session this scenario belongs to."""
        return self._state.session_id

    @property
    def state(self) -> ScenarioState:
        """A copy of the current scenario state."""
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def is_started(self) -> bool:
        """Whether ``start()`` has run."""
        with self._lock:
            return self._state.initialized

    def node(self, node_id: str) -> NodeDefinition:
        """Get a node definition by id.

        Args:
            node_id: Node id to look up

        Returns:
            The node definition

        Raises:
            InvalidNodeError: If the scenario does not define ``node_id``
        """
        node = self._config.get_node(node_id)
        if node is None:
            raise InvalidNodeError(node_id)
        return node

    def current_node(self) -> Optional[str]:
        """Get the active node id.

        Returns:
            The active node id, or None before the scenario is started
        """
        with self._lock:
            return self._state.current_node

    def start(self) -> None:
        """Start the scenario by entering its initial node.

        Calling ``start()`` again is a no-op: the initial transition is not
        repeated and no further context update is delivered.

        Raises:
            DeliveryError: If the injector fails; the scenario stays unstarted
                unless a transition was delivered during the failed delivery
        """
        with self._lock:
            if self._state.initialized:
                logger.debug("Scenario {session} already started", session=self.session_id)
                return

            snapshot = self._state.model_copy(deep=True)
            self._state.mark_initialized()
            try:
                self.set_node(self._config.initial_node)
            except Exception:
                # Keep any node a nested transition delivered
                if self._state.transition_count == snapshot.transition_count:
                    self._state = snapshot
                raise

            SCENARIOS_STARTED.inc()
            logger.info(
                "Scenario {session} started at {node}",
                session=self.session_id,
                node=self._config.initial_node,
            )

    def set_node(self, node_id: str) -> None:
        """Move the scenario to ``node_id`` and deliver its context update.

        Args:
            node_id: Node to enter

        Raises:
            InvalidNodeError: If the scenario does not define ``node_id``;
                the state is left untouched
            DeliveryError: If the injector fails; the transition is rolled back
                unless the injector already delivered a later transition
        """
        with self._lock:
            node = self._config.get_node(node_id)
            if node is None:
                INVALID_NODE_REQUESTS.inc()
                logger.warning(
                    "Scenario {session} rejected unknown node {node}",
                    session=self.session_id,
                    node=node_id,
                )
                raise InvalidNodeError(node_id)

            tools = [wrap_tool(self, tool) for tool in node.functions]
            messages = node.messages

            logger.info(
                "Scenario {session} entering node {node} (from {previous})",
                session=self.session_id,
                node=node_id,
                previous=self._state.current_node,
            )

            snapshot = self._state.model_copy(deep=True)
            self._state.enter_node(node_id)
            published = self._state.transition_count

            update = ContextUpdate(messages=messages, tools=tools, node_id=node_id)
            try:
                self._injector.inject(self._entry_coordinate, [update])
            except Exception as e:
                if self._state.transition_count == published:
                    self._state = snapshot
                DELIVERY_FAILURES.inc()
                logger.warning(
                    "Scenario {session} failed to deliver node {node}: {err}",
                    session=self.session_id,
                    node=node_id,
                    err=str(e),
                )
                raise

            NODE_TRANSITIONS.labels(node=node_id).inc()

    def __repr__(self) -> str:
        return (
            f"ScenarioManager(session_id={self.session_id!r}, "
            f"current_node={self.current_node()!r})"
        )


def create_scenario(
    *,
    scenario_config: Union[ScenarioConfig, Mapping[str, Any]],
    injector: PipelineInjector,
    entry_coordinate: EntryCoordinate,
    session_id: Optional[str] = None,
) -> ScenarioManager:
    """Validate a scenario configuration and build its state machine.

    Args:
        scenario_config: Scenario graph or the raw mapping to build one from
        injector: Pipeline injector receiving context updates
        entry_coordinate: Pipeline entry point for every update of this scenario
        session_id: Optional session identifier

    Returns:
        A ScenarioManager that has not been started yet

    Raises:
        SchemaViolation: If the scenario configuration is invalid
    """
    return ScenarioManager(
        scenario_config,
        injector=injector,
        entry_coordinate=entry_coordinate,
        session_id=session_id,
    )
