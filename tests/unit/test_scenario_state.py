"""Tests for scenario state model."""

from scenario_runtime import ScenarioState


class TestScenarioState:
    """Tests for ScenarioState model."""

    def test_initial_state(self):
        """Test a new state is not started and has no node."""
        state = ScenarioState()

        assert state.current_node is None
        assert state.initialized is False
        assert state.history == []
        assert state.started_at is None
        assert state.transition_count == 0
        assert state.previous_node is None

    def test_unique_session_ids(self):
        """Test each state gets its own session id."""
        assert ScenarioState().session_id != ScenarioState().session_id

    def test_mark_initialized(self):
        """Test marking the state as started."""
        state = ScenarioState()

        state.mark_initialized()

        assert state.initialized is True
        assert state.started_at is not None

    def test_enter_node(self):
        """Test entering nodes records history."""
        state = ScenarioState()
        before = state.updated_at

        state.enter_node("start")
        state.enter_node("get_time")
        state.enter_node("start")

        assert state.current_node == "start"
        assert state.history == ["start", "get_time", "start"]
        assert state.previous_node == "get_time"
        assert state.transition_count == 3
        assert state.updated_at >= before

    def test_copy_is_independent(self):
        """Test a deep copy does not share history with the original."""
        state = ScenarioState()
        state.enter_node("start")

        copy = state.model_copy(deep=True)
        copy.enter_node("other")

        assert state.history == ["start"]
        assert state.current_node == "start"
