"""State model for a running scenario.

A ``ScenarioState`` belongs to exactly one scenario manager, which guards
every mutation with its own lock. Other components only read it, through a
copy handed out by the manager.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class ScenarioState(BaseModel):
    """Progress of one conversation through its scenario graph."""

    session_id: str = Field(
        default_factory=lambda: str(uuid4()), description="Unique session identifier"
    )
    current_node: Optional[str] = Field(
        default=None, description="Node currently active, None before start"
    )
    initialized: bool = Field(default=False, description="Whether start() has run")

    # Visited nodes, in order, including revisits
    history: List[str] = Field(default_factory=list, description="Nodes entered so far")

    started_at: Optional[datetime] = Field(default=None, description="When start() ran")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Last update timestamp"
    )

    def mark_initialized(self) -> None:
        """Mark the scenario as started."""
        self.initialized = True
        self.started_at = datetime.now(timezone.utc)
        self.updated_at = self.started_at

    def enter_node(self, node_id: str) -> None:
        """Record a transition into ``node_id``.

        Args:
            node_id: Node being entered
        """
        self.current_node = node_id
        self.history.append(node_id)
        self.updated_at = datetime.now(timezone.utc)

    @property
    def transition_count(self) -> int:
        """Number of node transitions so far."""
        return len(self.history)

    @property
    def previous_node(self) -> Optional[str]:
        """Node active before the current one, if any."""
        return self.history[-2] if len(self.history) > 1 else None
