"""Errors raised while loading and validating scenario configurations."""

from typing import Iterable, List


class ConfigurationError(Exception):
    """Raised when scenario configuration loading or validation fails."""

    pass


class SchemaViolation(ConfigurationError):
    """Raised when a scenario configuration breaks one or more structural rules.

    Attributes:
        violations: Human-readable description of every violated rule
    """

    def __init__(self, violations: Iterable[str]):
        self.violations: List[str] = list(violations)
        details = "; ".join(self.violations) if self.violations else "unknown violation"
        super().__init__(f"Invalid scenario config: {details}")
