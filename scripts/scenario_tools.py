#!/usr/bin/env python3
"""Scenario management tools for scenario flows.

Usage:
    python scripts/scenario_tools.py list            # List available scenarios
    python scripts/scenario_tools.py validate        # Validate all scenarios
    python scripts/scenario_tools.py validate FILE   # Validate specific scenario
    python scripts/scenario_tools.py show FILE       # Show scenario details
"""

import sys
from pathlib import Path
from typing import Any, Iterator, Mapping

# Add packages to path
sys.path.insert(0, str(Path(__file__).parent.parent / "packages"))

from scenario_config import (  # noqa: E402
    ConfigurationError,
    SchemaViolation,
    TransitionTool,
    load_scenario_from_yaml,
)

CONFIGS_DIR = Path("configs")

# Colors
GREEN = "\033[0;32m"
RED = "\033[0;31m"
BLUE = "\033[0;34m"
YELLOW = "\033[1;33m"
NC = "\033[0m"  # No Color


def _placeholder_handler(*args: Any, **kwargs: Any) -> Any:
    raise NotImplementedError("Handlers are not available in scenario_tools")


class _AnyHandler(Mapping[str, Any]):
    """Resolves every handler name so files can be checked without their code."""

    def __getitem__(self, name: str) -> Any:
        return _placeholder_handler

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str)

    def __iter__(self) -> Iterator[str]:
        return iter(())

    def __len__(self) -> int:
        return 0


def _load(config_file: Path):
    return load_scenario_from_yaml(str(config_file), handlers=_AnyHandler())


def _scenario_files() -> list:
    return list(CONFIGS_DIR.glob("*.yaml")) + list(CONFIGS_DIR.glob("*.yml"))


def _print_scenario_info(config_file: Path) -> None:
    """Print basic info for a scenario file."""
    try:
        scenario = _load(config_file)
        print(f"    Initial node: {scenario.initial_node}")
        print(f"    Nodes: {len(scenario.nodes)}")
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"    {RED}Error loading: {e}{NC}")


def list_scenarios() -> None:
    """List all available scenario files."""
    print(f"{BLUE}Available scenarios:{NC}\n")

    if not CONFIGS_DIR.exists():
        print(f"{RED}  No configs directory found at {CONFIGS_DIR}{NC}")
        return

    scenarios = _scenario_files()

    if not scenarios:
        print(f"{YELLOW}  No scenario files found in {CONFIGS_DIR}/{NC}")
        return

    for config_file in sorted(scenarios):
        print(f"  {GREEN}•{NC} {config_file.stem}")
        print(f"    Path: {config_file}")
        _print_scenario_info(config_file)
        print()


def _validate_single_scenario(config_file: Path) -> bool:
    """Validate a single scenario file."""
    print(f"  Checking {config_file.name}...", end=" ")

    if not config_file.exists():
        print(f"{RED}✗ File not found{NC}")
        return False

    try:
        scenario = _load(config_file)
    except SchemaViolation as e:
        print(f"{RED}✗ Invalid{NC}")
        for violation in e.violations:
            print(f"      - {violation}")
        return False
    except ConfigurationError as e:
        print(f"{RED}✗ Error: {e}{NC}")
        return False

    warnings = []
    targets = {t for node in scenario.nodes.values() for t in node.transition_targets}
    unvisited = sorted(set(scenario.nodes) - targets - {scenario.initial_node})
    if unvisited:
        warnings.append(f"nodes never entered: {', '.join(unvisited)}")

    if warnings:
        print(f"{YELLOW}⚠ Warnings: {'; '.join(warnings)}{NC}")
    else:
        print(f"{GREEN}✓ Valid{NC}")
    return True


def validate_scenarios(config_path: str | None = None) -> bool:
    """Validate scenario file(s)."""
    if config_path:
        scenarios = [Path(config_path)]
    else:
        scenarios = _scenario_files()

    if not scenarios:
        print(f"{RED}No scenario files found{NC}")
        return False

    print(f"{BLUE}Validating scenarios...{NC}\n")

    all_valid = all([_validate_single_scenario(cf) for cf in sorted(scenarios)])

    print()
    if all_valid:
        print(f"{GREEN}All scenarios are valid!{NC}")
    else:
        print(f"{RED}Some scenarios have errors.{NC}")

    return all_valid


def _resolve_scenario_path(config_path: str) -> Path:
    """Resolve scenario path from name or full path."""
    path = Path(config_path)

    if path.exists():
        return path

    if not path.suffix:
        for suffix in (".yaml", ".yml"):
            candidate = CONFIGS_DIR / f"{config_path}{suffix}"
            if candidate.exists():
                return candidate

    return path


def _print_scenario_details(scenario) -> None:
    """Print detailed scenario information."""
    print(f"{GREEN}Initial node:{NC} {scenario.initial_node}\n")

    for node_id, node in scenario.nodes.items():
        marker = f"{BLUE}*{NC}" if node_id == scenario.initial_node else " "
        print(f"{GREEN}{marker} {node_id}{NC}")
        print(f"    Messages: {len(node.role_messages)} role, {len(node.task_messages)} task")
        if not node.functions:
            print(f"    {YELLOW}No functions{NC}")
        for tool in node.functions:
            if isinstance(tool, TransitionTool):
                print(f"    • {tool.name} → {tool.transition_to}")
            else:
                print(f"    • {tool.name}")
        print()


def show_scenario(config_path: str) -> None:
    """Display detailed scenario information."""
    path = _resolve_scenario_path(config_path)

    if not path.exists():
        print(f"{RED}Scenario file not found: {config_path}{NC}")
        sys.exit(1)

    print(f"{BLUE}Scenario: {path.name}{NC}")
    print(f"{'=' * 50}\n")

    try:
        _print_scenario_details(_load(path))
    except ConfigurationError as e:
        print(f"{RED}Error loading scenario: {e}{NC}")
        sys.exit(1)


def main() -> None:
    """Execute the scenario tool command."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1].lower()

    if command == "list":
        list_scenarios()
    elif command == "validate":
        config_path = sys.argv[2] if len(sys.argv) > 2 else None
        success = validate_scenarios(config_path)
        sys.exit(0 if success else 1)
    elif command == "show":
        if len(sys.argv) < 3:
            print(f"{RED}Usage: scenario_tools.py show <scenario_name>{NC}")
            sys.exit(1)
        show_scenario(sys.argv[2])
    else:
        print(f"{RED}Unknown command: {command}{NC}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
