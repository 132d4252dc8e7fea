# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Scenario definition and registry."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from dataclasses import dataclass

from gatt_conformance.errors import InvalidSpecification
from gatt_conformance.scenarios._databases import database_spec
from gatt_conformance.scenarios._engine import Role
from gatt_conformance.scenarios._steps import Step
from gatt_conformance.transcript import Script

__all__ = [
    "Scenario",
    "get_scenario",
    "list_scenarios",
    "matches_filter",
    "register",
    "registered_scenarios",
]


@dataclass(frozen=True)
class Scenario:
    """One scripted conversation with an engine.

    Attributes:
        name: Test-purpose identifier such as ``/TP/GAR/CL/BV-01-C``.
        role: Role the engine plays.
        script: What the harness expects and sends.  For server scenarios
            the MTU exchange request is sent before it.
        database: Standard database served (server) or expected to be
            discovered (client), by name.
        step: Procedure the engine is asked to run.

    """

    name: str
    role: Role
    script: Script
    database: str | None = None
    step: Step | None = None

    def __post_init__(self) -> None:
        """Check that the pieces fit together.

        Raises:
            InvalidSpecification: If the role, database and step disagree.

        """
        if self.database is not None:
            try:
                database_spec(self.database)
            except KeyError as e:
                raise InvalidSpecification(f"{self.name}: {e.args[0]}") from None
        if self.role is Role.SERVER and self.database is None:
            raise InvalidSpecification(f"{self.name}: server scenarios need a database")
        if self.role is Role.SERVER and self.step is not None:
            raise InvalidSpecification(f"{self.name}: server scenarios are driven by the script alone")
        if self.step is not None and self.step.role is not self.role:
            raise InvalidSpecification(
                f"{self.name}: step {type(self.step).__name__} needs a {self.step.role.value} engine, "
                f"not {self.role.value}"
            )

    @property
    def category(self) -> str:
        """Test group, e.g. ``GAR`` for ``/TP/GAR/CL/BV-01-C``."""
        parts = [p for p in self.name.split("/") if p]
        return parts[1] if len(parts) > 1 else parts[0] if parts else ""


_SCENARIOS: dict[str, Scenario] = {}


def register(scenario: Scenario) -> Scenario:
    """Add a scenario to the registry.

    Raises:
        InvalidSpecification: If the name is already taken.

    """
    if scenario.name in _SCENARIOS:
        raise InvalidSpecification(f"Duplicate scenario name {scenario.name!r}")
    _SCENARIOS[scenario.name] = scenario
    return scenario


def matches_filter(scenario: Scenario, patterns: Iterable[str]) -> bool:
    """Check the full name or the category against glob patterns."""
    return any(
        fnmatch.fnmatchcase(scenario.name, pattern) or fnmatch.fnmatchcase(scenario.category, pattern)
        for pattern in patterns
    )


def registered_scenarios(filter_patterns: list[str] | None = None) -> list[Scenario]:
    """Return registered scenarios sorted by name, optionally filtered."""
    scenarios = sorted(_SCENARIOS.values(), key=lambda s: s.name)
    if filter_patterns:
        scenarios = [s for s in scenarios if matches_filter(s, filter_patterns)]
    return scenarios


def list_scenarios(filter_patterns: list[str] | None = None) -> list[str]:
    """Return sorted names of registered scenarios, optionally filtered.

    Args:
        filter_patterns: Optional glob patterns, matched against the full
            name or the category.

    """
    return [s.name for s in registered_scenarios(filter_patterns)]


def get_scenario(name: str) -> Scenario:
    """Look up a scenario by exact name.

    Raises:
        KeyError: If no scenario has that name.

    """
    try:
        return _SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario {name!r}") from None
