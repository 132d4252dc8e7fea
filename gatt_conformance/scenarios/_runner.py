# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Scenario runner library.

Runs registered scenarios against an engine factory and collects the
results.

Usage::

    from gatt_conformance.scenarios import run_scenarios

    suite = run_scenarios(my_engine_factory, filter_patterns=["GAR"])
    assert suite.success

"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from gatt_conformance._debug import scenario_logger
from gatt_conformance.errors import HarnessError
from gatt_conformance.scenarios._driver import ScenarioDriver, ScenarioOptions
from gatt_conformance.scenarios._engine import EngineFactory
from gatt_conformance.scenarios._scenario import Scenario, registered_scenarios

__all__ = [
    "ScenarioResult",
    "ScenarioSuite",
    "run_scenario",
    "run_scenarios",
]


@dataclass(frozen=True)
class ScenarioResult:
    """Result of a single scenario."""

    name: str
    category: str
    passed: bool
    duration_ms: float
    error: str | None = None


@dataclass(frozen=True)
class ScenarioSuite:
    """Aggregate results of a scenario run."""

    results: list[ScenarioResult]
    total: int
    passed: int
    failed: int
    duration_ms: float

    @property
    def success(self) -> bool:
        """Whether all scenarios passed."""
        return self.failed == 0


def run_scenario(
    scenario: Scenario,
    engine_factory: EngineFactory,
    options: ScenarioOptions | None = None,
) -> ScenarioResult:
    """Run one scenario and capture its outcome.

    Failures never propagate; they are rendered into
    :attr:`ScenarioResult.error`.
    """
    start = time.monotonic()
    error: str | None = None
    passed = True
    try:
        ScenarioDriver(scenario, engine_factory, options).run()
    except AssertionError as e:
        passed = False
        error = str(e) if str(e) else "Assertion failed"
    except HarnessError as e:
        passed = False
        error = f"{type(e).__name__}: {e}"
    except Exception as e:
        passed = False
        error = f"{type(e).__name__}: {e}"
        scenario_logger.debug("Engine raised in %s", scenario.name, exc_info=True)
    elapsed_ms = (time.monotonic() - start) * 1000

    if passed:
        scenario_logger.info(
            "%s passed", scenario.name, extra={"scenario": scenario.name, "duration_ms": round(elapsed_ms, 2)}
        )
    else:
        scenario_logger.warning(
            "%s failed: %s",
            scenario.name,
            error,
            extra={"scenario": scenario.name, "duration_ms": round(elapsed_ms, 2)},
        )
    return ScenarioResult(
        name=scenario.name,
        category=scenario.category,
        passed=passed,
        duration_ms=elapsed_ms,
        error=error,
    )


def run_scenarios(
    engine_factory: EngineFactory,
    *,
    filter_patterns: list[str] | None = None,
    on_progress: Callable[[ScenarioResult], None] | None = None,
    options: ScenarioOptions | None = None,
) -> ScenarioSuite:
    """Run registered scenarios against an engine factory.

    Args:
        engine_factory: Builds one engine per scenario.
        filter_patterns: Optional glob patterns, matched against the full
            name or the category.
        on_progress: Optional callback invoked after each scenario.
        options: MTU and per-scenario deadline.

    Returns:
        A ScenarioSuite with all results.

    """
    suite_start = time.monotonic()
    results: list[ScenarioResult] = []

    for scenario in registered_scenarios(filter_patterns):
        result = run_scenario(scenario, engine_factory, options)
        results.append(result)
        if on_progress:
            on_progress(result)

    suite_elapsed = (time.monotonic() - suite_start) * 1000
    passed_count = sum(1 for r in results if r.passed)

    return ScenarioSuite(
        results=results,
        total=len(results),
        passed=passed_count,
        failed=len(results) - passed_count,
        duration_ms=suite_elapsed,
    )
