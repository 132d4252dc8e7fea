# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Registered GATT scenarios and the machinery to run them.

Importing this package registers every scenario table.
"""

from gatt_conformance.scenarios import _tables  # noqa: F401
from gatt_conformance.scenarios._databases import database_spec, list_databases, standard_database
from gatt_conformance.scenarios._driver import (
    DEFAULT_MTU,
    DEFAULT_SCENARIO_TIMEOUT,
    ScenarioDriver,
    ScenarioOptions,
)
from gatt_conformance.scenarios._engine import (
    AttEngine,
    ClientEngine,
    Engine,
    EngineFactory,
    ReadByTypeCallback,
    ReadCallback,
    ReadyCallback,
    Role,
    SearchCallback,
    load_engine_factory,
)
from gatt_conformance.scenarios._pdus import (
    MTU_EXCHANGE_CLIENT,
    PRIMARY_DISC_LARGE_DB_1,
    PRIMARY_DISC_SMALL_DB,
    SECONDARY_DISC_SMALL_DB,
    SERVER_MTU_EXCHANGE,
    SERVICE_DATA_1_DISCOVERY,
    pdu,
)
from gatt_conformance.scenarios._runner import ScenarioResult, ScenarioSuite, run_scenario, run_scenarios
from gatt_conformance.scenarios._scenario import (
    Scenario,
    get_scenario,
    list_scenarios,
    matches_filter,
    register,
    registered_scenarios,
)
from gatt_conformance.scenarios._steps import (
    DiscoverCharacteristics,
    DiscoverDescriptors,
    DiscoverIncludedServices,
    DiscoverPrimaryServices,
    ReadByType,
    ReadMultiple,
    ReadValue,
    Step,
)

__all__ = [
    "DEFAULT_MTU",
    "DEFAULT_SCENARIO_TIMEOUT",
    "MTU_EXCHANGE_CLIENT",
    "PRIMARY_DISC_LARGE_DB_1",
    "PRIMARY_DISC_SMALL_DB",
    "SECONDARY_DISC_SMALL_DB",
    "SERVER_MTU_EXCHANGE",
    "SERVICE_DATA_1_DISCOVERY",
    "AttEngine",
    "ClientEngine",
    "DiscoverCharacteristics",
    "DiscoverDescriptors",
    "DiscoverIncludedServices",
    "DiscoverPrimaryServices",
    "Engine",
    "EngineFactory",
    "ReadByType",
    "ReadByTypeCallback",
    "ReadCallback",
    "ReadMultiple",
    "ReadValue",
    "ReadyCallback",
    "Role",
    "Scenario",
    "ScenarioDriver",
    "ScenarioOptions",
    "ScenarioResult",
    "ScenarioSuite",
    "SearchCallback",
    "Step",
    "database_spec",
    "get_scenario",
    "list_databases",
    "list_scenarios",
    "load_engine_factory",
    "matches_filter",
    "pdu",
    "register",
    "registered_scenarios",
    "run_scenario",
    "run_scenarios",
    "standard_database",
]
