# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Tests for the scenario registry and tables."""

from __future__ import annotations

import pytest

from gatt_conformance.errors import InvalidSpecification
from gatt_conformance.scenarios import (
    SERVER_MTU_EXCHANGE,
    DiscoverPrimaryServices,
    ReadValue,
    Role,
    Scenario,
    get_scenario,
    list_scenarios,
    matches_filter,
    register,
    registered_scenarios,
)
from gatt_conformance.transcript import Expectation, Script, Stimulus


class TestRegistry:
    """Lookup and filtering."""

    def test_sorted_and_unique(self) -> None:
        """Names come back sorted."""
        names = list_scenarios()
        assert names == sorted(names)
        assert len(names) == len(set(names))

    def test_categories(self) -> None:
        """Every scenario belongs to one of the three test groups."""
        assert {s.category for s in registered_scenarios()} == {"GAC", "GAD", "GAR"}

    def test_category_filter(self) -> None:
        """A bare category selects the whole group."""
        names = list_scenarios(["GAR"])
        assert names
        assert all(name.startswith("/TP/GAR/") for name in names)

    def test_glob_filter(self) -> None:
        """Glob patterns match full names."""
        names = list_scenarios(["/TP/GAD/SR/BV-04-C/*"])
        assert names == [
            "/TP/GAD/SR/BV-04-C/large-1",
            "/TP/GAD/SR/BV-04-C/small/1",
            "/TP/GAD/SR/BV-04-C/small/2",
        ]

    def test_multiple_patterns(self) -> None:
        """Patterns are alternatives."""
        assert set(list_scenarios(["GAC", "GAR"])) == set(list_scenarios(["GAC"])) | set(list_scenarios(["GAR"]))

    def test_matches_filter(self) -> None:
        """Matching against a single scenario."""
        scenario = get_scenario("/TP/GAR/CL/BV-01-C")
        assert matches_filter(scenario, ["GAR"])
        assert matches_filter(scenario, ["*/CL/*"])
        assert not matches_filter(scenario, ["GAD"])

    def test_unknown_scenario(self) -> None:
        """Lookups of unknown names fail clearly."""
        with pytest.raises(KeyError, match="Unknown scenario"):
            get_scenario("/TP/NOPE")

    def test_duplicate_rejected(self) -> None:
        """A name can be registered once."""
        with pytest.raises(InvalidSpecification, match="Duplicate"):
            register(get_scenario("/TP/GAR/CL/BV-01-C"))

    def test_extra_multiple_read_error(self) -> None:
        """The second BI-21 variant exercises a different error code."""
        scenario = get_scenario("/TP/GAR/CL/BI-21-C-2")
        assert scenario.script[-1].data == b"\x01\x0e\x03\x00\x0c"


class TestScenarioValidation:
    """Scenario construction checks."""

    def test_server_needs_database(self) -> None:
        """A server has to serve something."""
        with pytest.raises(InvalidSpecification, match="need a database"):
            Scenario("/TP/X/SR/1", Role.SERVER, Script.from_pdus([b"\x03\x00\x02"]))

    def test_server_has_no_step(self) -> None:
        """Servers are driven by the script alone."""
        with pytest.raises(InvalidSpecification, match="script alone"):
            Scenario(
                "/TP/X/SR/2",
                Role.SERVER,
                Script.from_pdus([b"\x03\x00\x02"]),
                database="ts_small_db",
                step=ReadValue(0x0003),
            )

    def test_step_role_must_match(self) -> None:
        """Client steps need a client engine."""
        with pytest.raises(InvalidSpecification, match="needs a client engine"):
            Scenario("/TP/X/CL/3", Role.ATT, Script(), step=ReadValue(0x0003))

    def test_unknown_database(self) -> None:
        """Databases are referenced by known names."""
        with pytest.raises(InvalidSpecification, match="Unknown database"):
            Scenario("/TP/X/CL/4", Role.CLIENT, Script(), database="nope")

    def test_category(self) -> None:
        """The category is the second path component."""
        scenario = Scenario("/TP/GAD/CL/X", Role.ATT, Script(), step=DiscoverPrimaryServices())
        assert scenario.category == "GAD"


class TestTables:
    """Shape of the registered scripts."""

    @pytest.mark.parametrize("name", list_scenarios())
    def test_script_starts_with_expectation(self, name: str) -> None:
        """Every table begins with a message the harness receives."""
        scenario = get_scenario(name)
        assert isinstance(scenario.script[0], Expectation)

    @pytest.mark.parametrize("name", list_scenarios(["*/SR/*"]))
    def test_server_scripts_accept_mtu_prefix(self, name: str) -> None:
        """Server scripts still alternate once the MTU request is prepended."""
        scenario = get_scenario(name)
        assert scenario.role is Role.SERVER
        assert scenario.database is not None
        script = scenario.script.prepend(Stimulus(SERVER_MTU_EXCHANGE))
        assert script[0] == Stimulus(b"\x02\x17\x00")
        assert isinstance(script[-1], Expectation)

    @pytest.mark.parametrize("name", list_scenarios(["*/CL/*"]))
    def test_client_side_roles(self, name: str) -> None:
        """Client-side scenarios are att or client scenarios."""
        assert get_scenario(name).role in (Role.ATT, Role.CLIENT)
