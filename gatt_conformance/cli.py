# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Command-line interface for the GATT conformance harness.

Usage::

    gatt-conformance list --filter GAR
    gatt-conformance databases
    gatt-conformance describe ts_small_db --format json
    gatt-conformance run --engine my_stack.harness:engine_factory --filter "/TP/GAD/*"
    gatt-conformance run --engine my_stack.harness:engine_factory --debug --log-format json

Exit status is ``0`` when every selected scenario passed, ``1`` when any
failed and ``2`` for usage errors.
"""

from __future__ import annotations

import importlib.metadata
import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Annotated

import typer

from gatt_conformance.scenarios import (
    DEFAULT_MTU,
    DEFAULT_SCENARIO_TIMEOUT,
    EngineFactory,
    ScenarioOptions,
    ScenarioResult,
    ScenarioSuite,
    list_databases,
    list_scenarios,
    load_engine_factory,
    run_scenarios,
    standard_database,
)

# ---------------------------------------------------------------------------
# Known loggers registry
# ---------------------------------------------------------------------------

_KNOWN_LOGGERS: tuple[tuple[str, str], ...] = (
    ("gatt_conformance", "Root logger for all harness output"),
    ("gatt_conformance.db", "Database construction and handle allocation"),
    ("gatt_conformance.transcript", "Player state transitions and verdicts"),
    ("gatt_conformance.wire", "Hexdump of every message crossing the channel"),
    ("gatt_conformance.scenario", "Scenario lifecycle and per-scenario outcome"),
)

_KNOWN_LOGGER_NAMES: frozenset[str] = frozenset(name for name, _ in _KNOWN_LOGGERS)

# ---------------------------------------------------------------------------
# Output format enums
# ---------------------------------------------------------------------------


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    auto = "auto"
    json = "json"
    table = "table"


class LogFormat(StrEnum):
    """Format of log records written to stderr."""

    text = "text"
    json = "json"


class LogLevel(StrEnum):
    """Logging level for harness loggers."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# CLI config
# ---------------------------------------------------------------------------


@dataclass
class _CliConfig:
    """Holds resolved options of a ``run`` invocation."""

    engine: str
    filter_patterns: list[str] | None = None
    format: OutputFormat = OutputFormat.auto
    options: ScenarioOptions = field(default_factory=ScenarioOptions)


app = typer.Typer(
    name="gatt-conformance",
    help="Scripted GATT/ATT conformance scenarios against a pluggable engine.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        try:
            version = importlib.metadata.version("gatt-conformance")
        except importlib.metadata.PackageNotFoundError:
            version = "unknown"
        typer.echo(f"gatt-conformance {version}")
        raise typer.Exit()


@app.callback()
def _main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=_version_callback, is_eager=True),
    ] = False,
) -> None:
    """Run and inspect GATT conformance scenarios."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_patterns(values: list[str] | None) -> list[str] | None:
    """Flatten repeated and comma-separated ``--filter`` values."""
    if not values:
        return None
    patterns = [p.strip() for v in values for p in v.split(",") if p.strip()]
    return patterns or None


def _configure_logging(
    level: LogLevel | None,
    *,
    debug: bool,
    log_format: LogFormat,
    loggers: list[str] | None,
) -> None:
    """Attach a stderr handler to the target loggers at the requested level."""
    name = "DEBUG" if debug else level.value if level is not None else None
    if name is None:
        return

    handler = logging.StreamHandler(sys.stderr)
    if log_format == LogFormat.json:
        from gatt_conformance.logging_utils import HarnessJsonFormatter

        handler.setFormatter(HarnessJsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(name)-30s %(levelname)-5s %(message)s"))

    numeric_level = logging.getLevelNamesMapping()[name]
    targets: list[str] = loggers if loggers else ["gatt_conformance"]

    for target in targets:
        if target not in _KNOWN_LOGGER_NAMES:
            sys.stderr.write(f"Warning: unknown logger '{target}'\n")
            sys.stderr.flush()
        logger = logging.getLogger(target)
        logger.setLevel(numeric_level)
        logger.addHandler(handler)


def _resolve_format(fmt: OutputFormat) -> OutputFormat:
    if fmt == OutputFormat.auto:
        return OutputFormat.table if sys.stdout.isatty() else OutputFormat.json
    return fmt


def _format_table(rows: list[dict[str, object]]) -> str:
    """Format rows as a simple column-aligned text table.

    Args:
        rows: List of dicts (all with the same keys).

    Returns:
        A formatted table string.

    """
    if not rows:
        return "(empty)"
    columns = list(rows[0].keys())
    widths = {col: len(col) for col in columns}
    str_rows: list[dict[str, str]] = []
    for row in rows:
        sr: dict[str, str] = {}
        for col in columns:
            s = str(row.get(col, ""))
            sr[col] = s
            widths[col] = max(widths[col], len(s))
        str_rows.append(sr)

    lines: list[str] = []
    lines.append("  ".join(col.ljust(widths[col]) for col in columns).rstrip())
    lines.append("  ".join("-" * widths[col] for col in columns))
    lines.extend("  ".join(sr[col].ljust(widths[col]) for col in columns).rstrip() for sr in str_rows)
    return "\n".join(lines)


def _print_json(data: object, *, pretty: bool = False) -> None:
    """Print JSON to stdout."""
    if pretty:
        typer.echo(json.dumps(data, indent=2, default=str))
    else:
        typer.echo(json.dumps(data, default=str))


def _format_suite_table(suite: ScenarioSuite) -> str:
    """Format suite results as a human-readable table."""
    lines: list[str] = []
    lines.append(
        f"gatt-conformance: {suite.passed} passed, {suite.failed} failed ({suite.duration_ms / 1000:.2f}s)"
    )
    lines.append("")

    for r in suite.results:
        status = "PASS" if r.passed else "FAIL"
        lines.append(f"  {r.name:<45s} {status:>4s}  {r.duration_ms:>7.1f}ms")
        if r.error:
            lines.append(f"    {r.error}")

    return "\n".join(lines)


def _suite_to_dict(suite: ScenarioSuite) -> dict[str, object]:
    """Convert suite results to a JSON-ready dict."""
    return {
        "total": suite.total,
        "passed": suite.passed,
        "failed": suite.failed,
        "duration_ms": round(suite.duration_ms, 1),
        "results": [
            {
                "name": r.name,
                "category": r.category,
                "passed": r.passed,
                "duration_ms": round(r.duration_ms, 1),
                "error": r.error,
            }
            for r in suite.results
        ],
    }


def _make_progress_callback() -> Callable[[ScenarioResult], None] | None:
    """Create a progress callback for real-time output on TTY stderr."""
    if not sys.stderr.isatty():
        return None

    def _progress(result: ScenarioResult) -> None:
        status = "PASS" if result.passed else "FAIL"
        sys.stderr.write(f"  {result.name:<45s} {status}\n")
        sys.stderr.flush()

    return _progress


def _load_factory(spec: str) -> EngineFactory:
    try:
        return load_engine_factory(spec)
    except (ImportError, ValueError) as e:
        raise typer.BadParameter(str(e), param_hint="--engine") from None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

FilterOption = Annotated[
    list[str] | None,
    typer.Option("--filter", "-k", help="Glob pattern on scenario name or category (repeatable, comma-separated)"),
]


@app.command("list")
def list_command(filter_: FilterOption = None) -> None:
    """List registered scenarios."""
    for name in list_scenarios(_split_patterns(filter_)):
        typer.echo(name)


@app.command()
def databases() -> None:
    """List the standard databases."""
    for name in list_databases():
        typer.echo(name)


@app.command()
def describe(
    name: Annotated[str, typer.Argument(help="Standard database name")],
    fmt: Annotated[OutputFormat, typer.Option("--format", "-f", help="Output format")] = OutputFormat.auto,
) -> None:
    """Dump every attribute of a standard database."""
    try:
        db = standard_database(name)
    except KeyError as e:
        raise typer.BadParameter(str(e.args[0]), param_hint="NAME") from None

    rows: list[dict[str, object]] = []
    for row in db.to_arrow().to_pylist():
        row["handle"] = f"0x{row['handle']:04x}"
        row["service"] = f"0x{row['service']:04x}"
        row["value"] = bytes(row["value"]).hex()
        rows.append(row)

    if _resolve_format(fmt) == OutputFormat.table:
        typer.echo(_format_table(rows))
    else:
        _print_json({"name": name, "attributes": rows}, pretty=fmt == OutputFormat.auto)


@app.command()
def run(
    engine: Annotated[str, typer.Option("--engine", "-e", help="Engine factory as 'module:attribute'")],
    filter_: FilterOption = None,
    fmt: Annotated[OutputFormat, typer.Option("--format", "-f", help="Output format")] = OutputFormat.auto,
    timeout: Annotated[
        float, typer.Option("--timeout", "-t", min=0.0, help="Per-scenario deadline in seconds, 0 disables")
    ] = DEFAULT_SCENARIO_TIMEOUT,
    mtu: Annotated[int, typer.Option("--mtu", min=23, max=0xFFFF, help="MTU handed to the engine")] = DEFAULT_MTU,
    debug: Annotated[bool, typer.Option("--debug", help="Enable DEBUG on all harness loggers to stderr")] = False,
    log_level: Annotated[LogLevel | None, typer.Option("--log-level", help="Level for harness loggers")] = None,
    log_format: Annotated[LogFormat, typer.Option("--log-format", help="Stderr log format")] = LogFormat.text,
    log_logger: Annotated[
        list[str] | None, typer.Option("--log-logger", help="Target specific logger(s), repeatable")
    ] = None,
) -> None:
    """Run scenarios against an engine."""
    config = _CliConfig(
        engine=engine,
        filter_patterns=_split_patterns(filter_),
        format=fmt,
        options=ScenarioOptions(mtu=mtu, timeout=timeout),
    )
    factory = _load_factory(config.engine)
    _configure_logging(log_level, debug=debug, log_format=log_format, loggers=log_logger)

    resolved = _resolve_format(config.format)
    suite = run_scenarios(
        factory,
        filter_patterns=config.filter_patterns,
        on_progress=_make_progress_callback() if resolved == OutputFormat.table else None,
        options=config.options,
    )

    if resolved == OutputFormat.table:
        typer.echo(_format_suite_table(suite))
    else:
        _print_json(_suite_to_dict(suite), pretty=config.format == OutputFormat.auto)

    if not suite.success:
        raise typer.Exit(1)
