from __future__ import annotations

import io
import logging

import pytest
from rich.console import Console
from rich.table import Table
from rich.text import Text

from store_effects import DispatchOutcome, DispatchTracer, EffectCategory, Stage


class Owner:
    pass


@pytest.fixture()
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def tracer(output: io.StringIO) -> DispatchTracer:
    console = Console(file=output, force_terminal=False, width=120)
    return DispatchTracer(enabled=True, console=console)


def test_disabled_tracer_prints_nothing(tracer: DispatchTracer, output: io.StringIO) -> None:
    tracer.configure(False)
    tracer.record(EffectCategory.ACTIONS, "LOAD", DispatchOutcome.FIRED, stage=Stage.BEFORE)

    assert output.getvalue() == ""


def test_idle_outcomes_are_not_traced(tracer: DispatchTracer, output: io.StringIO) -> None:
    tracer.record(EffectCategory.ACTIONS, "LOAD", DispatchOutcome.IDLE)

    assert output.getvalue() == ""


def test_rich_line_names_event_point_and_owner(
    tracer: DispatchTracer, output: io.StringIO
) -> None:
    tracer.record(
        EffectCategory.ACTIONS,
        "LOAD",
        DispatchOutcome.GATED,
        stage=Stage.AFTER,
        prepend=True,
        owner=Owner(),
    )

    line = output.getvalue()
    assert "LOAD" in line
    assert "actions:after" in line
    assert "(prepend)" in line
    assert "gated" in line
    assert "Owner" in line


def test_verbose_output_includes_payload_table(tracer: DispatchTracer) -> None:
    tracer.configure(True, verbosity=2)

    text, table = tracer.format(
        EffectCategory.MUTATIONS,
        "SET_NAME",
        DispatchOutcome.FIRED,
        payload={"name": "x" * 150},
    )

    assert isinstance(text, Text)
    assert isinstance(table, Table)
    assert table.row_count == 1


def test_plain_output_goes_to_logging(
    tracer: DispatchTracer, output: io.StringIO, caplog: pytest.LogCaptureFixture
) -> None:
    tracer.configure(True, use_rich=False)

    with caplog.at_level(logging.DEBUG, logger="store_effects.core.tracing"):
        tracer.record(EffectCategory.MUTATIONS, "SET_NAME", DispatchOutcome.FIRED, owner=Owner())

    assert output.getvalue() == ""
    assert "[EFFECT] SET_NAME | mutations | fired | owner=Owner" in caplog.text


def test_registry_traces_fired_effects(output: io.StringIO) -> None:
    from memory_store import InMemoryStore

    from store_effects import EffectsRegistry

    store = InMemoryStore()
    registry = EffectsRegistry(store)
    registry.tracer = DispatchTracer(enabled=True, console=Console(file=output, width=120))
    registry.register_component_effects(Owner(), {"mutations": {"PING": lambda *_: None}})

    store.commit("PING")

    assert "PING" in output.getvalue()
    assert "fired" in output.getvalue()
