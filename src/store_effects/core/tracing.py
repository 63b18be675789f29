"""Human-readable tracing of dispatch decisions.

When enabled, every fired or gated effect is printed as a single line, with
Rich styling on stderr or as plain ``DEBUG`` log records.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .protocols import DispatchOutcome, EffectCategory, Stage

logger = logging.getLogger(__name__)

# stderr keeps trace output away from the host application's stdout
_console = Console(stderr=True)


class DispatchTracer:
    """Formats and emits trace lines for resolver outcomes.

    Args:
        enabled: Whether anything is emitted at all.
        verbosity: 0=minimal, 1=normal (adds owner), 2=verbose (adds a
            payload table).
        use_rich: Print through Rich instead of the ``logging`` module.
        console: Console override, mainly for tests.
    """

    def __init__(
        self,
        enabled: bool = False,
        verbosity: int = 1,
        use_rich: bool = True,
        console: Console | None = None,
    ):
        self.enabled = enabled
        self.verbosity = verbosity
        self.use_rich = use_rich
        self._console = console or _console

    def configure(
        self, enabled: bool, verbosity: int | None = None, use_rich: bool | None = None
    ) -> None:
        self.enabled = enabled
        if verbosity is not None:
            self.verbosity = verbosity
        if use_rich is not None:
            self.use_rich = use_rich

    def format(
        self,
        category: EffectCategory,
        event_type: str,
        outcome: DispatchOutcome,
        *,
        stage: Stage | None = None,
        prepend: bool = False,
        owner: Any = None,
        payload: Any = None,
    ) -> tuple[Text | str, Table | None]:
        """Build the trace line and, at verbosity 2, a payload table."""
        point = category.value if stage is None else f"{category.value}:{stage.value}"
        owner_name = type(owner).__name__ if owner is not None else None

        if not self.use_rich:
            parts = [f"[EFFECT] {event_type}", point, outcome.value]
            if prepend:
                parts.append("prepend")
            if owner_name and self.verbosity >= 1:
                parts.append(f"owner={owner_name}")
            if payload is not None and self.verbosity >= 2:
                parts.append(f"payload={payload!r}")
            return " | ".join(parts), None

        color = "green" if outcome is DispatchOutcome.FIRED else "yellow"
        text = Text()
        text.append("⚡ " if outcome is DispatchOutcome.FIRED else "⏸ ", style="bold")
        text.append(event_type, style=f"bold {color}")
        text.append(" | ")
        text.append(point, style="cyan")
        if prepend:
            text.append(" (prepend)", style="magenta")
        text.append(" | ")
        text.append(outcome.value, style=color)
        if owner_name and self.verbosity >= 1:
            text.append(" | ")
            text.append(owner_name, style="dim")

        table = None
        if self.verbosity >= 2 and payload is not None:
            table = Table(show_header=True, header_style="bold cyan", box=None)
            table.add_column("Field", style="cyan", width=15)
            table.add_column("Value", overflow="fold")
            items = payload.items() if isinstance(payload, dict) else [("payload", payload)]
            for key, value in items:
                value_str = str(value)
                if len(value_str) > 100:
                    value_str = value_str[:97] + "..."
                table.add_row(str(key), value_str)

        return text, table

    def record(
        self,
        category: EffectCategory,
        event_type: str,
        outcome: DispatchOutcome,
        **details: Any,
    ) -> None:
        if not self.enabled or outcome is DispatchOutcome.IDLE:
            return

        text, table = self.format(category, event_type, outcome, **details)
        if not self.use_rich:
            logger.debug(text)
            return
        self._console.print(text)
        if table is not None:
            self._console.print(table)
