"""Runtime settings for an ``EffectsRegistry``."""

from pydantic import BaseModel, ConfigDict, Field


class EffectsSettings(BaseModel):
    """Options controlling diagnostics and tracing of effect dispatch."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    debug: bool = Field(
        default=False,
        description="Log every dispatch decision (idle, gated, fired) at DEBUG level",
    )
    trace: bool = Field(
        default=False, description="Print a trace line for each fired or gated effect"
    )
    trace_verbosity: int = Field(
        default=1, ge=0, le=2, description="0=minimal, 1=normal, 2=verbose"
    )
    trace_use_rich: bool = Field(
        default=True, description="Use Rich formatting for trace output"
    )
