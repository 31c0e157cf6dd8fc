"""Reason flags — the explainability bit-set attached to every output.

Each flag is an independent boolean reason.  Flags OR together so several
reasons can co-occur, and the integer value is stable across releases so
it can be logged and serialized compactly.

FAILSAFE_DEFAULT is a meta-flag: it marks an output as a safety fallback
rather than a scored evaluation.  Only the fail-safe paths of the engine
set it.
"""

from __future__ import annotations

from enum import IntFlag


class ReasonFlag(IntFlag):
    NONE = 0
    INPUT_INVALID = 1 << 0  # data quality failure or implausible jump
    STALE_OR_NONMONOTONIC = 1 << 1  # timestamp issue or no derivative context
    TEMP_OUT_OF_RANGE = 1 << 2
    GRADIENT_TOO_HIGH = 1 << 3
    PERSISTENT_HEATING = 1 << 4
    PERSISTENT_COOLING = 1 << 5
    HYSTERESIS_HIGH = 1 << 6
    COHERENCE_LOW = 1 << 7
    FAILSAFE_DEFAULT = 1 << 31


# Reasons in bit order, excluding NONE.  Used for stable serialization.
REASONS: tuple[ReasonFlag, ...] = (
    ReasonFlag.INPUT_INVALID,
    ReasonFlag.STALE_OR_NONMONOTONIC,
    ReasonFlag.TEMP_OUT_OF_RANGE,
    ReasonFlag.GRADIENT_TOO_HIGH,
    ReasonFlag.PERSISTENT_HEATING,
    ReasonFlag.PERSISTENT_COOLING,
    ReasonFlag.HYSTERESIS_HIGH,
    ReasonFlag.COHERENCE_LOW,
    ReasonFlag.FAILSAFE_DEFAULT,
)

# Any of these forces the gate to BLOCK regardless of the computed score.
CRITICAL_FLAGS = (
    ReasonFlag.TEMP_OUT_OF_RANGE
    | ReasonFlag.GRADIENT_TOO_HIGH
    | ReasonFlag.HYSTERESIS_HIGH
)


def flag_names(flags: int) -> list[str]:
    """Names of the active reasons, in bit order."""
    value = int(flags)
    return [f.name for f in REASONS if value & f]


def describe_flags(flags: int) -> dict[str, bool]:
    """One lowercase key per reason, True when that reason is active."""
    value = int(flags)
    return {f.name.lower(): bool(value & f) for f in REASONS}
