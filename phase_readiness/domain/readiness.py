"""ReadinessOutput — the engine's per-call result.

Deterministic and inspectable: the scalar says how eligible the system is,
the gate says what a control layer may do, and the flags say why.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from phase_readiness.domain.flags import ReasonFlag, flag_names
from phase_readiness.domain.gate import Gate


class ReadinessOutput(BaseModel):
    """Immutable evaluation result, produced fresh on every call.

    ``flags`` holds the integer value of a ReasonFlag combination so it can
    be logged and serialized as-is.
    """

    readiness: float = Field(
        ..., ge=0.0, le=1.0,
        description="Eligibility for energy delivery: 1 = fully eligible, 0 = blocked",
    )
    gate: Gate = Field(..., description="Discrete actuation gate")
    flags: int = Field(default=0, ge=0, description="Bit-set of ReasonFlag values")
    derivative: float = Field(default=0.0, description="Instantaneous temperature derivative per second")
    trend: float = Field(default=0.0, description="Smoothed (EWMA) derivative estimate")
    stability_score: float = Field(
        default=0.0, ge=0.0, le=1.0,
        description="Intermediate stability metric (currently mirrors readiness)",
    )

    model_config = {"frozen": True}

    @property
    def reason_flags(self) -> ReasonFlag:
        return ReasonFlag(self.flags)

    @property
    def is_failsafe(self) -> bool:
        return bool(self.flags & ReasonFlag.FAILSAFE_DEFAULT)

    @property
    def reasons(self) -> list[str]:
        return flag_names(self.flags)

    def has(self, flag: ReasonFlag) -> bool:
        """True if every bit of *flag* is set on this output."""
        return (self.flags & flag) == flag
