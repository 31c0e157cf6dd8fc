from phase_readiness.domain.flags import ReasonFlag
from phase_readiness.domain.gate import Gate
from phase_readiness.domain.readiness import ReadinessOutput
from phase_readiness.domain.record import ReadinessRecord
from phase_readiness.domain.signal import SignalSnapshot

__all__ = ["ReasonFlag", "Gate", "ReadinessOutput", "ReadinessRecord", "SignalSnapshot"]
