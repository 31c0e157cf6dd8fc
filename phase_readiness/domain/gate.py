"""Discrete actuation gate consumed by control/policy layers."""

from __future__ import annotations

from enum import Enum


class Gate(str, Enum):
    """Three-state eligibility gate.

    BLOCK:   energy delivery prohibited (unstable or undefined)
    CAUTION: transitional / marginal state
    ALLOW:   energy delivery permitted
    """

    BLOCK = "BLOCK"
    CAUTION = "CAUTION"
    ALLOW = "ALLOW"
