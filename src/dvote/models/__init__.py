"""Core data models for voting processes."""

from dvote.models.flags import (
    FlagValue,
    ProcessCensusOrigin,
    ProcessEnvelopeType,
    ProcessMode,
    ProcessStatus,
)
from dvote.models.options import TransactionOptions
from dvote.models.process import ZERO_ADDRESS, ProcessParameters, ProcessResults

__all__ = [
    "FlagValue",
    "ProcessCensusOrigin",
    "ProcessEnvelopeType",
    "ProcessMode",
    "ProcessStatus",
    "TransactionOptions",
    "ZERO_ADDRESS",
    "ProcessParameters",
    "ProcessResults",
]
