"""Process parameter engine: validation, tuple codec and status rules."""

from dvote.engine.codec import (
    ResponseSegment,
    from_response_tuple,
    to_evm_tuple,
    to_response_tuple,
    to_std_tuple,
)
from dvote.engine.status_machine import ProcessStatusMachine
from dvote.engine.validator import from_params

__all__ = [
    "ResponseSegment",
    "from_response_tuple",
    "to_evm_tuple",
    "to_response_tuple",
    "to_std_tuple",
    "ProcessStatusMachine",
    "from_params",
]
