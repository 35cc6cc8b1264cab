"""Error taxonomy for process parameters.

Every failure names the field or response segment that triggered it so
the caller can surface it verbatim. Nothing here is retried or recovered:
these are input errors, raised at the point of violation.
"""

from __future__ import annotations

from typing import Any


class ProcessParametersError(ValueError):
    """Base class for all process-parameter validation and codec errors."""


class InvalidFlagValue(ProcessParametersError):
    """A mode, envelope type, census origin or status outside its legal set."""

    def __init__(self, kind: str, value: Any) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind}: {value!r}")


class MissingRequiredField(ProcessParametersError):
    """A required field is absent or empty."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}")


class OutOfRangeField(ProcessParametersError):
    """A numeric field is not an integer within [low, high]."""

    def __init__(self, field: str, value: Any, low: int, high: int) -> None:
        self.field = field
        self.value = value
        self.low = low
        self.high = high
        super().__init__(
            f"Invalid {field}: {value!r} (expected an integer in [{low}, {high}])"
        )


class InconsistentCensusConfiguration(ProcessParametersError):
    """Fields that conflict with the selected census origin."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class MalformedResponseShape(ProcessParametersError):
    """The contract response does not have the expected tuple shape.

    ``segment`` identifies which part of the response failed, so an
    unexpected outer shape can be told apart from a bad inner group.
    """

    def __init__(self, segment: str, reason: str) -> None:
        self.segment = segment
        self.reason = reason
        super().__init__(f"Malformed response ({segment}): {reason}")
