"""Process status machine: the contract's `setStatus` / `setResults` rules.

The processes contract is the authority; this module mirrors its rules so
a caller can check a status update before submitting it.

    READY <-> PAUSED       only if interruptible
    PAUSED -> READY        also once when neither interruptible nor auto-start
    READY/PAUSED -> ENDED, CANCELED
                           only if interruptible
    ENDED, CANCELED        terminal for the status setter
    any but CANCELED -> RESULTS
                           only through results publication, once

Fail-closed: any update not listed above is rejected.
"""

from __future__ import annotations

from dvote.models.flags import ProcessMode, ProcessStatus
from dvote.models.process import ProcessParameters

# Valid setter transitions of an interruptible process: {from: {to}}
_INTERRUPTIBLE: dict[int, set[int]] = {
    ProcessStatus.READY: {ProcessStatus.PAUSED, ProcessStatus.ENDED, ProcessStatus.CANCELED},
    ProcessStatus.PAUSED: {ProcessStatus.READY, ProcessStatus.ENDED, ProcessStatus.CANCELED},
    ProcessStatus.ENDED: set(),
    ProcessStatus.CANCELED: set(),
    ProcessStatus.RESULTS: set(),
}

_TERMINAL = frozenset({ProcessStatus.ENDED, ProcessStatus.CANCELED, ProcessStatus.RESULTS})


class ProcessStatusMachine:
    """Validates status updates of a process against its mode.

    Pure computation: returns a list of errors (empty = allowed) and
    never mutates the parameters.
    """

    @staticmethod
    def initial_status(mode: ProcessMode) -> ProcessStatus:
        """Status the contract assigns on creation."""
        if mode.is_auto_start:
            return ProcessStatus(ProcessStatus.READY)
        return ProcessStatus(ProcessStatus.PAUSED)

    @staticmethod
    def validate_transition(params: ProcessParameters, target: int | ProcessStatus) -> list[str]:
        """Check a `setStatus` call. Returns errors (empty = OK).

        ``target`` may be a raw status code or a ProcessStatus.
        """
        if isinstance(target, ProcessStatus):
            target = target.value
        if (
            not isinstance(target, int)
            or isinstance(target, bool)
            or target not in ProcessStatus.legal_values()
            or target == ProcessStatus.RESULTS
        ):
            return [f"Invalid status code: {target!r}"]

        current = params.status.value
        if current in _TERMINAL:
            return [f"Process terminated: status {current} admits no status update"]

        if not params.mode.is_interruptible:
            unlock = (
                current == ProcessStatus.PAUSED
                and target == ProcessStatus.READY
                and not params.mode.is_auto_start
            )
            if not unlock:
                return [f"Not interruptible: {current} -> {target} rejected"]
            return []

        if target not in _INTERRUPTIBLE[current]:
            allowed = ", ".join(str(s) for s in sorted(_INTERRUPTIBLE[current]))
            return [
                f"Invalid status transition: {current} -> {target}. "
                f"Allowed from {current}: [{allowed}]"
            ]
        return []

    @staticmethod
    def validate_results(params: ProcessParameters) -> list[str]:
        """Check a results publication. Returns errors (empty = OK)."""
        if params.status.is_canceled:
            return ["Process canceled: results cannot be published"]
        if params.status.has_results:
            return ["Results already published"]
        return []

    @staticmethod
    def is_terminal(status: ProcessStatus) -> bool:
        """True if the status setter can no longer change the status."""
        return status.value in _TERMINAL

    @staticmethod
    def valid_transitions(params: ProcessParameters) -> set[int]:
        """Return the status codes `setStatus` would accept right now."""
        return {
            target
            for target in ProcessStatus.legal_values()
            if not ProcessStatusMachine.validate_transition(params, target)
        }
