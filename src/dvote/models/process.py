"""Voting process data models: creation/read parameters and results.

ProcessParameters is the aggregate exchanged with the processes contract:
built from caller intent before `newProcessStd` / `newProcessEvm`, or
decoded from the `get` accessor afterwards. It is an immutable value;
any change means building a new instance.

ProcessResults shapes the arguments of the results contract.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from dvote.errors import MissingRequiredField, OutOfRangeField
from dvote.models.flags import (
    ProcessCensusOrigin,
    ProcessEnvelopeType,
    ProcessMode,
    ProcessStatus,
)
from dvote.models.options import call_options

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
UINT256_MAX = 2**256 - 1

_FLAG_FIELDS = (
    ("mode", ProcessMode),
    ("envelope_type", ProcessEnvelopeType),
    ("census_origin", ProcessCensusOrigin),
    ("status", ProcessStatus),
)


@dataclass(frozen=True)
class ProcessParameters:
    """Parameters of a single voting process.

    ``owner`` is only known after decoding a contract response.
    ``params_signature`` is only sent on creation: the read accessor never
    returns it, so it is always None after decoding.
    ``source_block_height`` only applies to EVM (token) censuses.
    """
    mode: ProcessMode = field(default_factory=ProcessMode)
    envelope_type: ProcessEnvelopeType = field(default_factory=ProcessEnvelopeType)
    census_origin: ProcessCensusOrigin = field(
        default_factory=lambda: ProcessCensusOrigin(ProcessCensusOrigin.OFF_CHAIN_TREE)
    )
    status: ProcessStatus = field(default_factory=ProcessStatus)
    entity_address: str = ""  # Entity or token contract address
    owner: Optional[str] = None
    metadata: str = ""
    census_root: str = ""
    census_uri: str = ""
    start_block: int = 0
    block_count: int = 1
    question_index: int = 0
    question_count: int = 0
    max_count: int = 0
    max_value: int = 0
    max_vote_overwrites: int = 0
    max_total_cost: int = 0
    cost_exponent: int = 0
    source_block_height: Optional[int] = None
    params_signature: Optional[str] = None

    def __post_init__(self) -> None:
        # Raw integer codes become flag values; illegal codes raise InvalidFlagValue
        for name, kind in _FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, kind):
                object.__setattr__(self, name, kind(value))

    @classmethod
    def from_partial(cls, partial: Mapping[str, Any]) -> ProcessParameters:
        """Overlay a partial record of field values onto the defaults.

        Flag fields may be given as raw integer codes. Nothing else is
        validated here; use ``from_params`` for caller input.
        """
        return dataclasses.replace(cls(), **dict(partial))


@dataclass
class ProcessResults:
    """Tally matrix and Vochain height published for a finished process.

    Invariants:
    - tally is a non-empty list of lists of non-negative integers
    - height >= 1
    """
    tally: list[list[int]]
    height: int

    def __post_init__(self) -> None:
        if not isinstance(self.tally, (list, tuple)) or len(self.tally) < 1:
            raise MissingRequiredField("tally")
        rows: list[list[int]] = []
        for i, row in enumerate(self.tally):
            if not isinstance(row, (list, tuple)):
                raise OutOfRangeField(f"tally[{i}]", row, 0, UINT256_MAX)
            for j, item in enumerate(row):
                if not _is_int(item) or not 0 <= item <= UINT256_MAX:
                    raise OutOfRangeField(f"tally[{i}][{j}]", item, 0, UINT256_MAX)
            rows.append(list(row))
        self.tally = rows

        if self.height is None:
            raise MissingRequiredField("height")
        if not _is_int(self.height) or self.height < 1:
            raise OutOfRangeField("height", self.height, 1, UINT256_MAX)

    @classmethod
    def from_contract(cls, response: Any) -> ProcessResults:
        """Build results from a `getResults` response.

        Accepts either a ``(tally, height)`` pair or a mapping with
        ``tally`` and ``height`` keys.
        """
        if isinstance(response, Mapping):
            return cls(tally=response.get("tally"), height=response.get("height"))
        if isinstance(response, (list, tuple)) and len(response) == 2:
            return cls(tally=response[0], height=response[1])
        raise MissingRequiredField("tally")

    def to_contract_args(
        self,
        process_id: str,
        vochain_id: int,
        options: Optional[Any] = None,
    ) -> list[Any]:
        """Arrange the positional arguments of `setResults`."""
        args: list[Any] = [process_id, [list(row) for row in self.tally], self.height, vochain_id]
        if options is not None:
            args.append(call_options(options))
        return args


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

