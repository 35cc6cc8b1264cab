"""Process flag values: mode, envelope type, census origin and status.

Each flag family is a small immutable wrapper around an integer that is
validated on construction. Bitmask families (mode, envelope type) accept
any combination of their named bits; enumeration families (census origin,
status) accept only their listed codes, which are not contiguous.

The ``make`` combinators build raw bitmask integers from named booleans.
They do not validate: the result is always in range by construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from dvote.errors import InvalidFlagValue


@dataclass(frozen=True)
class FlagValue:
    """An integer restricted to a closed set of legal values."""
    value: int = 0

    _KIND: ClassVar[str] = "flag value"
    _LEGAL: ClassVar[frozenset[int]] = frozenset()

    def __post_init__(self) -> None:
        # bool is an int subclass but never a valid wire value
        if (
            not isinstance(self.value, int)
            or isinstance(self.value, bool)
            or self.value not in self._LEGAL
        ):
            raise InvalidFlagValue(self._KIND, self.value)

    def __int__(self) -> int:
        return self.value

    @classmethod
    def legal_values(cls) -> frozenset[int]:
        return cls._LEGAL


@dataclass(frozen=True)
class ProcessMode(FlagValue):
    """Lifecycle policy bitmask of a voting process."""

    # Starts as READY and accepts votes from startBlock; otherwise starts PAUSED
    AUTO_START: ClassVar[int] = 1 << 0
    # The creator may pause, end or cancel the process
    INTERRUPTIBLE: ClassVar[int] = 1 << 1
    # The census may be updated while READY or PAUSED
    DYNAMIC_CENSUS: ClassVar[int] = 1 << 2
    # Clients must fetch a decryption key before showing the metadata
    ENCRYPTED_METADATA: ClassVar[int] = 1 << 3

    _KIND: ClassVar[str] = "process mode"
    _LEGAL: ClassVar[frozenset[int]] = frozenset(range(0, 16))

    @staticmethod
    def make(
        auto_start: bool = False,
        interruptible: bool = False,
        dynamic_census: bool = False,
        encrypted_metadata: bool = False,
    ) -> int:
        """Return the mode integer for the given flags."""
        result = 0
        result |= ProcessMode.AUTO_START if auto_start else 0
        result |= ProcessMode.INTERRUPTIBLE if interruptible else 0
        result |= ProcessMode.DYNAMIC_CENSUS if dynamic_census else 0
        result |= ProcessMode.ENCRYPTED_METADATA if encrypted_metadata else 0
        return result

    @property
    def is_auto_start(self) -> bool:
        return (self.value & ProcessMode.AUTO_START) != 0

    @property
    def is_interruptible(self) -> bool:
        return (self.value & ProcessMode.INTERRUPTIBLE) != 0

    @property
    def has_dynamic_census(self) -> bool:
        return (self.value & ProcessMode.DYNAMIC_CENSUS) != 0

    @property
    def has_encrypted_metadata(self) -> bool:
        return (self.value & ProcessMode.ENCRYPTED_METADATA) != 0


@dataclass(frozen=True)
class ProcessEnvelopeType(FlagValue):
    """Vote envelope semantics bitmask."""

    # Questions are voted one by one (enables questionIndex)
    SERIAL: ClassVar[int] = 1 << 0
    # Franchise proofs use ZK-SNARKs instead of ECDSA signatures
    ANONYMOUS: ClassVar[int] = 1 << 1
    # Votes are encrypted until the process ends
    ENCRYPTED_VOTES: ClassVar[int] = 1 << 2
    # A choice may appear only once per question
    UNIQUE_VALUES: ClassVar[int] = 1 << 3
    # On weighted EVM censuses, the voter balance is used as maxCost
    COST_FROM_WEIGHT: ClassVar[int] = 1 << 4

    _KIND: ClassVar[str] = "envelope type"
    _LEGAL: ClassVar[frozenset[int]] = frozenset(range(0, 32))

    @staticmethod
    def make(
        serial: bool = False,
        anonymous_voters: bool = False,
        encrypted_votes: bool = False,
        unique_values: bool = False,
        cost_from_weight: bool = False,
    ) -> int:
        """Return the envelope type integer for the given flags."""
        result = 0
        result |= ProcessEnvelopeType.SERIAL if serial else 0
        result |= ProcessEnvelopeType.ANONYMOUS if anonymous_voters else 0
        result |= ProcessEnvelopeType.ENCRYPTED_VOTES if encrypted_votes else 0
        result |= ProcessEnvelopeType.UNIQUE_VALUES if unique_values else 0
        result |= ProcessEnvelopeType.COST_FROM_WEIGHT if cost_from_weight else 0
        return result

    @property
    def has_serial_voting(self) -> bool:
        return (self.value & ProcessEnvelopeType.SERIAL) != 0

    @property
    def has_anonymous_voters(self) -> bool:
        return (self.value & ProcessEnvelopeType.ANONYMOUS) != 0

    @property
    def has_encrypted_votes(self) -> bool:
        return (self.value & ProcessEnvelopeType.ENCRYPTED_VOTES) != 0

    @property
    def has_unique_values(self) -> bool:
        return (self.value & ProcessEnvelopeType.UNIQUE_VALUES) != 0

    @property
    def has_cost_from_weight(self) -> bool:
        return (self.value & ProcessEnvelopeType.COST_FROM_WEIGHT) != 0


@dataclass(frozen=True)
class ProcessCensusOrigin(FlagValue):
    """Source of voter eligibility.

    Codes 1-3 are off-chain censuses (Merkle tree, weighted tree, CA
    signature). Codes 11-15 are token censuses proven against an EVM
    storage slot at ``sourceBlockHeight``.
    """
    value: int = 1

    OFF_CHAIN_TREE: ClassVar[int] = 1
    OFF_CHAIN_TREE_WEIGHTED: ClassVar[int] = 2
    OFF_CHAIN_CA: ClassVar[int] = 3
    ERC20: ClassVar[int] = 11
    ERC721: ClassVar[int] = 12
    ERC1155: ClassVar[int] = 13
    ERC777: ClassVar[int] = 14
    MINI_ME: ClassVar[int] = 15

    _KIND: ClassVar[str] = "census origin"
    _LEGAL: ClassVar[frozenset[int]] = frozenset({1, 2, 3, 11, 12, 13, 14, 15})
    _OFF_CHAIN: ClassVar[frozenset[int]] = frozenset({1, 2, 3})

    @property
    def is_off_chain(self) -> bool:
        return self.value == ProcessCensusOrigin.OFF_CHAIN_TREE

    @property
    def is_off_chain_weighted(self) -> bool:
        return self.value == ProcessCensusOrigin.OFF_CHAIN_TREE_WEIGHTED

    @property
    def is_off_chain_ca(self) -> bool:
        return self.value == ProcessCensusOrigin.OFF_CHAIN_CA

    @property
    def is_erc20(self) -> bool:
        return self.value == ProcessCensusOrigin.ERC20

    @property
    def is_erc721(self) -> bool:
        return self.value == ProcessCensusOrigin.ERC721

    @property
    def is_erc1155(self) -> bool:
        return self.value == ProcessCensusOrigin.ERC1155

    @property
    def is_erc777(self) -> bool:
        return self.value == ProcessCensusOrigin.ERC777

    @property
    def is_mini_me(self) -> bool:
        return self.value == ProcessCensusOrigin.MINI_ME

    @property
    def is_off_chain_family(self) -> bool:
        return self.value in self._OFF_CHAIN

    @property
    def is_evm_family(self) -> bool:
        return not self.is_off_chain_family


@dataclass(frozen=True)
class ProcessStatus(FlagValue):
    """On-chain lifecycle state of a process."""

    # Accepting votes, according to AUTO_START, startBlock and blockCount
    READY: ClassVar[int] = 0
    # Ended by the creator; results will follow
    ENDED: ClassVar[int] = 1
    # Canceled; no results will be published
    CANCELED: ClassVar[int] = 2
    # Temporarily not accepting votes
    PAUSED: ClassVar[int] = 3
    # Ended and results are available
    RESULTS: ClassVar[int] = 4

    _KIND: ClassVar[str] = "process status"
    _LEGAL: ClassVar[frozenset[int]] = frozenset({0, 1, 2, 3, 4})

    @property
    def is_ready(self) -> bool:
        return self.value == ProcessStatus.READY

    @property
    def is_ended(self) -> bool:
        return self.value == ProcessStatus.ENDED

    @property
    def is_canceled(self) -> bool:
        return self.value == ProcessStatus.CANCELED

    @property
    def is_paused(self) -> bool:
        return self.value == ProcessStatus.PAUSED

    @property
    def has_results(self) -> bool:
        return self.value == ProcessStatus.RESULTS
