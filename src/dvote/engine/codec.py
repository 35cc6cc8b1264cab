"""Positional tuple codec for the processes contract.

The contract takes and returns grouped positional arrays instead of named
fields. Field order, grouping and element types below are the wire
contract; any change breaks on-chain calls.

newProcessStd:
    [mode, envelopeType, censusOrigin]
    [metadata, censusRoot, censusUri]
    [startBlock, blockCount]
    [questionCount, maxCount, maxValue, maxVoteOverwrites]
    [maxTotalCost, costExponent]
    paramsSignature
    (call options)

newProcessEvm:
    [mode, envelopeType, censusOrigin]
    [metadata, censusRoot]
    [startBlock, blockCount]
    [questionCount, maxCount, maxValue, maxVoteOverwrites]
    [maxTotalCost, costExponent]
    tokenAddress
    sourceBlockHeight
    paramsSignature
    (call options)

get (read accessor), 8 elements:
    [mode, envelopeType, censusOrigin]
    [entityAddress, owner]
    [metadata, censusRoot, censusUri]
    [startBlock, blockCount]
    status
    [questionIndex, questionCount, maxCount, maxValue, maxVoteOverwrites]
    [maxTotalCost, costExponent]
    sourceBlockHeight

The read accessor never returns paramsSignature, so decoded parameters
always have ``params_signature=None``.
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Optional, Sequence

import structlog

from dvote.config import DEFAULT_CENSUS_URI
from dvote.errors import MalformedResponseShape
from dvote.models.flags import (
    ProcessCensusOrigin,
    ProcessEnvelopeType,
    ProcessMode,
    ProcessStatus,
)
from dvote.models.options import TransactionOptions, call_options
from dvote.models.process import ProcessParameters

log = structlog.get_logger(__name__)

RESPONSE_LENGTH = 8


class ResponseSegment(str, enum.Enum):
    """Parts of the read accessor response, as named by the contract."""
    RESPONSE = "response"
    MODE_ENVELOPE_TYPE_CENSUS_ORIGIN = "mode_envelopeType_censusOrigin"
    ENTITY_OWNER = "entity_owner"
    METADATA_CENSUS_ROOT_CENSUS_URI = "metadata_censusRoot_censusUri"
    START_BLOCK_BLOCK_COUNT = "startBlock_blockCount"
    STATUS = "status"
    QUESTION_INDEX_QUESTION_COUNT_MAX_COUNT_MAX_VALUE_MAX_VOTE_OVERWRITES = (
        "questionIndex_questionCount_maxCount_maxValue_maxVoteOverwrites"
    )
    MAX_TOTAL_COST_COST_EXPONENT = "maxTotalCost_costExponent"


# (position, segment, expected length, element type); None length = scalar
_RESPONSE_LAYOUT: tuple[tuple[int, ResponseSegment, Optional[int], type], ...] = (
    (0, ResponseSegment.MODE_ENVELOPE_TYPE_CENSUS_ORIGIN, 3, int),
    (1, ResponseSegment.ENTITY_OWNER, 2, str),
    (2, ResponseSegment.METADATA_CENSUS_ROOT_CENSUS_URI, 3, str),
    (3, ResponseSegment.START_BLOCK_BLOCK_COUNT, 2, int),
    (4, ResponseSegment.STATUS, None, int),
    (5, ResponseSegment.QUESTION_INDEX_QUESTION_COUNT_MAX_COUNT_MAX_VALUE_MAX_VOTE_OVERWRITES, 5, int),
    (6, ResponseSegment.MAX_TOTAL_COST_COST_EXPONENT, 2, int),
)

CallOptions = TransactionOptions | Mapping[str, Any]


def to_std_tuple(
    params: ProcessParameters,
    options: Optional[CallOptions] = None,
    default_census_uri: str = DEFAULT_CENSUS_URI,
) -> list[Any]:
    """Arrange parameters as the arguments of `newProcessStd`.

    An empty census URI is sent as ``default_census_uri``. Call options
    are appended only when given.
    """
    result: list[Any] = [
        _flags_group(params),
        [params.metadata, params.census_root, params.census_uri or default_census_uri],
        [params.start_block, params.block_count],
        _counts_group(params),
        [params.max_total_cost, params.cost_exponent],
        params.params_signature,
    ]
    if options is not None:
        result.append(call_options(options))
    log.debug("process_encoded", shape="std", census_origin=params.census_origin.value)
    return result


def to_evm_tuple(
    params: ProcessParameters,
    options: Optional[CallOptions] = None,
) -> list[Any]:
    """Arrange parameters as the arguments of `newProcessEvm`.

    The census URI is not part of this call. ``entity_address`` is sent
    as the token contract address.
    """
    result: list[Any] = [
        _flags_group(params),
        [params.metadata, params.census_root],
        [params.start_block, params.block_count],
        _counts_group(params),
        [params.max_total_cost, params.cost_exponent],
        params.entity_address,
        params.source_block_height,
        params.params_signature,
    ]
    if options is not None:
        result.append(call_options(options))
    log.debug("process_encoded", shape="evm", census_origin=params.census_origin.value)
    return result


def from_response_tuple(response: Sequence[Any]) -> ProcessParameters:
    """Decode the 8-element response of the `get` accessor.

    The whole shape is checked before any value is read. Flag values are
    validated afterwards.

    Raises:
        MalformedResponseShape: naming the segment that failed.
        InvalidFlagValue: for out-of-range mode, envelope type, census
            origin or status codes.
    """
    _check_response_shape(response)

    flags, entity_owner, refs, blocks, status, counts, costs, height = response

    result = ProcessParameters(
        mode=ProcessMode(flags[0]),
        envelope_type=ProcessEnvelopeType(flags[1]),
        census_origin=ProcessCensusOrigin(flags[2]),
        status=ProcessStatus(status),
        entity_address=entity_owner[0],
        owner=entity_owner[1],
        metadata=refs[0],
        census_root=refs[1],
        census_uri=refs[2],
        start_block=blocks[0],
        block_count=blocks[1],
        question_index=counts[0],
        question_count=counts[1],
        max_count=counts[2],
        max_value=counts[3],
        max_vote_overwrites=counts[4],
        max_total_cost=costs[0],
        cost_exponent=costs[1],
        source_block_height=height if _is_int(height) else None,
        params_signature=None,
    )
    log.debug("process_decoded", status=status, census_origin=flags[2])
    return result


def to_response_tuple(
    params: ProcessParameters,
    status: Optional[ProcessStatus] = None,
) -> list[Any]:
    """Arrange parameters the way the `get` accessor returns them.

    Used to build contract fixtures. ``owner`` falls back to the entity
    address; ``status`` defaults to the parameters' own status.
    """
    current = status if status is not None else params.status
    return [
        _flags_group(params),
        [params.entity_address, params.owner or params.entity_address],
        [params.metadata, params.census_root, params.census_uri],
        [params.start_block, params.block_count],
        current.value,
        [params.question_index] + _counts_group(params),
        [params.max_total_cost, params.cost_exponent],
        params.source_block_height,
    ]


def _flags_group(params: ProcessParameters) -> list[int]:
    return [params.mode.value, params.envelope_type.value, params.census_origin.value]


def _counts_group(params: ProcessParameters) -> list[int]:
    return [
        params.question_count,
        params.max_count,
        params.max_value,
        params.max_vote_overwrites,
    ]


def _check_response_shape(response: Any) -> None:
    if not _is_array(response):
        _malformed(ResponseSegment.RESPONSE, f"expected an array, got {type(response).__name__}")
    if len(response) != RESPONSE_LENGTH:
        _malformed(
            ResponseSegment.RESPONSE,
            f"expected {RESPONSE_LENGTH} elements, got {len(response)}",
        )

    for position, segment, length, item_type in _RESPONSE_LAYOUT:
        value = response[position]
        if length is None:
            if not _is_type(value, item_type):
                _malformed(segment, f"expected {item_type.__name__}, got {type(value).__name__}")
            continue
        if not _is_array(value):
            _malformed(segment, f"expected an array, got {type(value).__name__}")
        if len(value) != length:
            _malformed(segment, f"expected {length} elements, got {len(value)}")
        if not all(_is_type(item, item_type) for item in value):
            _malformed(segment, f"expected {item_type.__name__} elements")


def _malformed(segment: ResponseSegment, reason: str) -> None:
    log.warning("process_response_malformed", segment=segment.value, reason=reason)
    raise MalformedResponseShape(segment.value, reason)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_type(value: Any, item_type: type) -> bool:
    if item_type is int:
        return _is_int(value)
    return isinstance(value, item_type)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
