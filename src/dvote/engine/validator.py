"""Process parameter validation: caller intent to ProcessParameters.

Checks run in a fixed order. Unconditional field checks come first, then
the flag values are built, and only then the checks that depend on the
census origin. The first violation is raised; nothing is partially built.

Census rules:
- Off-chain censuses (tree, weighted tree, CA) need a census URI.
- EVM token censuses must auto-start, must not be interruptible, must not
  have a dynamic census, and need a non-negative source block height.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import structlog

from dvote.errors import (
    InconsistentCensusConfiguration,
    MissingRequiredField,
    OutOfRangeField,
)
from dvote.models.flags import (
    ProcessCensusOrigin,
    ProcessEnvelopeType,
    ProcessMode,
    FlagValue,
)
from dvote.models.process import ZERO_ADDRESS, ProcessParameters

log = structlog.get_logger(__name__)

# (field, low, high) in check order
UINT8_LIMITS: tuple[tuple[str, int, int], ...] = (
    ("question_count", 1, 255),
    ("max_count", 1, 255),
    ("max_value", 1, 255),
    ("max_vote_overwrites", 0, 255),
)
COST_LIMITS: tuple[tuple[str, int, int], ...] = (
    ("max_total_cost", 0, 65355),
    ("cost_exponent", 0, 65355),
)

# Contract-side (camelCase) names accepted as input keys
_ALIASES: dict[str, str] = {
    "envelopeType": "envelope_type",
    "censusOrigin": "census_origin",
    "tokenAddress": "token_address",
    "censusRoot": "census_root",
    "censusUri": "census_uri",
    "startBlock": "start_block",
    "blockCount": "block_count",
    "questionCount": "question_count",
    "maxCount": "max_count",
    "maxValue": "max_value",
    "maxVoteOverwrites": "max_vote_overwrites",
    "maxTotalCost": "max_total_cost",
    "costExponent": "cost_exponent",
    "sourceBlockHeight": "source_block_height",
    "paramsSignature": "params_signature",
}


def normalize_keys(params: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase contract field names onto snake_case names."""
    return {_ALIASES.get(key, key): value for key, value in params.items()}


def from_params(params: Mapping[str, Any]) -> ProcessParameters:
    """Build validated ProcessParameters from a loosely typed mapping.

    ``mode``, ``envelope_type`` and ``census_origin`` may be raw integers
    or flag instances. ``token_address`` becomes the entity address of EVM
    processes and defaults to the zero address.

    Raises:
        MissingRequiredField, OutOfRangeField, InvalidFlagValue,
        InconsistentCensusConfiguration.
    """
    if not isinstance(params, Mapping):
        raise TypeError(f"process parameters must be a mapping, got {type(params).__name__}")
    raw = normalize_keys(params)
    try:
        return _build(raw)
    except ValueError as exc:
        log.warning("process_params_rejected", error=str(exc))
        raise


def _build(raw: dict[str, Any]) -> ProcessParameters:
    # 1. References
    for name in ("metadata", "census_root"):
        if not raw.get(name):
            raise MissingRequiredField(name)

    # 2-4. Numeric ranges
    for name, low, high in UINT8_LIMITS + COST_LIMITS:
        _check_range(raw, name, low, high)

    # 5. Signature
    if not raw.get("params_signature"):
        raise MissingRequiredField("params_signature")

    # 6. Flags
    mode = _flag(ProcessMode, raw.get("mode", 0))
    envelope_type = _flag(ProcessEnvelopeType, raw.get("envelope_type", 0))
    census_origin = _flag(
        ProcessCensusOrigin,
        raw.get("census_origin", ProcessCensusOrigin.OFF_CHAIN_TREE),
    )

    # 7. Census origin rules
    source_block_height = raw.get("source_block_height")
    if census_origin.is_off_chain_family:
        if not raw.get("census_uri"):
            raise InconsistentCensusConfiguration(
                "census_uri", "an off-chain census requires a census URI"
            )
    else:
        if not mode.is_auto_start:
            raise InconsistentCensusConfiguration(
                "mode", "auto start is mandatory on EVM processes"
            )
        if mode.is_interruptible:
            raise InconsistentCensusConfiguration(
                "mode", "EVM processes cannot be interruptible"
            )
        if mode.has_dynamic_census:
            raise InconsistentCensusConfiguration(
                "mode", "EVM processes cannot have a dynamic census"
            )
        if not _is_int(source_block_height) or source_block_height < 0:
            raise InconsistentCensusConfiguration(
                "source_block_height",
                "an EVM census requires a non-negative source block height",
            )

    # 8. Remaining fields
    defaults = ProcessParameters()
    result = ProcessParameters(
        mode=mode,
        envelope_type=envelope_type,
        census_origin=census_origin,
        entity_address=raw.get("token_address") or ZERO_ADDRESS,
        metadata=raw["metadata"],
        census_root=raw["census_root"],
        census_uri=raw.get("census_uri") or "",
        start_block=_optional_int(raw, "start_block", defaults.start_block),
        block_count=_optional_int(raw, "block_count", defaults.block_count),
        question_count=raw["question_count"],
        max_count=raw["max_count"],
        max_value=raw["max_value"],
        max_vote_overwrites=raw["max_vote_overwrites"],
        max_total_cost=raw["max_total_cost"],
        cost_exponent=raw["cost_exponent"],
        source_block_height=source_block_height,
        params_signature=raw["params_signature"],
    )
    log.debug(
        "process_params_validated",
        census_origin=census_origin.value,
        mode=mode.value,
        envelope_type=envelope_type.value,
    )
    return result


def _check_range(raw: dict[str, Any], name: str, low: int, high: int) -> None:
    if raw.get(name) is None:
        raise MissingRequiredField(name)
    value = raw[name]
    if not _is_int(value) or not low <= value <= high:
        raise OutOfRangeField(name, value, low, high)


def _optional_int(raw: dict[str, Any], name: str, default: int) -> int:
    value = raw.get(name)
    return default if value is None else value


def _flag(kind: type[FlagValue], value: Any) -> Any:
    if isinstance(value, kind):
        return value
    return kind(value)


def _is_int(value: Optional[Any]) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
