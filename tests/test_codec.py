"""Tests for the positional tuple codec: std/evm encoding and response decoding."""

from typing import Any

import pytest

from dvote.engine.codec import (
    ResponseSegment,
    from_response_tuple,
    to_evm_tuple,
    to_response_tuple,
    to_std_tuple,
)
from dvote.engine.validator import from_params
from dvote.errors import InvalidFlagValue, MalformedResponseShape
from dvote.models.flags import ProcessMode, ProcessStatus
from dvote.models.options import TransactionOptions
from dvote.models.process import ProcessParameters

ENTITY = "0x1111111111111111111111111111111111111111"
OWNER = "0x2222222222222222222222222222222222222222"
TOKEN = "0x3333333333333333333333333333333333333333"


def _off_chain() -> ProcessParameters:
    return from_params({
        "mode": ProcessMode.make(auto_start=True, interruptible=True),
        "envelope_type": 1,
        "census_origin": 2,
        "metadata": "ipfs://meta",
        "census_root": "0xroot",
        "census_uri": "ipfs://census",
        "start_block": 50,
        "block_count": 500,
        "question_count": 3,
        "max_count": 3,
        "max_value": 5,
        "max_vote_overwrites": 2,
        "max_total_cost": 10,
        "cost_exponent": 10000,
        "params_signature": "0xsig",
    })


def _evm() -> ProcessParameters:
    return from_params({
        "mode": ProcessMode.make(auto_start=True),
        "envelope_type": 0,
        "census_origin": 11,
        "token_address": TOKEN,
        "metadata": "ipfs://meta",
        "census_root": "0xroot",
        "start_block": 7,
        "block_count": 70,
        "question_count": 1,
        "max_count": 1,
        "max_value": 2,
        "max_vote_overwrites": 0,
        "max_total_cost": 0,
        "cost_exponent": 0,
        "source_block_height": 99,
        "params_signature": "0xsig",
    })


def _response(**overrides: Any) -> list[Any]:
    segments = {
        "flags": [3, 1, 2],
        "entity_owner": [ENTITY, OWNER],
        "refs": ["ipfs://meta", "0xroot", "ipfs://census"],
        "blocks": [50, 500],
        "status": 0,
        "counts": [0, 3, 3, 5, 2],
        "costs": [10, 10000],
        "height": 0,
    }
    segments.update(overrides)
    return list(segments.values())


class TestStdEncoding:
    def test_layout(self) -> None:
        assert to_std_tuple(_off_chain()) == [
            [3, 1, 2],
            ["ipfs://meta", "0xroot", "ipfs://census"],
            [50, 500],
            [3, 3, 5, 2],
            [10, 10000],
            "0xsig",
        ]

    def test_empty_census_uri_falls_back(self) -> None:
        params = ProcessParameters(metadata="m", census_root="r")
        assert to_std_tuple(params)[1] == ["m", "r", "ipfs://"]
        assert to_std_tuple(params, default_census_uri="ipfs://other")[1][2] == "ipfs://other"

    def test_options_appended(self) -> None:
        encoded = to_std_tuple(_off_chain(), TransactionOptions(gas_limit=500000))
        assert len(encoded) == 7
        assert encoded[-1] == {"gas": 500000}

    def test_mapping_options_passed_through(self) -> None:
        encoded = to_std_tuple(_off_chain(), {"from": ENTITY})
        assert encoded[-1] == {"from": ENTITY}


class TestEvmEncoding:
    def test_layout(self) -> None:
        assert to_evm_tuple(_evm()) == [
            [1, 0, 11],
            ["ipfs://meta", "0xroot"],
            [7, 70],
            [1, 1, 2, 0],
            [0, 0],
            TOKEN,
            99,
            "0xsig",
        ]

    def test_options_appended(self) -> None:
        encoded = to_evm_tuple(_evm(), TransactionOptions(nonce=4, chain_id=5))
        assert len(encoded) == 9
        assert encoded[-1] == {"nonce": 4, "chainId": 5}


class TestDecoding:
    def test_decodes_all_fields(self) -> None:
        params = from_response_tuple(_response())
        assert params.mode.value == 3
        assert params.envelope_type.value == 1
        assert params.census_origin.is_off_chain_weighted
        assert params.entity_address == ENTITY
        assert params.owner == OWNER
        assert params.census_uri == "ipfs://census"
        assert (params.start_block, params.block_count) == (50, 500)
        assert params.status.is_ready
        assert params.question_index == 0
        assert params.question_count == 3
        assert params.max_vote_overwrites == 2
        assert (params.max_total_cost, params.cost_exponent) == (10, 10000)
        assert params.source_block_height == 0
        assert params.params_signature is None

    def test_tuples_accepted(self) -> None:
        response = tuple(
            tuple(item) if isinstance(item, list) else item for item in _response()
        )
        assert from_response_tuple(response).max_value == 5

    def test_null_source_block_height(self) -> None:
        assert from_response_tuple(_response(height=None)).source_block_height is None

    def test_std_round_trip(self) -> None:
        """Encoding then reshaping into a response reproduces the parameters."""
        original = _off_chain()
        std = to_std_tuple(original)
        response = [
            std[0],
            [original.entity_address, ENTITY],
            std[1],
            std[2],
            ProcessStatus.READY,
            [0] + std[3],
            std[4],
            None,
        ]
        decoded = from_response_tuple(response)
        assert decoded.mode == original.mode
        assert decoded.envelope_type == original.envelope_type
        assert decoded.census_origin == original.census_origin
        assert decoded.metadata == original.metadata
        assert decoded.census_root == original.census_root
        assert decoded.census_uri == original.census_uri
        assert decoded.start_block == original.start_block
        assert decoded.block_count == original.block_count
        assert decoded.question_count == original.question_count
        assert decoded.max_count == original.max_count
        assert decoded.max_value == original.max_value
        assert decoded.max_vote_overwrites == original.max_vote_overwrites
        assert decoded.max_total_cost == original.max_total_cost
        assert decoded.cost_exponent == original.cost_exponent
        assert decoded.params_signature is None

    def test_response_fixture_round_trip(self) -> None:
        original = _evm()
        decoded = from_response_tuple(to_response_tuple(original))
        assert decoded.owner == TOKEN
        assert decoded.source_block_height == 99
        assert decoded.params_signature is None
        assert decoded == ProcessParameters(
            **{**original.__dict__, "owner": TOKEN, "params_signature": None}
        )

    def test_response_fixture_status_override(self) -> None:
        response = to_response_tuple(_evm(), ProcessStatus(ProcessStatus.ENDED))
        assert response[4] == ProcessStatus.ENDED


class TestMalformedResponse:
    def test_not_an_array(self) -> None:
        with pytest.raises(MalformedResponseShape) as exc_info:
            from_response_tuple("nope")  # type: ignore[arg-type]
        assert exc_info.value.segment == ResponseSegment.RESPONSE

    @pytest.mark.parametrize("length", [0, 7, 9])
    def test_wrong_outer_length(self, length: int) -> None:
        response = (_response() + [None])[:length]
        with pytest.raises(MalformedResponseShape) as exc_info:
            from_response_tuple(response)
        assert exc_info.value.segment == "response"

    @pytest.mark.parametrize("key,value,segment", [
        ("flags", [3, 1], ResponseSegment.MODE_ENVELOPE_TYPE_CENSUS_ORIGIN),
        ("flags", [3, 1, "2"], ResponseSegment.MODE_ENVELOPE_TYPE_CENSUS_ORIGIN),
        ("entity_owner", ENTITY, ResponseSegment.ENTITY_OWNER),
        ("entity_owner", [ENTITY], ResponseSegment.ENTITY_OWNER),
        ("refs", ["ipfs://meta", "0xroot"], ResponseSegment.METADATA_CENSUS_ROOT_CENSUS_URI),
        ("refs", ["ipfs://meta", "0xroot", 3], ResponseSegment.METADATA_CENSUS_ROOT_CENSUS_URI),
        ("blocks", [50], ResponseSegment.START_BLOCK_BLOCK_COUNT),
        ("status", "0", ResponseSegment.STATUS),
        ("status", [0], ResponseSegment.STATUS),
        ("counts", [3, 3, 5, 2],
         ResponseSegment.QUESTION_INDEX_QUESTION_COUNT_MAX_COUNT_MAX_VALUE_MAX_VOTE_OVERWRITES),
        ("costs", [10, 10000, 1], ResponseSegment.MAX_TOTAL_COST_COST_EXPONENT),
        ("costs", [10, True], ResponseSegment.MAX_TOTAL_COST_COST_EXPONENT),
    ])
    def test_bad_segment_named(self, key: str, value: Any, segment: ResponseSegment) -> None:
        with pytest.raises(MalformedResponseShape) as exc_info:
            from_response_tuple(_response(**{key: value}))
        assert exc_info.value.segment == segment

    def test_first_bad_segment_reported(self) -> None:
        with pytest.raises(MalformedResponseShape) as exc_info:
            from_response_tuple(_response(blocks=[1], costs=[1]))
        assert exc_info.value.segment == ResponseSegment.START_BLOCK_BLOCK_COUNT

    def test_illegal_flag_after_shape(self) -> None:
        with pytest.raises(InvalidFlagValue):
            from_response_tuple(_response(flags=[16, 0, 1]))

    def test_illegal_status(self) -> None:
        with pytest.raises(InvalidFlagValue):
            from_response_tuple(_response(status=5))

    def test_shape_checked_before_flags(self) -> None:
        with pytest.raises(MalformedResponseShape):
            from_response_tuple(_response(flags=[16, 0, 1], status="x"))
