"""dvote CLI: validate, encode and decode voting process parameters.

Usage:
    python -m dvote.cli validate --input params.json
    python -m dvote.cli encode-std --input params.json
    python -m dvote.cli encode-evm --input params.json --gas-limit 500000
    python -m dvote.cli decode --input response.json

Input is JSON read from --input (default: stdin). Output is JSON on stdout.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any, Optional

from dvote.config import Settings
from dvote.engine.codec import from_response_tuple, to_evm_tuple, to_std_tuple
from dvote.engine.validator import from_params
from dvote.errors import ProcessParametersError
from dvote.logging_config import configure_logging
from dvote.models.flags import FlagValue
from dvote.models.options import TransactionOptions
from dvote.models.process import ProcessParameters


def _read_json(source: Optional[Path]) -> Any:
    if source is None or str(source) == "-":
        return json.load(sys.stdin)
    with source.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _params_json(params: ProcessParameters) -> dict[str, Any]:
    """Flatten parameters into plain JSON values."""
    result: dict[str, Any] = {}
    for f in dataclasses.fields(params):
        value = getattr(params, f.name)
        result[f.name] = value.value if isinstance(value, FlagValue) else value
    return result


def _options(args: argparse.Namespace) -> Optional[TransactionOptions]:
    options = TransactionOptions(
        gas_limit=args.gas_limit,
        gas_price=args.gas_price,
        nonce=args.nonce,
        value=args.value,
        chain_id=args.chain_id,
    )
    return options if options.as_tx_params() else None


def cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    params = from_params(_read_json(args.input))
    print(json.dumps(_params_json(params), indent=2))
    return 0


def cmd_encode_std(args: argparse.Namespace, settings: Settings) -> int:
    params = from_params(_read_json(args.input))
    encoded = to_std_tuple(
        params,
        _options(args),
        default_census_uri=settings.default_census_uri,
    )
    print(json.dumps(encoded))
    return 0


def cmd_encode_evm(args: argparse.Namespace, settings: Settings) -> int:
    params = from_params(_read_json(args.input))
    print(json.dumps(to_evm_tuple(params, _options(args))))
    return 0


def cmd_decode(args: argparse.Namespace, settings: Settings) -> int:
    params = from_response_tuple(_read_json(args.input))
    print(json.dumps(_params_json(params), indent=2))
    return 0


def _add_input(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input", type=Path, default=None,
        help="JSON file to read (default: stdin)",
    )


def _add_tx_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--gas-limit", type=int, help="Gas limit override")
    parser.add_argument("--gas-price", type=int, help="Gas price override (wei)")
    parser.add_argument("--nonce", type=int, help="Nonce override")
    parser.add_argument("--value", type=int, help="Value to send (wei)")
    parser.add_argument("--chain-id", type=int, help="Chain ID override")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dvote",
        description="Voting process parameters: validate, encode, decode",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file with DVOTE_* settings",
    )
    sub = parser.add_subparsers(dest="command")

    # validate
    p_val = sub.add_parser("validate", help="Validate creation parameters")
    _add_input(p_val)

    # encode-std
    p_std = sub.add_parser("encode-std", help="Encode newProcessStd arguments")
    _add_input(p_std)
    _add_tx_options(p_std)

    # encode-evm
    p_evm = sub.add_parser("encode-evm", help="Encode newProcessEvm arguments")
    _add_input(p_evm)
    _add_tx_options(p_evm)

    # decode
    p_dec = sub.add_parser("decode", help="Decode a get() response")
    _add_input(p_dec)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = Settings.from_env(args.env_file)
    configure_logging(settings)

    commands = {
        "validate": cmd_validate,
        "encode-std": cmd_encode_std,
        "encode-evm": cmd_encode_evm,
        "decode": cmd_decode,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    try:
        return handler(args, settings)
    except (ProcessParametersError, TypeError) as exc:
        print(f"Failed: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"Failed: invalid JSON input ({exc})", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Failed: cannot read input ({exc})", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
