"""Per-call transaction overrides appended to contract call arguments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class TransactionOptions:
    """Optional overrides for a contract transaction.

    Unset fields are left for the node or wallet to fill in.
    """
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None  # wei
    nonce: Optional[int] = None
    value: Optional[int] = None  # wei
    chain_id: Optional[int] = None

    def as_tx_params(self) -> dict[str, int]:
        """Return the overrides as a web3 transaction dict."""
        params = {
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "nonce": self.nonce,
            "value": self.value,
            "chainId": self.chain_id,
        }
        return {key: val for key, val in params.items() if val is not None}


def call_options(options: TransactionOptions | Mapping[str, Any]) -> Any:
    """Normalise call options into the trailing argument of a contract call.

    TransactionOptions become a web3 transaction dict; mappings are passed
    through as given.
    """
    if isinstance(options, TransactionOptions):
        return options.as_tx_params()
    return options
