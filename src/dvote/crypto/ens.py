"""Entity Resolver node hashing.

The Entity Resolver stores entity text records under the keccak256 hash
of the entity's address bytes, not under an ENS namehash.
"""

from __future__ import annotations

from web3 import Web3


def ens_hash_address(address: str) -> str:
    """Hash an entity address into its Entity Resolver node.

    Args:
        address: 0x-prefixed hex address (checksummed or not).

    Returns:
        The 0x-prefixed keccak256 hex digest of the address bytes.
    """
    if not Web3.is_address(address):
        raise ValueError(f"Invalid entity address: {address!r}")
    return Web3.to_hex(Web3.keccak(hexstr=address))
