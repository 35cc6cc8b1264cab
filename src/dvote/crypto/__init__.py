"""Hashing helpers for the entity contracts."""

from dvote.crypto.ens import ens_hash_address

__all__ = ["ens_hash_address"]
