"""
merkledrop

Snapshot aggregation and Merkle commitment engine for token distribution
claims: merge balances from two sources into one ledger, commit to it with a
sorted-pair keccak Merkle root, and export per-account inclusion proofs.
"""

__version__ = "0.1.0"
