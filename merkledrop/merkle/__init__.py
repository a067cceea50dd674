"""
Merkle Tree and Commitments
Deterministic sorted-pair Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: Immutable tree keeping every level for proof queries
- MerkleProof: Dataclass representing an inclusion proof
- build_merkle_root: Compute root from leaf hashes
- verify_merkle_proof: Verify a proof against a claimed root
- LedgerProver / MerkleVerifier: ledger-level wrappers

Canonical Commitment Rules:
1. Leaf hashing: keccak256(address || uint256 amount)
2. Leaves sorted ascending once at build time
3. Parent hashing: keccak256(min(a, b) + max(a, b))
4. Odd node: promoted unchanged to the next level
5. Empty tree: EmptyTreeError
6. Single leaf: root = leaf

Usage:
    from merkledrop.merkle import MerkleTree, verify_merkle_proof
    from merkledrop.crypto import encode_leaf

    leaves = [encode_leaf(address, amount) for address, amount in balances]
    tree = MerkleTree(leaves)
    proof = tree.proof_of(leaves[2])
    assert verify_merkle_proof(leaves[2], proof, tree.root)
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    merkle_parent,
    build_merkle_tree,
    build_merkle_root,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    LedgerProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "merkle_parent",
    "build_merkle_tree",
    "build_merkle_root",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "LedgerProver",
    "MerkleVerifier",
]
