"""
Merkle Tree Implementation
Deterministic sorted-pair Merkle tree construction, proof generation,
and verification.

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = keccak256(address || uint256 amount)
   - Implemented via merkledrop.crypto.encoding.encode_leaf()
2. Leaf order: leaves are sorted ascending by byte value once, at build time
3. Parent hashing: parent = keccak256(min(a, b) + max(a, b))
4. Odd rule: the unpaired last node of a level is promoted unchanged
   (it is NOT duplicated)
5. Empty leaves: rejected with EmptyTreeError
6. Single leaf: root = leaf

These rules match merkletreejs with ``{ sort: true }`` and OpenZeppelin's
MerkleProof.verify, so roots and proofs are interchangeable with them.

Determinism Notes:
- The root is a function of the leaf multiset only; input order is irrelevant
- Intermediate levels are never re-sorted
"""
from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from merkledrop.crypto.hashing import HASH_LENGTH, hash_sorted_pair, require_hash
from merkledrop.schemas.errors import EmptyTreeError, EncodingError, LeafNotFoundError


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""

    def verify(self) -> bool:
        """Verify this proof against its own root."""
        return verify_merkle_proof(self.leaf, self.siblings, self.root)


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Children are ordered by byte value before hashing, so
    merkle_parent(a, b) == merkle_parent(b, a).
    """
    return hash_sorted_pair(left, right)


def _next_level(nodes: Sequence[bytes]) -> list[bytes]:
    parents: list[bytes] = []
    for i in range(0, len(nodes), 2):
        if i + 1 < len(nodes):
            parents.append(merkle_parent(nodes[i], nodes[i + 1]))
        else:
            # Odd node: promote unchanged
            parents.append(nodes[i])
    return parents


class MerkleTree:
    """
    Immutable sorted-pair Merkle tree.

    Keeps every level so proofs can be produced without rehashing.
    ``levels[0]`` holds the sorted leaves and ``levels[-1]`` holds the root.

    Example:
        >>> tree = MerkleTree([leaf_a, leaf_b, leaf_c])
        >>> proof = tree.proof_of(leaf_b)
        >>> verify_merkle_proof(leaf_b, proof, tree.root)
        True
    """

    def __init__(self, leaves: Iterable[bytes]) -> None:
        """
        Build the tree.

        Args:
            leaves: 32-byte leaf hashes, in any order

        Raises:
            EmptyTreeError: If no leaves are given
            EncodingError: If a leaf is not 32 bytes
        """
        checked: list[bytes] = []
        for leaf in leaves:
            if not isinstance(leaf, (bytes, bytearray)) or len(leaf) != HASH_LENGTH:
                raise EncodingError(
                    f"Merkle leaves must be {HASH_LENGTH}-byte hashes",
                    details={"leaf": repr(leaf)[:80]},
                )
            checked.append(bytes(leaf))

        if not checked:
            raise EmptyTreeError()

        levels: list[list[bytes]] = [sorted(checked)]
        while len(levels[-1]) > 1:
            levels.append(_next_level(levels[-1]))

        self._levels: tuple[tuple[bytes, ...], ...] = tuple(tuple(level) for level in levels)

    @property
    def root(self) -> bytes:
        """32-byte Merkle root."""
        return self._levels[-1][0]

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Leaves in tree order (ascending by byte value)."""
        return self._levels[0]

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        """All levels, leaves first, root last."""
        return self._levels

    @property
    def depth(self) -> int:
        """Number of levels including the leaf and root levels."""
        return len(self._levels)

    def __len__(self) -> int:
        return len(self._levels[0])

    def __contains__(self, leaf: object) -> bool:
        if not isinstance(leaf, (bytes, bytearray)):
            return False
        leaves = self._levels[0]
        i = bisect_left(leaves, bytes(leaf))
        return i < len(leaves) and leaves[i] == leaf

    def index_of(self, leaf: bytes) -> int:
        """
        Position of a leaf in the sorted leaf level.

        Raises:
            LeafNotFoundError: If the leaf is not in the tree
        """
        leaves = self._levels[0]
        i = bisect_left(leaves, bytes(leaf))
        if i >= len(leaves) or leaves[i] != leaf:
            raise LeafNotFoundError(
                "Leaf is not part of this tree",
                details={"leaf": "0x" + bytes(leaf).hex()},
            )
        return i

    def proof_of(self, leaf: bytes) -> list[bytes]:
        """
        Sibling hashes from the leaf up to the root.

        Levels where the node was promoted without a sibling contribute
        nothing to the proof.

        Raises:
            LeafNotFoundError: If the leaf is not in the tree
        """
        index = self.index_of(leaf)
        siblings: list[bytes] = []
        for level in self._levels[:-1]:
            sibling_index = index ^ 1
            if sibling_index < len(level):
                siblings.append(level[sibling_index])
            index //= 2
        return siblings

    def prove(self, leaf: bytes) -> MerkleProof:
        """Build a MerkleProof for a leaf in this tree."""
        return MerkleProof(leaf=bytes(leaf), siblings=self.proof_of(leaf), root=self.root)


def build_merkle_tree(leaves: Iterable[bytes]) -> MerkleTree:
    """Build a MerkleTree from leaf hashes (any order)."""
    return MerkleTree(leaves)


def build_merkle_root(leaves: Iterable[bytes]) -> bytes:
    """
    Compute only the Merkle root of a set of leaf hashes.

    Raises:
        EmptyTreeError: If no leaves are given
    """
    return MerkleTree(leaves).root


def verify_merkle_proof(
    leaf: bytes | str,
    proof: Sequence[bytes | str],
    root: bytes | str,
) -> bool:
    """
    Verify a Merkle proof.

    Algorithm:
    1. Start with the leaf hash
    2. For each sibling (bottom-up): hash = merkle_parent(hash, sibling)
    3. Check computed root equals claimed root

    Args:
        leaf: 32-byte leaf (bytes or 0x-hex)
        proof: Sibling hashes, bottom-up (bytes or 0x-hex)
        root: Claimed 32-byte root (bytes or 0x-hex)

    Returns:
        True if the proof is valid, False otherwise

    Raises:
        MalformedProofError: If any input is not a 32-byte hash
    """
    current = require_hash(leaf, "leaf")
    expected_root = require_hash(root, "root")
    siblings = [require_hash(s, f"proof[{i}]") for i, s in enumerate(proof)]

    for sibling in siblings:
        current = merkle_parent(current, sibling)

    return current == expected_root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Depth of a tree with the given number of leaves.

    Depth counts levels from leaves to root inclusive: a single leaf has
    depth 1, two leaves depth 2, three or four leaves depth 3.
    Returns 0 for no leaves.
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "build_merkle_tree",
    "build_merkle_root",
    "verify_merkle_proof",
    "compute_tree_depth",
]
