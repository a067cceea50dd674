"""
Merkle Proofs - Ledger Commitment Wrappers
Class-based interfaces tying the ledger to the Merkle tree.

This module provides:
- LedgerProver: Commit to a ledger and export per-account proofs
- MerkleVerifier: Verify raw proofs and exported proofs

These are convenience wrappers around the functions in merkle_tree.py.
"""
from __future__ import annotations

import logging
from typing import Sequence

from merkledrop.crypto.encoding import encode_balance, encode_leaf
from merkledrop.crypto.hashing import require_hash, to_hex
from merkledrop.ledger.aggregator import Ledger
from merkledrop.merkle.merkle_tree import MerkleTree, verify_merkle_proof
from merkledrop.schemas.errors import EncodingError, LeafNotFoundError, MalformedProofError
from merkledrop.schemas.ledger import AccountBalance, ProofExport


logger = logging.getLogger(__name__)


class LedgerProver:
    """
    Commits to a ledger and produces inclusion proofs by address.

    Example:
        >>> prover = LedgerProver(ledger)
        >>> export = prover.prove("0xbb...")
        >>> MerkleVerifier.verify_export(export)
        True
    """

    def __init__(self, ledger: Ledger) -> None:
        """
        Encode every entry and build the tree.

        Raises:
            EncodingError: If an entry cannot be encoded
            EmptyTreeError: If the ledger is empty
        """
        self.ledger = ledger
        self._leaves: dict[str, bytes] = {
            entry.address: encode_balance(entry) for entry in ledger
        }
        self.tree = MerkleTree(self._leaves.values())
        logger.info("Committed %d accounts, root %s", len(ledger), self.root_hex)

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def root_hex(self) -> str:
        return to_hex(self.tree.root)

    def _entry(self, address: str) -> AccountBalance:
        entry = self.ledger.get(address)
        if entry is None:
            raise LeafNotFoundError(
                f"Account {address} is not in the ledger",
                details={"address": address},
            )
        return entry

    def leaf_for(self, address: str) -> bytes:
        """
        Leaf hash of an account.

        Raises:
            LeafNotFoundError: If the account is not in the ledger
        """
        return self._leaves[self._entry(address).address]

    def prove(self, address: str) -> ProofExport:
        """
        Exportable inclusion proof for an account.

        Raises:
            LeafNotFoundError: If the account is not in the ledger
        """
        entry = self._entry(address)
        leaf = self._leaves[entry.address]
        return ProofExport(
            address=entry.address,
            amount=str(entry.amount),
            leaf=to_hex(leaf),
            proof=[to_hex(sibling) for sibling in self.tree.proof_of(leaf)],
            root=self.root_hex,
        )

    def export_all(self) -> dict[str, ProofExport]:
        """Proofs for every account, in ledger order."""
        return {entry.address: self.prove(entry.address) for entry in self.ledger}


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> MerkleVerifier.verify(leaf, proof, root)
        True
    """

    @staticmethod
    def verify(
        leaf: bytes | str,
        proof: Sequence[bytes | str],
        root: bytes | str,
    ) -> bool:
        """
        Verify a leaf against a root with its sibling hashes.

        Raises:
            MalformedProofError: If any hash is malformed
        """
        return verify_merkle_proof(leaf, proof, root)

    @staticmethod
    def verify_export(export: ProofExport, root: bytes | str | None = None) -> bool:
        """
        Verify an exported proof.

        The leaf is re-derived from the exported address and amount, so a
        proof whose balance was edited does not verify even if the hashes
        are untouched.

        Args:
            export: Proof to check
            root: Trusted root; defaults to the root carried by the export

        Returns:
            True if the claim is included in the root

        Raises:
            MalformedProofError: If the export holds malformed hashes,
                address or amount
        """
        leaf = require_hash(export.leaf, "leaf")
        try:
            expected_leaf = encode_leaf(export.address, export.amount)
        except EncodingError as e:
            raise MalformedProofError(
                f"Exported claim cannot be encoded: {e.message}",
                details=e.details,
            ) from e
        if leaf != expected_leaf:
            return False
        return verify_merkle_proof(leaf, export.proof, export.root if root is None else root)


__all__ = [
    "LedgerProver",
    "MerkleVerifier",
]
