"""
Ledger Prover Unit Tests
Tests for merkledrop/merkle/merkle_proofs.py
"""
import pytest

from merkledrop.crypto.encoding import encode_leaf
from merkledrop.crypto.hashing import to_hex
from merkledrop.ledger.aggregator import aggregate
from merkledrop.merkle.merkle_proofs import LedgerProver, MerkleVerifier
from merkledrop.merkle.merkle_tree import build_merkle_root, merkle_parent
from merkledrop.schemas.errors import EmptyTreeError, LeafNotFoundError, MalformedProofError
from merkledrop.schemas.ledger import ProofExport

from fixtures import ADDR_AA, ADDR_BB, ADDR_CC, make_address, make_ledger


@pytest.fixture
def prover(primary_records, secondary_records):
    return LedgerProver(aggregate(primary_records, secondary_records).ledger)


class TestLedgerProver:
    """Committing to a ledger."""

    def test_root_over_encoded_entries(self, prover):
        leaves = [encode_leaf(ADDR_BB, 250), encode_leaf(ADDR_AA, 100), encode_leaf(ADDR_CC, 10)]
        assert prover.root == build_merkle_root(leaves)
        assert prover.root_hex == to_hex(prover.root)

    def test_root_independent_of_ledger_order(self):
        a = make_ledger([(ADDR_AA, 1), (ADDR_BB, 2), (ADDR_CC, 3)])
        b = make_ledger([(ADDR_CC, 3), (ADDR_AA, 1), (ADDR_BB, 2)])
        assert LedgerProver(a).root == LedgerProver(b).root

    def test_three_accounts_structure(self, prover):
        x, y, z = sorted(prover.tree.leaves)
        assert prover.root == merkle_parent(merkle_parent(x, y), z)

    def test_empty_ledger_raises(self):
        with pytest.raises(EmptyTreeError):
            LedgerProver(make_ledger([]))

    def test_leaf_for(self, prover):
        assert prover.leaf_for(ADDR_AA) == encode_leaf(ADDR_AA, 100)

    def test_prove_export_fields(self, prover):
        export = prover.prove(ADDR_BB)
        assert export.address == ADDR_BB
        assert export.amount == "250"
        assert export.leaf == to_hex(encode_leaf(ADDR_BB, 250))
        assert export.root == prover.root_hex
        assert all(h.startswith("0x") and len(h) == 66 for h in export.proof)

    def test_prove_mixed_case_address(self, prover):
        export = prover.prove("0x" + "Bb" * 20)
        assert export.address == ADDR_BB

    def test_prove_unprefixed_address(self, prover):
        assert prover.prove("bb" * 20) == prover.prove(ADDR_BB)

    def test_invalid_address_not_found(self, prover):
        with pytest.raises(LeafNotFoundError):
            prover.prove("not-an-address")

    def test_unknown_address_raises(self, prover):
        with pytest.raises(LeafNotFoundError):
            prover.prove(make_address(999))

    def test_export_all_in_ledger_order(self, prover):
        exports = prover.export_all()
        assert list(exports) == [ADDR_BB, ADDR_AA, ADDR_CC]
        assert all(MerkleVerifier.verify_export(e) for e in exports.values())

    def test_large_ledger_every_proof_verifies(self):
        ledger = make_ledger([(make_address(i), i * 10**18) for i in range(1, 42)])
        prover = LedgerProver(ledger)
        for entry in ledger:
            assert MerkleVerifier.verify_export(prover.prove(entry.address), prover.root)


class TestMerkleVerifier:
    """Verification of raw and exported proofs."""

    def test_verify_raw(self, prover):
        export = prover.prove(ADDR_CC)
        assert MerkleVerifier.verify(export.leaf, export.proof, export.root)

    def test_tampered_amount_fails(self, prover):
        export = prover.prove(ADDR_AA)
        forged = export.model_copy(update={"amount": "1000"})
        assert not MerkleVerifier.verify_export(forged)

    def test_tampered_address_fails(self, prover):
        export = prover.prove(ADDR_AA)
        forged = export.model_copy(update={"address": make_address(7)})
        assert not MerkleVerifier.verify_export(forged)

    def test_wrong_root_fails(self, prover):
        export = prover.prove(ADDR_AA)
        other = LedgerProver(make_ledger([(ADDR_AA, 100)]))
        assert not MerkleVerifier.verify_export(export, other.root)

    def test_trusted_root_overrides_export(self, prover):
        export = prover.prove(ADDR_AA)
        forged = export.model_copy(update={"root": "0x" + "00" * 32})
        assert MerkleVerifier.verify_export(forged, prover.root)

    def test_malformed_amount_raises(self, prover):
        export = prover.prove(ADDR_AA)
        forged = export.model_copy(update={"amount": "-5"})
        with pytest.raises(MalformedProofError):
            MerkleVerifier.verify_export(forged)

    def test_malformed_sibling_raises(self, prover):
        export = prover.prove(ADDR_AA)
        forged = ProofExport(
            address=export.address,
            amount=export.amount,
            leaf=export.leaf,
            proof=["0x1234"],
            root=export.root,
        )
        with pytest.raises(MalformedProofError):
            MerkleVerifier.verify_export(forged)
