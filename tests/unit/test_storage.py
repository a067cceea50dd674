"""
Ledger Storage Unit Tests
Tests for merkledrop/ledger/storage.py
"""
import json

import pytest

from merkledrop.ledger.aggregator import aggregate
from merkledrop.ledger.storage import load_ledger, load_records, save_ledger
from merkledrop.schemas.errors import DuplicateAccountError, LedgerStorageError, MalformedAmountError

from fixtures import ADDR_AA, ADDR_BB, make_ledger


class TestSaveLedger:
    """Tests for the persisted format."""

    def test_format(self, tmp_path, primary_records, secondary_records):
        ledger = aggregate(primary_records, secondary_records).ledger
        path = save_ledger(ledger, tmp_path / "snapshot.json")

        data = json.loads(path.read_text())
        assert data[0] == {"address": ADDR_BB, "amount": "250"}
        assert all(isinstance(item["amount"], str) for item in data)

    def test_creates_parent_dirs(self, tmp_path):
        path = save_ledger(make_ledger([(ADDR_AA, 1)]), tmp_path / "out" / "snap.json")
        assert path.exists()


class TestRoundTrip:
    """Persisting and loading is lossless."""

    def test_round_trip_preserves_order_and_amounts(self, tmp_path):
        big = 2**256 - 1
        ledger = make_ledger([(ADDR_BB, big), (ADDR_AA, 0)])
        path = save_ledger(ledger, tmp_path / "snapshot.json")

        loaded = load_ledger(path)

        assert loaded == ledger
        assert loaded.get(ADDR_BB).amount == big


class TestLoadErrors:
    """Malformed persisted ledgers are surfaced."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(LedgerStorageError, match="not found"):
            load_ledger(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("{not json")
        with pytest.raises(LedgerStorageError):
            load_records(path)

    def test_not_array(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("{}")
        with pytest.raises(LedgerStorageError, match="JSON array"):
            load_records(path)

    def test_duplicates_raise_on_load_ledger(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps([
            {"address": ADDR_AA, "amount": "1"},
            {"address": ADDR_AA, "amount": "2"},
        ]))
        assert len(load_records(path)) == 2
        with pytest.raises(DuplicateAccountError):
            load_ledger(path)

    def test_malformed_amount(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps([{"address": ADDR_AA, "amount": "1.0"}]))
        with pytest.raises(MalformedAmountError):
            load_ledger(path)

    @pytest.mark.parametrize("amount", [1.5, None])
    def test_non_string_amount(self, tmp_path, amount):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps([{"address": ADDR_AA, "amount": amount}]))
        assert load_records(path)[0].amount == amount
        with pytest.raises(MalformedAmountError):
            load_ledger(path)

    def test_unprefixed_address_loads_canonical(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps([{"address": "aa" * 20, "amount": "3"}]))
        assert load_ledger(path).get(ADDR_AA).amount == 3
