"""
Snapshot Audit Unit Tests
Tests for merkledrop/ledger/audit.py
"""
import pytest

from merkledrop.ledger.aggregator import AggregationStats, aggregate
from merkledrop.ledger.audit import (
    CompositeAuthority,
    StaticAuthority,
    audit_snapshot,
    check_authority_total,
    check_conservation,
    check_unique_accounts,
)
from merkledrop.schemas.errors import ErrorCodes
from merkledrop.schemas.ledger import RawRecord

from fixtures import ADDR_AA, ADDR_BB, ADDR_CC, make_records


class TestUniqueAccounts:
    """Duplicate detection over raw records."""

    def test_no_duplicates(self, primary_records):
        check = check_unique_accounts(primary_records)
        assert check.ok
        assert check.check_id == "unique_accounts"

    def test_duplicates_listed(self):
        records = make_records([(ADDR_CC, 1), (ADDR_AA, 1), (ADDR_CC, 2), (ADDR_AA, 3), (ADDR_BB, 1)])
        check = check_unique_accounts(records)
        assert not check.ok
        assert check.is_error
        assert check.details["duplicates"] == [ADDR_AA, ADDR_CC]
        assert check.details["code"] == ErrorCodes.DUPLICATE_ACCOUNT


class TestConservationCheck:
    """Tests for check_conservation()."""

    def test_passes_for_aggregate(self, primary_records, secondary_records):
        stats = aggregate(primary_records, secondary_records).stats
        check = check_conservation(stats)
        assert check.ok
        assert check.severity == "info"

    def test_mismatch_is_warning(self):
        stats = AggregationStats(primary_total=10, secondary_total=5, ledger_total=14)
        check = check_conservation(stats)
        assert check.ok
        assert check.is_warning
        assert check.details["code"] == ErrorCodes.CONSERVATION_MISMATCH


class TestAuthority:
    """Authoritative total cross-check."""

    def test_match(self):
        check = check_authority_total(360, StaticAuthority(360))
        assert check.ok
        assert not check.is_warning

    def test_mismatch_is_warning(self):
        check = check_authority_total(360, StaticAuthority(400))
        assert check.ok
        assert check.is_warning
        assert check.details["authority_total"] == "400"

    def test_composite_sums_chains(self):
        authority = CompositeAuthority([
            StaticAuthority(300, name="mainnet"),
            StaticAuthority(60, name="xdai"),
        ])
        assert authority.total_locked() == 360
        assert authority.breakdown() == {"mainnet": 300, "xdai": 60}


class TestAuditSnapshot:
    """Tests for audit_snapshot()."""

    def test_totals(self):
        records = make_records([(ADDR_AA, 25_000), (ADDR_BB, 9_999), (ADDR_CC, 10_000)])
        audit = audit_snapshot(records)
        assert audit.ok
        assert audit.accounts == 3
        assert audit.unique_accounts == 3
        assert audit.total == 44_999
        # Per-account division: 2 + 0 + 1
        assert audit.capped_total == 3
        assert audit.authority_total is None

    def test_custom_cap_divisor(self):
        audit = audit_snapshot(make_records([(ADDR_AA, 250)]), cap_divisor=100)
        assert audit.capped_total == 2

    def test_invalid_cap_divisor(self):
        with pytest.raises(ValueError):
            audit_snapshot([], cap_divisor=0)

    def test_duplicates_fail_audit(self):
        audit = audit_snapshot(make_records([(ADDR_AA, 1), (ADDR_AA, 2)]))
        assert not audit.ok
        assert audit.accounts == 2
        assert audit.unique_accounts == 1
        assert audit.result.get_check("unique_accounts").details["duplicates"] == [ADDR_AA]

    def test_malformed_amount_fails_audit(self):
        records = [RawRecord(address=ADDR_AA, amount="1.5"), RawRecord(address=ADDR_BB, amount="7")]
        audit = audit_snapshot(records)
        assert not audit.ok
        assert audit.total == 7
        assert audit.result.get_check("amounts_valid").details["addresses"] == [ADDR_AA]

    @pytest.mark.parametrize("amount", [1.5, None])
    def test_non_string_amount_fails_audit(self, amount):
        records = [RawRecord(address=ADDR_AA, amount=amount), RawRecord(address=ADDR_BB, amount="7")]
        audit = audit_snapshot(records)
        assert not audit.ok
        assert audit.total == 7
        assert audit.result.get_check("amounts_valid").details["addresses"] == [ADDR_AA]

    def test_spellings_of_one_account_are_duplicates(self):
        records = [RawRecord(address=ADDR_AA, amount="1"), RawRecord(address="AA" * 20, amount="1")]
        audit = audit_snapshot(records)
        assert not audit.ok
        assert audit.unique_accounts == 1

    def test_authority_mismatch_keeps_audit_ok(self):
        audit = audit_snapshot(make_records([(ADDR_AA, 10)]), authority=StaticAuthority(11))
        assert audit.ok
        assert audit.authority_total == 11
        assert audit.result.has_warnings

    def test_conservation_included_with_stats(self, primary_records, secondary_records):
        result = aggregate(primary_records, secondary_records)
        records = make_records((e.address, e.amount) for e in result.ledger)
        audit = audit_snapshot(records, stats=result.stats)
        assert audit.result.get_check("conservation").ok

    def test_to_dict_amounts_are_strings(self):
        audit = audit_snapshot(make_records([(ADDR_AA, 2**200)]), authority=StaticAuthority(2**200))
        data = audit.to_dict()
        assert data["ok"] is True
        assert data["total"] == str(2**200)
        assert data["authority_total"] == str(2**200)
        assert {c["check_id"] for c in data["checks"]} == {
            "unique_accounts", "amounts_valid", "authority_total",
        }
