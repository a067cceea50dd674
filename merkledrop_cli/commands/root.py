"""
CLI Root Command

Compute the Merkle root of a persisted snapshot and self-check a sample
proof for the largest entry.

Usage:
    merkledrop root [SNAPSHOT] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from merkledrop.ledger.storage import load_ledger
from merkledrop.merkle.merkle_proofs import LedgerProver, MerkleVerifier
from merkledrop.schemas.errors import MerkledropException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Returns:
        Exit code (2 if the sample proof does not verify)
    """
    path = args.snapshot or args.cli_config.snapshot.path

    try:
        ledger = load_ledger(path)
        prover = LedgerProver(ledger)
        sample = prover.prove(ledger.entries[0].address)
        sample_ok = MerkleVerifier.verify_export(sample, prover.root)
    except MerkledropException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({
            "snapshot": str(path),
            "accounts": len(ledger),
            "total": str(ledger.total),
            "root": prover.root_hex,
            "depth": prover.tree.depth,
            "sample_proof": sample.model_dump(),
            "sample_valid": sample_ok,
        }, indent=2))
    else:
        print(f"Merkle Root: {prover.root_hex}")
        print("-" * 79)
        print(f"Sample proof of inclusion for address \"{sample.address}\": {json.dumps(sample.proof)}")
        print(f"Is proof valid?: {'Yes' if sample_ok else 'No'}")

    if not sample_ok:
        logger.error("Sample proof failed to verify against root %s", prover.root_hex)
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
