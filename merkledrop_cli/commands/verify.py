"""
CLI Verify Command

Verify exported proofs offline, using only the sorted-pair algorithm.
Accepts a single proof (output of ``prove ADDRESS``) or a claims file
(output of ``prove --all``).

Usage:
    merkledrop verify PROOF_FILE [--root HEX] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from merkledrop.merkle.merkle_proofs import MerkleVerifier
from merkledrop.schemas.errors import MerkledropException
from merkledrop.schemas.ledger import ProofExport


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_exports(data: Any) -> list[ProofExport]:
    """Read proofs from either export layout."""
    if isinstance(data, dict) and "claims" in data:
        return [
            ProofExport(address=address, root=data["root"], **claim)
            for address, claim in data["claims"].items()
        ]
    return [ProofExport.model_validate(data)]


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 if any proof fails)
    """
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        exports = load_exports(json.loads(proof_path.read_text()))
        results = {
            export.address: MerkleVerifier.verify_export(export, args.root)
            for export in exports
        }
    except (json.JSONDecodeError, ValidationError, TypeError, KeyError) as e:
        print(f"Error: malformed proof file: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkledropException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    failed = sorted(address for address, ok in results.items() if not ok)

    if args.json:
        print(json.dumps({
            "proofs": len(results),
            "valid": len(results) - len(failed),
            "failed": failed,
        }, indent=2))
    else:
        for address, ok in results.items():
            print(f"{'✓' if ok else '✗'} {address}")
        print(f"valid: {len(results) - len(failed)}/{len(results)}")

    if failed:
        logger.warning("%d proof(s) failed verification", len(failed))
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
