"""
CLI Prove Command

Export the inclusion proof of one account, or of every account.

Usage:
    merkledrop prove ADDRESS [SNAPSHOT] [--out FILE]
    merkledrop prove --all [SNAPSHOT] --out proofs.json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from merkledrop.ledger.storage import load_ledger
from merkledrop.merkle.merkle_proofs import LedgerProver
from merkledrop.schemas.errors import MerkledropException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Returns:
        Exit code
    """
    if not args.all and not args.address:
        print("Error: give an ADDRESS or --all", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    snapshot_arg = args.snapshot
    if args.all and args.address and not snapshot_arg:
        # "prove --all SNAPSHOT": the only positional is the snapshot
        snapshot_arg = args.address
    path = snapshot_arg or args.cli_config.snapshot.path

    try:
        prover = LedgerProver(load_ledger(path))
        if args.all:
            payload: Any = {
                "root": prover.root_hex,
                "claims": {
                    address: export.model_dump(exclude={"root", "address"})
                    for address, export in prover.export_all().items()
                },
            }
        else:
            payload = prover.prove(args.address).model_dump()
    except MerkledropException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    text = json.dumps(payload, indent=2)
    if args.out:
        Path(args.out).write_text(text + "\n")
        logger.info("Wrote proof(s) to %s", args.out)
    else:
        print(text)

    return EXIT_SUCCESS
