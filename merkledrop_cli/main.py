"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkledrop_cli snapshot [--primary FILE] [--secondary FILE] [--out PATH] [--json]
    python -m merkledrop_cli audit [SNAPSHOT] [--authority NAME=VALUE ...] [--cap-divisor N] [--json]
    python -m merkledrop_cli root [SNAPSHOT] [--json]
    python -m merkledrop_cli prove ADDRESS [SNAPSHOT] [--out PATH]
    python -m merkledrop_cli prove --all [SNAPSHOT] --out PATH
    python -m merkledrop_cli verify PROOF_FILE [--root HEX] [--json]
    python -m merkledrop_cli config --init

Environment Variables:
    MERKLEDROP_SNAPSHOT_PATH    Persisted ledger path (default: snapshot.json)
    MERKLEDROP_PRIMARY_PATH     Primary source records file
    MERKLEDROP_SECONDARY_PATH   Secondary source records file
    MERKLEDROP_PAGE_SIZE        Records per source page (default: 1000)
    MERKLEDROP_CAP_DIVISOR      Divisor for the capped total (default: 10000)
    MERKLEDROP_LOG_LEVEL        Log level (default: INFO)
    MERKLEDROP_LOG_FILE         Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkledrop_cli import __version__
from merkledrop_cli.commands import audit, prove, root, snapshot, verify
from merkledrop_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkledrop",
        description="Build distribution snapshots, commit to them with a Merkle root, and export proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./merkledrop.yaml or ~/.config/merkledrop/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- snapshot command ---
    snapshot_parser = subparsers.add_parser(
        "snapshot",
        help="Merge both sources into a snapshot",
        description="Collect records from the primary and secondary sources, merge them and write the ledger.",
    )
    snapshot_parser.add_argument(
        "--primary",
        type=str,
        default=None,
        help="JSON records of the primary source (default: from config)",
    )
    snapshot_parser.add_argument(
        "--secondary",
        type=str,
        default=None,
        help="JSON records of the secondary source (default: from config)",
    )
    snapshot_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the snapshot (default: snapshot.json)",
    )
    snapshot_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    snapshot_parser.set_defaults(func=snapshot.snapshot_cmd)

    # --- audit command ---
    audit_parser = subparsers.add_parser(
        "audit",
        help="Audit a snapshot",
        description="Check for duplicates and malformed amounts, and cross-check totals.",
    )
    audit_parser.add_argument(
        "snapshot",
        type=str,
        nargs="?",
        default=None,
        help="Snapshot path (default: from config)",
    )
    audit_parser.add_argument(
        "--authority",
        type=str,
        action="append",
        default=None,
        help="Authoritative locked total as NAME=VALUE (repeatable, summed)",
    )
    audit_parser.add_argument(
        "--cap-divisor",
        type=int,
        default=None,
        help="Per-account divisor for the capped total (default: 10000)",
    )
    audit_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    audit_parser.set_defaults(func=audit.audit_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the Merkle root of a snapshot",
        description="Compute the root and self-check a sample proof.",
    )
    root_parser.add_argument(
        "snapshot",
        type=str,
        nargs="?",
        default=None,
        help="Snapshot path (default: from config)",
    )
    root_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Export inclusion proofs",
        description="Export the proof of one account, or of every account with --all.",
    )
    prove_parser.add_argument(
        "address",
        type=str,
        nargs="?",
        default=None,
        help="Account to prove",
    )
    prove_parser.add_argument(
        "snapshot",
        type=str,
        nargs="?",
        default=None,
        help="Snapshot path (default: from config)",
    )
    prove_parser.add_argument(
        "--all",
        action="store_true",
        default=False,
        help="Export proofs for every account",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write proofs to this file instead of stdout",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify exported proofs offline",
        description="Re-derive each leaf and fold its proof with the sorted-pair rule.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Proof file written by the prove command",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Trusted 0x root (default: the root stored in the proof file)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkledrop.yaml",
        help="Path for config file (default: merkledrop.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLEDROP_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkledrop config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
