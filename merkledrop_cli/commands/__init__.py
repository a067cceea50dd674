"""
CLI command modules.
"""

from merkledrop_cli.commands import snapshot, audit, root, prove, verify

__all__ = ["snapshot", "audit", "root", "prove", "verify"]
