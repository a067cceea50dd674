"""
merkledrop CLI

Command-line interface for building and proving distribution snapshots.

Usage:
    python -m merkledrop_cli snapshot --primary mainnet.json --secondary xdai.json
    python -m merkledrop_cli audit snapshot.json --authority mainnet=123
    python -m merkledrop_cli root snapshot.json
    python -m merkledrop_cli prove 0xabc... snapshot.json --out proof.json
    python -m merkledrop_cli verify proof.json
"""

__version__ = "0.1.0"
