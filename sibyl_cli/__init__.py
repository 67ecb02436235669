"""
Sibyl CLI

Command-line interface for a Sibyl oracle node.

Usage:
    python -m sibyl_cli run
    python -m sibyl_cli serve --port 8000
    python -m sibyl_cli create "Condition: ...\nX post: ..." --end-time 2026-01-01T00:00:00Z
    python -m sibyl_cli list --status pending
    python -m sibyl_cli execute --id pred_...
    python -m sibyl_cli validate <proof_cid>
"""

__version__ = "0.1.0"
