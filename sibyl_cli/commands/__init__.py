"""
CLI command modules.
"""

from sibyl_cli.commands import execute, node, predictions, validate

__all__ = ["execute", "node", "predictions", "validate"]
