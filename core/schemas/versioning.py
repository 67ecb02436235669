"""
Schemas - Versioning
File: versioning.py

Purpose: Centralize schema version constants.
Kept free of imports from other schema files to avoid circular dependencies.
"""

# Current schema version written into registry snapshots
SCHEMA_VERSION: str = "v1"

# Versions this node can read
SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})


def is_compatible_schema_version(version: str) -> bool:
    """Check whether a snapshot written with ``version`` can be read."""
    return version in SUPPORTED_SCHEMA_VERSIONS
