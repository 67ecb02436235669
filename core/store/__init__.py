"""
Proof Store Module

Content-addressed publish/fetch of JSON documents (proof artifacts and
registry snapshots).
"""

from .base import ProofStore
from .memory import InMemoryProofStore
from .ipfs import IPFSProofStore

__all__ = [
    "ProofStore",
    "InMemoryProofStore",
    "IPFSProofStore",
]
