"""
Merkle tree and inclusion proofs.

Key concepts:
- Count-determined tree shape (split at len // 2)
- Immutable nodes, digest fixed at construction
- Side-tagged inclusion proofs
- Offline verification from block, proof and root alone
"""

from blockmerkle.merkle.tree import (
    Leaf,
    Internal,
    Node,
    MerkleTree,
    TreeBuilder,
    build,
    join,
)

from blockmerkle.merkle.proof import (
    ProofStep,
    MerkleProof,
    ProofEngine,
    prove,
    prove_index,
    verify,
    verify_unoriented,
)

__all__ = [
    # Tree
    "Leaf",
    "Internal",
    "Node",
    "MerkleTree",
    "TreeBuilder",
    "build",
    "join",
    # Proofs
    "ProofStep",
    "MerkleProof",
    "ProofEngine",
    "prove",
    "prove_index",
    "verify",
    "verify_unoriented",
]
