"""
Merkle Inclusion Proofs

Generates and verifies inclusion proofs for single blocks.

A proof is the ordered list of sibling digests on the path from a leaf up
to the root, index 0 being the leaf's own sibling. Every step records the
side the sibling sits on, so verification rebuilds each parent in the same
order the tree did:

    sibling on RIGHT -> hash(current || sibling)
    sibling on LEFT  -> hash(sibling || current)

verify_unoriented() keeps the side-less replay, which always appends the
sibling after the running digest. It only reproduces the root for the
leftmost leaf, where every sibling is a right sibling.

Verification never needs the tree: the block, the proof and the claimed
root are enough.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from blockmerkle.core.digest import Hasher, default_hasher, get_hasher
from blockmerkle.merkle.tree import BlockLike, Internal, Leaf, MerkleTree, Node, _coerce_block
from blockmerkle.protocol.enums import Side
from blockmerkle.protocol.errors import ProofFormatError, UnsupportedAlgorithmError

logger = logging.getLogger(__name__)


# ===========================================================================
# Proof types
# ===========================================================================


@dataclass(frozen=True)
class ProofStep:
    """
    One sibling on the path to the root.

    Attributes:
        digest: The sibling's digest
        side: Where the sibling sits relative to the path node
    """
    digest: bytes
    side: Side

    def to_dict(self) -> Dict[str, Any]:
        return {"digest": self.digest.hex(), "side": Side(self.side).value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProofStep":
        return cls(digest=bytes.fromhex(data["digest"]), side=Side(data["side"]))


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for one block.

    Attributes:
        steps: Siblings from the leaf's sibling up to the root's child
        algorithm: Name of the hash the tree was built with
        leaf_index: Position of the proven leaf
    """
    steps: Tuple[ProofStep, ...]
    algorithm: str
    leaf_index: int

    @property
    def siblings(self) -> Tuple[bytes, ...]:
        return tuple(step.digest for step in self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "leafIndex": self.leaf_index,
            "steps": [step.to_dict() for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MerkleProof":
        """
        Decode a proof produced by to_dict().

        Raises:
            ProofFormatError: If a field is missing or malformed
        """
        try:
            steps = tuple(ProofStep.from_dict(s) for s in data["steps"])
            algorithm = data["algorithm"]
            leaf_index = data["leafIndex"]
        except (KeyError, TypeError, ValueError) as e:
            raise ProofFormatError(f"Malformed proof: {e}") from e

        if not isinstance(algorithm, str) or not isinstance(leaf_index, int):
            raise ProofFormatError("Malformed proof: bad algorithm or leafIndex")
        return cls(steps=steps, algorithm=algorithm, leaf_index=leaf_index)


# ===========================================================================
# Proof Engine
# ===========================================================================


class ProofEngine:
    """
    Proof generation and verification.

    prove() hashes the target with the tree's own hasher. verify() uses the
    engine's hasher and rejects proofs made with a different algorithm.
    """

    def __init__(self, hasher: Optional[Hasher] = None):
        self._hasher = hasher or default_hasher()

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    def prove(self, tree: MerkleTree, target: BlockLike) -> Optional[MerkleProof]:
        """
        Locate `target` and collect the siblings on its path.

        Depth-first, left before right, so with duplicate blocks the
        leftmost occurrence is proven.

        Returns:
            The proof, or None if the tree is empty or has no such block
        """
        if tree.root is None:
            logger.debug("Proof requested from empty tree")
            return None

        target_digest = tree.hasher.hash(_coerce_block(target))

        # (node, index of its first leaf, steps from the root down)
        stack: List[Tuple[Node, int, Tuple[ProofStep, ...]]] = [(tree.root, 0, ())]
        while stack:
            node, offset, path = stack.pop()
            if isinstance(node, Leaf):
                if node.digest == target_digest:
                    return MerkleProof(
                        steps=tuple(reversed(path)),
                        algorithm=tree.hasher.name,
                        leaf_index=offset,
                    )
                continue

            stack.append((
                node.right,
                offset + node.left.size,
                path + (ProofStep(node.left.digest, Side.LEFT),),
            ))
            stack.append((
                node.left,
                offset,
                path + (ProofStep(node.right.digest, Side.RIGHT),),
            ))

        logger.debug("Block %s not in tree", target_digest.hex()[:16])
        return None

    def prove_index(self, tree: MerkleTree, index: int) -> MerkleProof:
        """
        Proof for the leaf at `index`.

        Reaches every position, including later copies of a duplicate block.

        Raises:
            IndexError: If the tree is empty or index is out of range
        """
        if tree.root is None or not 0 <= index < tree.root.size:
            raise IndexError(f"Invalid leaf index: {index}")

        node: Node = tree.root
        offset = index
        path: List[ProofStep] = []
        while isinstance(node, Internal):
            if offset < node.left.size:
                path.append(ProofStep(node.right.digest, Side.RIGHT))
                node = node.left
            else:
                path.append(ProofStep(node.left.digest, Side.LEFT))
                offset -= node.left.size
                node = node.right

        path.reverse()
        return MerkleProof(steps=tuple(path), algorithm=tree.hasher.name, leaf_index=index)

    def verify(self, root: Optional[bytes], target: BlockLike, proof: MerkleProof) -> bool:
        """
        Recompute the root from `target` and `proof` and compare.

        A wrong root, a tampered block, a substituted sibling or a proof
        for another algorithm all give False.
        """
        if root is None:
            return False
        if proof.algorithm != self._hasher.name:
            logger.debug(
                "Proof algorithm %r does not match %r", proof.algorithm, self._hasher.name
            )
            return False

        current = self._hasher.hash(_coerce_block(target))
        for step in proof.steps:
            if step.side == Side.LEFT:
                current = self._hasher.combine(step.digest, current)
            else:
                current = self._hasher.combine(current, step.digest)

        if current != bytes(root):
            logger.debug("Proof mismatch: computed root %s", current.hex()[:16])
            return False
        return True

    def verify_unoriented(
        self,
        root: Optional[bytes],
        target: BlockLike,
        siblings: Iterable[bytes],
    ) -> bool:
        """
        Replay siblings without sides: current = hash(current || sibling).

        Matches the root only when every sibling on the path is a right
        sibling. Any path through a right branch fails.
        """
        if root is None:
            return False
        current = self._hasher.hash(_coerce_block(target))
        for sibling in siblings:
            current = self._hasher.combine(current, sibling)
        return current == bytes(root)


# ===========================================================================
# Convenience functions
# ===========================================================================


def prove(tree: MerkleTree, target: BlockLike) -> Optional[MerkleProof]:
    return ProofEngine(tree.hasher).prove(tree, target)


def prove_index(tree: MerkleTree, index: int) -> MerkleProof:
    return ProofEngine(tree.hasher).prove_index(tree, index)


def verify(
    root: Optional[bytes],
    target: BlockLike,
    proof: MerkleProof,
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify an inclusion proof.

    Without an explicit hasher, the one named by the proof is used.
    """
    if hasher is None:
        try:
            hasher = get_hasher(proof.algorithm)
        except UnsupportedAlgorithmError:
            logger.debug("Unknown proof algorithm %r", proof.algorithm)
            return False
    return ProofEngine(hasher).verify(root, target, proof)


def verify_unoriented(
    root: Optional[bytes],
    target: BlockLike,
    siblings: Union[MerkleProof, Iterable[bytes]],
    hasher: Optional[Hasher] = None,
) -> bool:
    """Side-less verification; see ProofEngine.verify_unoriented."""
    if isinstance(siblings, MerkleProof):
        if hasher is None:
            try:
                hasher = get_hasher(siblings.algorithm)
            except UnsupportedAlgorithmError:
                logger.debug("Unknown proof algorithm %r", siblings.algorithm)
                return False
        siblings = siblings.siblings
    return ProofEngine(hasher).verify_unoriented(root, target, siblings)
