"""
Merkle Tree Construction

Builds a binary hash tree over an ordered sequence of opaque blocks.

Key features:
- Leaf digest = hash(block)
- Internal digest = hash(left.digest || right.digest), no prefix, no separator
- Split rule: mid = len // 2, left = [0, mid), right = [mid, len)
- Shape depends on the block count only, never on content
- Built with an explicit work stack (no recursion limit on large inputs)
- Trees are immutable once built
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from blockmerkle.core.digest import Hasher, default_hasher

logger = logging.getLogger(__name__)


BlockLike = Union[bytes, bytearray, memoryview]


# ===========================================================================
# Nodes
# ===========================================================================


@dataclass(frozen=True)
class Leaf:
    """
    Leaf node: digest of exactly one block.
    """
    digest: bytes

    @property
    def size(self) -> int:
        return 1


@dataclass(frozen=True)
class Internal:
    """
    Internal node: digest of its children's concatenated digests.

    Equality and hashing use digest and size only, never the children.

    Attributes:
        digest: hash(left.digest || right.digest)
        left: Left child, exclusively owned
        right: Right child, exclusively owned
        size: Number of leaves below this node
    """
    digest: bytes
    left: "Node" = field(repr=False, compare=False)
    right: "Node" = field(repr=False, compare=False)
    size: int


Node = Union[Leaf, Internal]


def _coerce_block(block: BlockLike) -> bytes:
    if isinstance(block, (bytes, bytearray, memoryview)):
        return bytes(block)
    if isinstance(block, str):
        raise TypeError("blocks must be bytes-like; encode text before adding it")
    raise TypeError(f"blocks must be bytes-like, got {type(block).__name__}")


def iter_leaves(node: Optional[Node]) -> Iterator[Leaf]:
    """Yield leaves left to right."""
    if node is None:
        return
    stack: List[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Leaf):
            yield current
        else:
            stack.append(current.right)
            stack.append(current.left)


def node_height(node: Optional[Node]) -> int:
    """Edges on the longest root-to-leaf path (0 for a single leaf)."""
    if node is None:
        return 0
    height = 0
    stack: List[Tuple[Node, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, Leaf):
            height = max(height, depth)
        else:
            stack.append((current.left, depth + 1))
            stack.append((current.right, depth + 1))
    return height


# ===========================================================================
# Merkle Tree
# ===========================================================================


@dataclass(frozen=True)
class MerkleTree:
    """
    Immutable Merkle tree.

    Attributes:
        root: Root node, None iff built from zero blocks
        blocks: The original ordered blocks (lookup and audit only)
        hasher: Digest function used for every node
    """
    root: Optional[Node]
    blocks: Tuple[bytes, ...]
    hasher: Hasher = field(compare=False)

    @property
    def root_digest(self) -> Optional[bytes]:
        return self.root.digest if self.root is not None else None

    @property
    def leaf_count(self) -> int:
        return len(self.blocks)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    @property
    def height(self) -> int:
        return node_height(self.root)

    def leaves(self) -> Iterator[Leaf]:
        return iter_leaves(self.root)

    def get_proof(self, target: BlockLike):
        """
        Inclusion proof for a block.

        Unlike ProofEngine.prove, a missing block is an error here.

        Raises:
            BlockNotFoundError: If no leaf carries the block's digest
        """
        from blockmerkle.merkle.proof import ProofEngine
        from blockmerkle.protocol.errors import BlockNotFoundError

        proof = ProofEngine(self.hasher).prove(self, target)
        if proof is None:
            raise BlockNotFoundError("Block not in tree")
        return proof

    def audit(self) -> bool:
        """
        Recompute every node from the stored blocks and compare.

        Returns True iff every leaf matches its block and every internal
        digest and size matches its children.
        """
        if self.root is None:
            return not self.blocks
        if self.root.size != len(self.blocks):
            return False

        position = 0
        stack: List[Node] = [self.root]
        while stack:
            node = stack.pop()
            if isinstance(node, Leaf):
                if position >= len(self.blocks):
                    return False
                if node.digest != self.hasher.hash(self.blocks[position]):
                    logger.debug("Audit mismatch at leaf %d", position)
                    return False
                position += 1
                continue

            expected = self.hasher.combine(node.left.digest, node.right.digest)
            if node.digest != expected or node.size != node.left.size + node.right.size:
                logger.debug("Audit mismatch at internal node above leaf %d", position)
                return False
            stack.append(node.right)
            stack.append(node.left)

        return position == len(self.blocks)

    def __repr__(self) -> str:
        root = self.root_digest.hex() if self.root_digest is not None else None
        return (
            f"MerkleTree(leaf_count={self.leaf_count}, "
            f"algorithm={self.hasher.name!r}, root={root!r})"
        )


# ===========================================================================
# Tree Builder
# ===========================================================================


class TreeBuilder:
    """
    Builds MerkleTree instances with one hasher.

    Usage:
        builder = TreeBuilder(Hasher("sha256"))
        tree = builder.build([b"tx1", b"tx2", b"tx3"])
        tree.root_digest
    """

    def __init__(self, hasher: Optional[Hasher] = None):
        self._hasher = hasher or default_hasher()

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    def build(self, blocks: Iterable[BlockLike]) -> MerkleTree:
        """
        Build a tree over `blocks` in order.

        An empty sequence yields a tree with no root.
        """
        stored = tuple(_coerce_block(b) for b in blocks)
        if not stored:
            logger.debug("Built empty Merkle tree")
            return MerkleTree(root=None, blocks=stored, hasher=self._hasher)

        root = self._build_root(stored)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built Merkle tree: blocks=%d height=%d root=%s",
                len(stored), node_height(root), root.digest.hex()[:16],
            )
        return MerkleTree(root=root, blocks=stored, hasher=self._hasher)

    def _build_root(self, blocks: Tuple[bytes, ...]) -> Node:
        # Work items are (lo, hi, children_done). A range is pushed once to
        # schedule its halves and again to combine their results, which sit
        # on `done` as left then right.
        done: List[Node] = []
        work: List[Tuple[int, int, bool]] = [(0, len(blocks), False)]

        while work:
            lo, hi, children_done = work.pop()
            if hi - lo == 1:
                done.append(Leaf(self._hasher.hash(blocks[lo])))
                continue

            if children_done:
                right = done.pop()
                left = done.pop()
                done.append(
                    Internal(
                        digest=self._hasher.combine(left.digest, right.digest),
                        left=left,
                        right=right,
                        size=left.size + right.size,
                    )
                )
                continue

            mid = lo + (hi - lo) // 2
            work.append((lo, hi, True))
            work.append((mid, hi, False))
            work.append((lo, mid, False))

        return done[0]

    def join(self, left: MerkleTree, right: MerkleTree) -> MerkleTree:
        """
        Combine two trees under a new root.

        The result's blocks are left.blocks + right.blocks. Its shape keeps
        both subtrees as they are, so it generally differs from build() over
        the same blocks. Joining with an empty tree returns the other one.

        Raises:
            ValueError: If the trees were not built with this builder's hash
        """
        for tree in (left, right):
            if tree.hasher != self._hasher:
                raise ValueError(
                    f"Cannot join tree hashed with {tree.hasher.name!r} "
                    f"using {self._hasher.name!r}"
                )

        if left.root is None:
            return right
        if right.root is None:
            return left

        root = Internal(
            digest=self._hasher.combine(left.root.digest, right.root.digest),
            left=left.root,
            right=right.root,
            size=left.root.size + right.root.size,
        )
        logger.debug(
            "Joined Merkle trees: %d + %d blocks", left.leaf_count, right.leaf_count
        )
        return MerkleTree(root=root, blocks=left.blocks + right.blocks, hasher=self._hasher)


# ===========================================================================
# Convenience functions
# ===========================================================================


def build(blocks: Iterable[BlockLike], hasher: Optional[Hasher] = None) -> MerkleTree:
    """Build a tree with the given (or configured) hasher."""
    return TreeBuilder(hasher).build(blocks)


def join(left: MerkleTree, right: MerkleTree) -> MerkleTree:
    """Join two trees built with the same hasher."""
    return TreeBuilder(left.hasher).join(left, right)
