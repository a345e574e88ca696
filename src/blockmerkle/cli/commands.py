"""
blockmerkle CLI commands.

Commands:
    blockmerkle demo                                  Build, prove and verify sample transactions
    blockmerkle root FILE...                          Root digest over files (one block per file)
    blockmerkle prove (--target FILE | --index N) FILE...   Inclusion proof as JSON
    blockmerkle verify --root HEX --proof JSON FILE   Check a proof against a root
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from blockmerkle.utils.logging import get_logger

logger = get_logger("cli")


DEMO_TRANSACTIONS = [
    b"transaction1",
    b"transaction2",
    b"transaction3",
    b"transaction4",
]


def _hasher(args):
    from blockmerkle.core.digest import default_hasher, get_hasher

    algorithm: Optional[str] = getattr(args, "algorithm", None)
    return get_hasher(algorithm) if algorithm else default_hasher()


def _read_blocks(paths: List[str]) -> List[bytes]:
    blocks = [Path(p).read_bytes() for p in paths]
    logger.debug("Read %d blocks from files", len(blocks))
    return blocks


def cmd_demo(args) -> int:
    """Build the sample transaction tree, prove and verify, then compose an unbalanced tree."""
    from blockmerkle.merkle.proof import ProofEngine
    from blockmerkle.merkle.tree import TreeBuilder

    hasher = _hasher(args)
    builder = TreeBuilder(hasher)
    engine = ProofEngine(hasher)

    tree = builder.build(DEMO_TRANSACTIONS)
    target = DEMO_TRANSACTIONS[0]
    proof = tree.get_proof(target)

    verified = engine.verify(tree.root_digest, target, proof)
    tampered = engine.verify(tree.root_digest, b"transaction1x", proof)

    print(f"Algorithm:   {hasher.name}")
    print(f"Merkle Root: {tree.root_digest.hex()}")
    print(f"Proof for {target.decode()} (leaf {proof.leaf_index}):")
    for step in proof:
        print(f"  {step.side.value:<5} {step.digest.hex()}")
    print(f"Verified: {verified}")
    print(f"Verified with 'transaction1x': {tampered}")

    # Composed by hand: ((1, 2), 3), then with 4 on top
    blocks = [b"Data Block 1", b"Data Block 2", b"Data Block 3", b"Data Block 4"]
    singles = [builder.build([b]) for b in blocks]
    unbalanced = builder.join(builder.join(singles[0], singles[1]), singles[2])
    extended = builder.join(unbalanced, singles[3])

    print()
    print(f"Unbalanced Root: {unbalanced.root_digest.hex()}")
    print(f"Unbalanced Root (after adding data): {extended.root_digest.hex()}")

    return 0 if verified and not tampered else 1


def cmd_root(args) -> int:
    """Print the root digest over the given files."""
    from blockmerkle.merkle.tree import TreeBuilder

    tree = TreeBuilder(_hasher(args)).build(_read_blocks(args.files))
    print(tree.root_digest.hex())
    return 0


def cmd_prove(args) -> int:
    """Print the inclusion proof for a file (or a position) as JSON."""
    from blockmerkle.merkle.proof import ProofEngine
    from blockmerkle.merkle.tree import TreeBuilder
    from blockmerkle.utils.json import json_dumps

    hasher = _hasher(args)
    tree = TreeBuilder(hasher).build(_read_blocks(args.files))
    engine = ProofEngine(hasher)

    if args.index is not None:
        try:
            proof = engine.prove_index(tree, args.index)
        except IndexError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        proof = engine.prove(tree, Path(args.target).read_bytes())
        if proof is None:
            print(f"Error: {args.target} is not in the tree", file=sys.stderr)
            return 1

    print(json_dumps(proof.to_dict(), indent=2))
    return 0


def cmd_verify(args) -> int:
    """Verify a JSON proof for a file against a root digest."""
    from blockmerkle.merkle.proof import MerkleProof, verify
    from blockmerkle.protocol.errors import ProofFormatError
    from blockmerkle.utils.json import json_loads

    try:
        root = bytes.fromhex(args.root)
    except ValueError:
        print(f"Error: root is not hex: {args.root!r}", file=sys.stderr)
        return 2

    try:
        proof = MerkleProof.from_dict(json_loads(Path(args.proof).read_text(encoding="utf-8")))
    except (ValueError, ProofFormatError) as e:
        print(f"Error: cannot read proof: {e}", file=sys.stderr)
        return 2

    hasher = _hasher(args) if args.algorithm else None
    ok = verify(root, Path(args.file).read_bytes(), proof, hasher)
    print("OK" if ok else "FAILED")
    return 0 if ok else 1
