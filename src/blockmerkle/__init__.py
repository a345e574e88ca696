from .core.digest import Hasher, default_hasher, get_hasher
from .core.settings import Settings, get_settings
from .merkle import (
    Leaf,
    Internal,
    MerkleTree,
    TreeBuilder,
    ProofStep,
    MerkleProof,
    ProofEngine,
    build,
    join,
    prove,
    prove_index,
    verify,
    verify_unoriented,
)
from .protocol import (
    ErrorCode,
    Side,
    BlockMerkleError,
    BlockNotFoundError,
    ProofFormatError,
    UnsupportedAlgorithmError,
)

__version__ = "0.1.0"

__all__ = [
    "Hasher",
    "default_hasher",
    "get_hasher",
    "Settings",
    "get_settings",
    "Leaf",
    "Internal",
    "MerkleTree",
    "TreeBuilder",
    "ProofStep",
    "MerkleProof",
    "ProofEngine",
    "build",
    "join",
    "prove",
    "prove_index",
    "verify",
    "verify_unoriented",
    "ErrorCode",
    "Side",
    "BlockMerkleError",
    "BlockNotFoundError",
    "ProofFormatError",
    "UnsupportedAlgorithmError",
]
