from .enums import ErrorCode, Side
from .errors import (
    BlockMerkleError,
    BlockNotFoundError,
    ProofFormatError,
    UnsupportedAlgorithmError,
)

__all__ = [
    "ErrorCode",
    "Side",
    "BlockMerkleError",
    "BlockNotFoundError",
    "ProofFormatError",
    "UnsupportedAlgorithmError",
]
