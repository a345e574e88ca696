from typing import Optional
from .enums import ErrorCode


class BlockMerkleError(Exception):
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code or ErrorCode.INTERNAL_ERROR


class UnsupportedAlgorithmError(BlockMerkleError, ValueError):
    """Raised when a hash algorithm name is not recognised."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.UNSUPPORTED_ALGORITHM)


class BlockNotFoundError(BlockMerkleError):
    """Raised when a block has no leaf in the tree."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.BLOCK_NOT_FOUND)


class ProofFormatError(BlockMerkleError):
    """Raised when a serialized proof cannot be decoded."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_PROOF)
