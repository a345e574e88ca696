from enum import Enum


class ErrorCode(str, Enum):
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    BLOCK_NOT_FOUND = "block_not_found"
    INVALID_PROOF = "invalid_proof"
    INTERNAL_ERROR = "internal_error"


class Side(str, Enum):
    """Position of a proof sibling relative to the node on the path."""

    LEFT = "left"
    RIGHT = "right"
