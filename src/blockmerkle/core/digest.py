"""
Digest primitive for blockmerkle.

Wraps a one-way hash function behind a small, stateless interface:

- hash(data)            -> digest bytes
- combine(left, right)  -> hash(left || right), raw concatenation

Algorithms come from the `cryptography` library. Any other
`hash(bytes) -> bytes` capability can be plugged in with
Hasher.from_callable().
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from cryptography.hazmat.primitives import hashes

from blockmerkle.protocol.errors import UnsupportedAlgorithmError


HashFunction = Callable[[bytes], bytes]


# ===========================================================================
# Algorithm registry
# ===========================================================================


_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3-256": hashes.SHA3_256,
    "sha3-512": hashes.SHA3_512,
    "blake2b": lambda: hashes.BLAKE2b(64),
    "blake2s": lambda: hashes.BLAKE2s(32),
}

SUPPORTED_ALGORITHMS = tuple(_ALGORITHMS)

DEFAULT_ALGORITHM = "sha256"


def normalize_algorithm(name: str) -> str:
    """
    Canonical registry name for an algorithm.

    Lookup is case-insensitive and accepts '_' in place of '-'
    (e.g. 'SHA3_256' -> 'sha3-256').

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown
    """
    key = (name or "").strip().lower().replace("_", "-")
    if key not in _ALGORITHMS:
        raise UnsupportedAlgorithmError(
            f"Unsupported hash algorithm: {name!r} "
            f"(expected one of {', '.join(SUPPORTED_ALGORITHMS)})"
        )
    return key


# ===========================================================================
# Hasher
# ===========================================================================


class Hasher:
    """
    Stateless digest function.

    Every call creates a fresh hash context, so one Hasher can be shared
    freely between trees, proofs and threads.

    Usage:
        hasher = Hasher("sha256")
        digest = hasher.hash(b"block")
        parent = hasher.combine(left_digest, right_digest)
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        self._name = normalize_algorithm(algorithm)
        factory = _ALGORITHMS[self._name]
        self._digest_size = factory().digest_size
        self._func: HashFunction = self._make_func(factory)
        self._external = False

    @staticmethod
    def _make_func(factory: Callable[[], hashes.HashAlgorithm]) -> HashFunction:
        def _digest(data: bytes) -> bytes:
            ctx = hashes.Hash(factory())
            ctx.update(data)
            return ctx.finalize()

        return _digest

    @classmethod
    def from_callable(cls, name: str, func: HashFunction, digest_size: int) -> "Hasher":
        """
        Wrap an external hash capability.

        The callable must be deterministic and return exactly
        `digest_size` bytes for every input.
        """
        if digest_size <= 0:
            raise ValueError(f"digest_size must be positive, got {digest_size}")
        hasher = cls.__new__(cls)
        hasher._name = name
        hasher._digest_size = digest_size
        hasher._func = func
        hasher._external = True
        return hasher

    @property
    def name(self) -> str:
        return self._name

    @property
    def digest_size(self) -> int:
        return self._digest_size

    def hash(self, data: bytes) -> bytes:
        return self._func(bytes(data))

    def combine(self, left: bytes, right: bytes) -> bytes:
        """Digest of `left || right`, no separator and no domain prefix."""
        return self._func(bytes(left) + bytes(right))

    __call__ = hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hasher):
            return NotImplemented
        if self._external or other._external:
            return self._func is other._func
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"Hasher({self._name!r})"


_DEFAULT_HASHERS: Dict[str, Hasher] = {}


def get_hasher(algorithm: Optional[str] = None) -> Hasher:
    """
    Shared Hasher for a registry algorithm.

    With no argument the configured algorithm is used
    (BLOCKMERKLE_HASH_ALGORITHM, see core.settings).
    """
    if algorithm is None:
        from blockmerkle.core.settings import get_settings

        algorithm = get_settings().hash_algorithm

    name = normalize_algorithm(algorithm)
    hasher = _DEFAULT_HASHERS.get(name)
    if hasher is None:
        hasher = _DEFAULT_HASHERS.setdefault(name, Hasher(name))
    return hasher


def default_hasher() -> Hasher:
    """Hasher for the configured algorithm."""
    return get_hasher()
