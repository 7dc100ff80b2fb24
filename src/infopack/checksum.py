"""Streaming checksum computation and verification."""

import hashlib
import logging
from pathlib import Path

from .constants import DEFAULT_CHUNK_SIZE
from .exceptions import ChecksumMismatchError, UnknownAlgorithmError

logger = logging.getLogger(__name__)

# METS CHECKSUMTYPE spellings -> hashlib names
ALGORITHMS: dict[str, str] = {
    "MD5": "md5",
    "SHA-1": "sha1",
    "SHA-224": "sha224",
    "SHA-256": "sha256",
    "SHA-384": "sha384",
    "SHA-512": "sha512",
}


def normalize_algorithm(algorithm: str | None) -> str:
    """Map a checksum algorithm name to its hashlib name.

    Accepts METS spellings (``SHA-256``) and hashlib spellings (``sha256``),
    case-insensitively.

    Raises:
        UnknownAlgorithmError: If the algorithm is not supported
    """
    if not algorithm:
        raise UnknownAlgorithmError(algorithm)
    key = algorithm.strip().upper()
    if key in ALGORITHMS:
        return ALGORITHMS[key]
    for mets_name, hashlib_name in ALGORITHMS.items():
        if key == hashlib_name.upper() or key == mets_name.replace("-", ""):
            return hashlib_name
    raise UnknownAlgorithmError(algorithm)


def compute_digest(
    path: Path,
    algorithm: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Compute the hex digest of a file, reading it in fixed-size chunks.

    Args:
        path: File to hash
        algorithm: Algorithm name (METS or hashlib spelling)
        chunk_size: Bytes read per iteration

    Returns:
        Lowercase hex digest

    Raises:
        UnknownAlgorithmError: If the algorithm is not supported
        OSError: If the file cannot be read
    """
    hasher = hashlib.new(normalize_algorithm(algorithm))
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def verify(
    path: Path,
    algorithm: str | None,
    expected: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Check a file against a declared checksum.

    Returns:
        The computed digest

    Raises:
        ChecksumMismatchError: If the digest differs from ``expected``
        UnknownAlgorithmError: If the algorithm is not supported
    """
    actual = compute_digest(path, algorithm, chunk_size)
    if actual.lower() != expected.strip().lower():
        raise ChecksumMismatchError(expected=expected, actual=actual, path=str(path))
    logger.debug(f"Checksum verified for {path}")
    return actual


def digest_bytes(content: bytes, algorithm: str) -> str:
    """Hex digest of in-memory content."""
    return hashlib.new(normalize_algorithm(algorithm), content).hexdigest()
