"""Digest helpers for content addressing and fixity checks.

Algorithm names follow the OCFL digest algorithm registry (``sha512``,
``sha256``, ``blake2b-512``, ...). Digests are lowercase hex.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

from ocfltools.core.errors import UnsupportedDigestError

DEFAULT_CHUNK_SIZE = 1024 * 1024

# OCFL name -> (hashlib constructor name, constructor kwargs)
_ALGORITHMS: dict[str, tuple[str, dict[str, Any]]] = {
    "md5": ("md5", {}),
    "sha1": ("sha1", {}),
    "sha256": ("sha256", {}),
    "sha512": ("sha512", {}),
    "sha512/256": ("sha512_256", {}),
    "blake2b-160": ("blake2b", {"digest_size": 20}),
    "blake2b-256": ("blake2b", {"digest_size": 32}),
    "blake2b-384": ("blake2b", {"digest_size": 48}),
    "blake2b-512": ("blake2b", {"digest_size": 64}),
}


def supported_algorithms() -> list[str]:
    """OCFL algorithm names this toolkit can compute."""
    return sorted(_ALGORITHMS)


def new_hash(algorithm: str) -> Any:
    """Return a fresh hashlib object for an OCFL algorithm name."""
    try:
        name, kwargs = _ALGORITHMS[algorithm.lower()]
    except KeyError:
        raise UnsupportedDigestError(
            f"Unsupported digest algorithm '{algorithm}'. "
            f"Supported: {', '.join(supported_algorithms())}"
        ) from None
    if name == "blake2b":
        return hashlib.blake2b(**kwargs)
    try:
        return hashlib.new(name)
    except ValueError as exc:
        # sha512_256 depends on the OpenSSL build
        raise UnsupportedDigestError(
            f"Digest algorithm '{algorithm}' is not available in this Python build"
        ) from exc


def bytes_digest(data: bytes, algorithm: str) -> str:
    """Return the hex digest of raw bytes."""
    h = new_hash(algorithm)
    h.update(data)
    return h.hexdigest()


def file_digest(
    path: Path, algorithm: str, *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> str:
    """Return the hex digest of a file, read in chunks."""
    h = new_hash(algorithm)
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()
