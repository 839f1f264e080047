"""Content fingerprints

Files are identified by the hex digest of their bytes; the digest also
decides where the content is stored.
"""

import hashlib
from pathlib import Path

import aiofiles

from ..constants import DEFAULT_CHUNK_SIZE, DEFAULT_HASH_ALGORITHM


def hash_bytes(content: bytes, algorithm: str = DEFAULT_HASH_ALGORITHM) -> str:
    """Hex digest of in-memory content"""
    return hashlib.new(algorithm, content).hexdigest()


async def hash_file(file_path: Path,
                    algorithm: str = DEFAULT_HASH_ALGORITHM,
                    chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Hex digest of a file, read in chunks

    Args:
        file_path: File to fingerprint
        algorithm: hashlib algorithm name
        chunk_size: Bytes per read

    Returns:
        Hex digest, identical to hash_bytes() of the whole file
    """
    digest = hashlib.new(algorithm)
    async with aiofiles.open(file_path, 'rb') as f:
        while chunk := await f.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


def content_slot(content_hash: str) -> str:
    """Storage slot for a content hash, fanned out by its first two characters"""
    return f"{content_hash[:2]}/{content_hash}"
