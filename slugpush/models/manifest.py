# slugpush/models/manifest.py
"""Manifest models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Iterator, Tuple


@dataclass(frozen=True)
class FileEntry:
    """File entry in manifest"""
    path: str  # File path (relative, forward slashes)
    checksum: str  # Content hash of the file bytes
    size: int  # File size in bytes

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'path': self.path,
            'checksum': self.checksum,
            'size': self.size
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileEntry':
        """Create from dictionary"""
        return cls(
            path=data['path'],
            checksum=data['checksum'],
            size=data['size']
        )


@dataclass(frozen=True)
class Manifest:
    """Content-addressed listing of the files to deploy

    Entries are kept sorted by path and paths are unique. A manifest is
    built once per deployment attempt and never mutated afterwards.
    """
    base_dir: Path
    entries: Tuple[FileEntry, ...] = field(default_factory=tuple)

    def __post_init__(self):
        ordered = tuple(sorted(self.entries, key=lambda e: e.path))
        seen = set()
        for entry in ordered:
            if entry.path in seen:
                raise ValueError(f"Duplicate path in manifest: {entry.path}")
            seen.add(entry.path)
        object.__setattr__(self, 'entries', ordered)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self.entries)

    @property
    def total_size(self) -> int:
        """Get total size of all entries"""
        return sum(e.size for e in self.entries)

    def get(self, path: str) -> Optional[FileEntry]:
        """Find entry by relative path"""
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None

    def checksums(self) -> List[str]:
        """Get distinct content hashes in manifest order"""
        return list(dict.fromkeys(e.checksum for e in self.entries))

    def local_path(self, entry: FileEntry) -> Path:
        """Resolve an entry to its file on disk"""
        return self.base_dir / entry.path

    def to_build_dict(self) -> Dict[str, Dict[str, Any]]:
        """Mapping sent to the build service: path -> {hash, size}"""
        return {
            e.path: {'hash': e.checksum, 'size': e.size}
            for e in self.entries
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'base_dir': str(self.base_dir),
            'files': [e.to_dict() for e in self.entries]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Manifest':
        """Create from dictionary"""
        return cls(
            base_dir=Path(data['base_dir']),
            entries=tuple(FileEntry.from_dict(f) for f in data.get('files', []))
        )
