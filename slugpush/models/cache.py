"""Cache entry model"""

from dataclasses import dataclass
from typing import Dict, Optional, Any


@dataclass(frozen=True)
class CacheEntry:
    """Remote reference for previously uploaded content

    A remote_ref is only valid for the exact bytes that produced content_hash.
    """
    content_hash: str
    remote_ref: str
    path: Optional[str] = None  # Path the content was last uploaded from

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'content_hash': self.content_hash,
            'remote_ref': self.remote_ref
        }
        if self.path:
            data['path'] = self.path
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheEntry':
        """Create from dictionary"""
        return cls(
            content_hash=data['content_hash'],
            remote_ref=data['remote_ref'],
            path=data.get('path')
        )
