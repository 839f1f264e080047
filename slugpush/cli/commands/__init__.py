"""CLI commands"""

from . import push
from . import diff
from . import check
from . import bundle

__all__ = [
    "push",
    "diff",
    "check",
    "bundle",
]
