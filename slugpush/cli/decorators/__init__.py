# slugpush/cli/decorators/__init__.py
"""CLI decorators"""

from .workspace import workspace_options

__all__ = [
    'workspace_options',
]
