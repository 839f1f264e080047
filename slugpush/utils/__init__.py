# slugpush/utils/__init__.py
"""Utility functions for slugpush"""

from .hash_utils import (
    hash_bytes,
    hash_file,
    content_slot,
)

from .glob_utils import (
    GlobScanner,
    GlobPatternError,
    compile_glob,
    split_patterns,
)

from .env_utils import (
    EnvExpander,
    PropertiesSyntaxError,
    parse_properties,
)

from .async_utils import (
    run_async,
    run_bounded,
)

from .formatting import (
    format_size,
    format_duration,
    pluralize,
)

__all__ = [
    # Hash utilities
    "hash_bytes",
    "hash_file",
    "content_slot",

    # Glob utilities
    "GlobScanner",
    "GlobPatternError",
    "compile_glob",
    "split_patterns",

    # Environment utilities
    "EnvExpander",
    "PropertiesSyntaxError",
    "parse_properties",

    # Async utilities
    "run_async",
    "run_bounded",

    # Formatting
    "format_size",
    "format_duration",
    "pluralize",
]
