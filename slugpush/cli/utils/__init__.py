"""CLI utilities"""

from .output import (
    console,
    format_deploy_result,
    format_diff,
    format_validation_result,
    print_error,
    print_success,
)
from .progress import ProgressReporter

__all__ = [
    "console",
    "format_deploy_result",
    "format_diff",
    "format_validation_result",
    "print_error",
    "print_success",
    "ProgressReporter",
]
