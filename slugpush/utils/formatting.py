"""Formatting utilities for display"""

from typing import Union

_SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def format_size(size_bytes: Union[int, float]) -> str:
    """Human readable byte size

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1536)
        '1.5 KB'
    """
    size = float(size_bytes)
    for unit in _SIZE_UNITS[:-1]:
        if abs(size) < 1024:
            break
        size /= 1024
    else:
        unit = _SIZE_UNITS[-1]

    if unit == 'B':
        return f"{int(size)} B"
    return f"{size:.1f} {unit}"


def format_duration(seconds: float) -> str:
    """Compact duration: '850ms', '12.3s', '2m 5s', '1h 4m'"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def pluralize(quantity: Union[int, float], counter: str) -> str:
    """Quantity followed by a counter noun, pluralized unless exactly one

    Examples:
        >>> pluralize(1, "file")
        '1 file'
        >>> pluralize(3, "new file")
        '3 new files'
    """
    text = f"{quantity} {counter}"
    return text if quantity == 1 else text + "s"
