"""Version information for slugpush package"""

import platform

__version__ = "1.0.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
__license__ = "MIT"


def get_user_agent() -> str:
    """Consumer user agent sent with every platform and build request"""
    return f"slugpush/{__version__} python/{platform.python_version()}"
