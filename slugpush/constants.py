"""Global constants for slugpush"""

import re

APP_NAME = "slugpush"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".slugpush.yaml"
LOCAL_STATE_DIR = ".slugpush"
SLUG_FILE_NAME = "slug"
DEFAULT_CACHE_DIR = ".slugpush-cache"

# Default option values
DEFAULT_BASE_DIR = "."
DEFAULT_GLOB_INCLUDES = "**"
DEFAULT_GLOB_EXCLUDES = ""
DEFAULT_HASH_ALGORITHM = "sha256"
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB
DEFAULT_UPLOAD_WORKERS = 4
DEFAULT_HTTP_TIMEOUT = 60.0  # seconds
DEFAULT_BUILD_TIMEOUT = 30 * 60.0  # seconds

# Remote endpoints
DEFAULT_PLATFORM_URL = "https://api.heroku.com"
DEFAULT_BUILD_URL = "https://api.anvilworks.org"

# Build protocol
SLUG_SUCCESS_MARKER = "Success, slug is "
HEADER_SLUG_URL = "X-Slug-Url"
HEADER_MANIFEST_ID = "X-Manifest-Id"
HEADER_EXIT_STATUS = "X-Exit-Status"

# Buildpack URLs
ALLOWED_BUILDPACK_SCHEMES = ["http", "https", "git"]

# Workspace bundle
BUNDLE_SUFFIX = ".tar.gz"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "SP001"
    SCAN_ERROR = "SP002"
    UPLOAD_ERROR = "SP003"
    BUILD_ERROR = "SP004"
    RELEASE_ERROR = "SP005"
    CANCELLED = "SP006"
    PLATFORM_ERROR = "SP007"
    UNEXPECTED_ERROR = "SP008"


# Environment variables
ENV_API_KEY = "SLUGPUSH_API_KEY"
ENV_APP_NAME = "SLUGPUSH_APP"
ENV_PLATFORM_URL = "SLUGPUSH_PLATFORM_URL"
ENV_BUILD_URL = "SLUGPUSH_BUILD_URL"
ENV_LOG_LEVEL = "SLUGPUSH_LOG_LEVEL"

# Validation patterns
APP_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")
ENV_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ROCKET = "🚀"

# Message templates
MSG_WORKSPACE_FILES = "Workspace contains {files}"
MSG_UPLOADS_START = "Uploading {files}..."
MSG_UPLOADS_END = "Upload complete"
MSG_RELEASE_START = "Releasing to {app}..."
MSG_RELEASE_END = "Push complete, {version} | {web_url}"
MSG_BUILD_ERROR = "A build error occurred: {exit_status}"
