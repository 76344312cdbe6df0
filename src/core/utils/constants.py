"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_MISSING_IMAGE = "MISSING_IMAGE"
ERROR_CODE_INVALID_MULTIPART = "INVALID_MULTIPART"
ERROR_CODE_METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Content Store Errors
ERROR_CODE_STORE = "CONTENT_STORE_ERROR"
ERROR_CODE_STORE_CONFLICT = "CONTENT_STORE_CONFLICT"
ERROR_CODE_STORE_TIMEOUT = "CONTENT_STORE_TIMEOUT"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DOWNLOAD_FAILED = "IMAGE_DOWNLOAD_FAILED"

# Metadata Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Store Layout
# ============================================================================

IMAGES_DIR = "images"
METADATA_DIR = "metadata"
METADATA_EXTENSION = ".json"

IMAGE_COMMIT_MESSAGE = "Add image: {filename}"
METADATA_COMMIT_MESSAGE = "Add metadata: {image_id}"

IMAGE_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB in bytes

# Headroom for multipart boundaries and text fields on top of the file itself
MAX_FORM_OVERHEAD = 1024 * 1024

IMAGE_FORM_FIELD = "image"

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset(
    ext for extensions in MIME_TYPE_EXTENSION_MAP.values() for ext in extensions
)


# ============================================================================
# Image Metadata Constraints
# ============================================================================

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
MAX_TAGS = 20
TAG_MAX_LENGTH = 50

DEFAULT_CATEGORY = "other"
DEFAULT_LICENSE = "cc0"

ALLOWED_LICENSES: Final[frozenset[str]] = frozenset(
    {"cc0", "cc-by", "cc-by-sa", "cc-by-nc", "all-rights-reserved"}
)

CATEGORY_LABELS: Final[dict[str, str]] = {
    "anime": "🎌 Anime",
    "digital-art": "🎨 Art",
    "landscape": "🏔️ Landscape",
    "cyberpunk": "🌃 Cyberpunk",
    "fantasy": "✨ Fantasy",
    "abstract": "🌀 Abstract",
    "character": "👤 Character",
}

# ============================================================================
# Gallery Constraints
# ============================================================================

IMAGES_PER_PAGE = 12
SORT_NEWEST = "newest"
SORT_POPULAR = "popular"
SORT_RANDOM = "random"
DEFAULT_SORT = SORT_NEWEST
ALLOWED_SORTS: Final[frozenset[str]] = frozenset({SORT_NEWEST, SORT_POPULAR, SORT_RANDOM})

DEFAULT_DOWNLOAD_FILENAME = "image.jpg"

API_BASE_PATH = "/.netlify/functions"
LIST_ENDPOINT = "github-list"
UPLOAD_ENDPOINT = "github-upload"
DOWNLOAD_ENDPOINT = "github-download"
DEFAULT_CLIENT_TIMEOUT = 30.0

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization"
EXPOSE_HEADERS = "Content-Type,Content-Length,Content-Disposition"
DEFAULT_CONTENT_TYPE = "application/json"
BINARY_FALLBACK_CONTENT_TYPE = "application/octet-stream"

LIST_CACHE_CONTROL = "public, max-age=300"
DOWNLOAD_CACHE_CONTROL = "public, max-age=3600"

# ============================================================================
# GitHub Content API
# ============================================================================

GITHUB_API_URL = "https://api.github.com"
GITHUB_RAW_URL = "https://raw.githubusercontent.com"
GITHUB_JSON_ACCEPT = "application/vnd.github.v3+json"
GITHUB_RAW_ACCEPT = "application/vnd.github.v3.raw"
DEFAULT_BRANCH = "main"

DEFAULT_METADATA_FETCH_TIMEOUT = 5.0
DEFAULT_METADATA_FETCH_WORKERS = 8
DEFAULT_METADATA_FETCH_DEADLINE = 20.0
DEFAULT_WRITE_TIMEOUT = 30.0

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_GITHUB_OWNER = "GITHUB_OWNER"
ENV_GITHUB_REPO = "GITHUB_REPO"
ENV_GITHUB_BRANCH = "GITHUB_BRANCH"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_GITHUB_TOKEN_SECRET_NAME = "GITHUB_TOKEN_SECRET_NAME"
ENV_GITHUB_API_URL = "GITHUB_API_URL"
ENV_GITHUB_RAW_URL = "GITHUB_RAW_URL"
ENV_METADATA_FETCH_TIMEOUT = "METADATA_FETCH_TIMEOUT"
ENV_METADATA_FETCH_WORKERS = "METADATA_FETCH_WORKERS"
ENV_METADATA_FETCH_DEADLINE = "METADATA_FETCH_DEADLINE"

METRICS_NAMESPACE = "ImageGallery"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
