"""Utility functions for storage operations."""

import re
from pathlib import Path
from typing import Optional

# Size limits
MAX_FILE_SIZE = 500 * 1024 * 1024  # 500MB

# Key sanitization regex
UNSAFE_CHARS = re.compile(r'[^\w\-.]')
MULTIPLE_DOTS = re.compile(r'\.{2,}')
LEADING_DOTS = re.compile(r'^\.+')


def validate_media_id(media_id: str) -> bool:
    """Check that a media id can be used as a single path component.

    Args:
        media_id: Id to validate

    Returns:
        True if the id is safe, False otherwise
    """
    if not media_id or not isinstance(media_id, str):
        return False

    # Must be exactly one path component
    if any(sep in media_id for sep in ('/', '\\')):
        return False
    if media_id in ('.', '..') or media_id.startswith('~'):
        return False

    return Path(media_id).name == media_id


def sanitize_key(key: str) -> str:
    """Turn an arbitrary storage key into a safe file name.

    Args:
        key: Original key

    Returns:
        Sanitized name safe for storage
    """
    # Remove unsafe characters
    name = UNSAFE_CHARS.sub('_', key)

    # Remove multiple dots
    name = MULTIPLE_DOTS.sub('_', name)

    # Remove leading dots
    name = LEADING_DOTS.sub('', name)

    # Limit length
    if len(name) > 200:
        name = name[:200]

    # Ensure name is not empty
    if not name:
        name = 'unnamed'

    return name


def validate_file_size(size: int, max_size: Optional[int] = None) -> bool:
    """Check if file size is within limits.

    Args:
        size: File size in bytes
        max_size: Limit in bytes, defaults to MAX_FILE_SIZE

    Returns:
        True if size is acceptable, False otherwise
    """
    if size <= 0:
        return False

    return size <= (max_size if max_size is not None else MAX_FILE_SIZE)
