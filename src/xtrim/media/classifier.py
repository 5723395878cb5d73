"""Decide whether an incoming file is a video, audio file or photo."""

from pathlib import Path
from typing import Optional

from ..models.media_item import MediaType


VIDEO_EXTENSIONS = (
    '.mp4', '.webm', '.ogg', '.ogv', '.mov', '.m4v', '.avi', '.mkv',
    '.wmv', '.flv', '.3gp', '.3g2', '.ts', '.mts', '.m2ts', '.vob',
    '.mpg', '.mpeg', '.divx', '.xvid', '.asf', '.rm', '.rmvb',
)
AUDIO_EXTENSIONS = ('.mp3', '.wav', '.m4a', '.aac', '.flac', '.wma', '.aiff')
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp', '.bmp', '.svg', '.heic', '.heif')

VIDEO_MIME_TYPES = frozenset({
    'video/mp4', 'video/webm', 'video/ogg', 'video/quicktime',
    'video/x-msvideo', 'video/x-matroska', 'video/x-ms-wmv',
    'video/x-flv', 'video/3gpp', 'video/3gpp2', 'video/mp2t',
    'video/mpeg', 'video/x-m4v', 'application/x-mpegurl',
})


def get_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    return Path(file_name).suffix.lower()


def classify_media(file_name: str, content_type: Optional[str] = None) -> Optional[MediaType]:
    """Classify a file by extension first, then by declared content type.

    Extensions win because many platforms report generic or empty content
    types for perfectly playable files (``.mkv``, ``.ts``, ``.heic``).
    Extension lists are checked video, then audio, then image, so ``.ogg``
    is treated as video.

    Args:
        file_name: Name of the file including its extension
        content_type: Declared MIME type, may be empty

    Returns:
        The media type, or None if the file is not supported
    """
    ext = get_extension(file_name or '')
    if ext in VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    if ext in AUDIO_EXTENSIONS:
        return MediaType.AUDIO
    if ext in IMAGE_EXTENSIONS:
        return MediaType.PHOTO

    mime = (content_type or '').strip().lower()
    if mime.startswith('video/') or mime in VIDEO_MIME_TYPES:
        return MediaType.VIDEO
    if mime.startswith('audio/'):
        return MediaType.AUDIO
    if mime.startswith('image/'):
        return MediaType.PHOTO

    return None


def is_supported(file_name: str, content_type: Optional[str] = None) -> bool:
    return classify_media(file_name, content_type) is not None


def supported_formats(media_type: Optional[MediaType] = None) -> str:
    """Accept string for file pickers, e.g. ``video/*,.mp4,.webm``.

    Args:
        media_type: Restrict to one type, or None for every supported type
    """
    groups = {
        MediaType.VIDEO: ('video/*', VIDEO_EXTENSIONS),
        MediaType.AUDIO: ('audio/*', AUDIO_EXTENSIONS),
        MediaType.PHOTO: ('image/*', IMAGE_EXTENSIONS),
    }
    selected = [groups[MediaType(media_type)]] if media_type else list(groups.values())
    parts = [wildcard for wildcard, _ in selected]
    for _, extensions in selected:
        parts.extend(extensions)
    return ','.join(parts)
