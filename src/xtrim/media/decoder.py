"""Blocking media decoding used by the metadata prober.

Every method here may take an arbitrary amount of time on damaged or
exotic files; callers run them in an executor under a timeout.
"""

import math
from io import BytesIO
from typing import Tuple

import cv2
import librosa
from PIL import Image, ImageOps


class DecodeError(Exception):
    """Raised when a file cannot be decoded."""
    pass


def _finite_or_zero(value: float) -> float:
    if value is None or math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return float(value)


class MediaDecoder:
    """Reads duration, dimensions and preview frames from local files.

    Videos go through OpenCV, images through Pillow and audio through
    librosa.
    """

    def _open_video(self, path: str) -> "cv2.VideoCapture":
        cap = cv2.VideoCapture(path)
        if not cap.isOpened():
            cap.release()
            raise DecodeError(f"Cannot open video: {path}")
        return cap

    def video_duration(self, path: str) -> float:
        """Video duration in seconds from frame count and frame rate."""
        cap = self._open_video(path)
        try:
            fps = cap.get(cv2.CAP_PROP_FPS)
            frame_count = cap.get(cv2.CAP_PROP_FRAME_COUNT)
            return _finite_or_zero(frame_count / fps) if fps > 0 else 0.0
        finally:
            cap.release()

    def video_dimensions(self, path: str) -> Tuple[int, int]:
        cap = self._open_video(path)
        try:
            width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
            height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
            return max(width, 0), max(height, 0)
        finally:
            cap.release()

    def audio_duration(self, path: str) -> float:
        try:
            return _finite_or_zero(librosa.get_duration(path=path))
        except Exception as e:
            raise DecodeError(f"Cannot read audio duration of {path}: {e}") from e

    def image_dimensions(self, path: str) -> Tuple[int, int]:
        try:
            with Image.open(path) as img:
                return img.size
        except (OSError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot open image {path}: {e}") from e

    def video_frame_jpeg(self, path: str, max_seek: float = 1.0, quality: int = 80) -> bytes:
        """Capture a still frame as JPEG bytes.

        Seeks to ``min(max_seek, duration / 4)`` to skip black leading
        frames while still landing inside very short clips.
        """
        cap = self._open_video(path)
        try:
            fps = cap.get(cv2.CAP_PROP_FPS)
            frame_count = cap.get(cv2.CAP_PROP_FRAME_COUNT)
            duration = _finite_or_zero(frame_count / fps) if fps > 0 else 0.0
            seek_to = min(max_seek, duration / 4)
            if seek_to > 0:
                cap.set(cv2.CAP_PROP_POS_MSEC, seek_to * 1000)

            ok, frame = cap.read()
            if not ok or frame is None:
                raise DecodeError(f"No frame at {seek_to:.2f}s in {path}")

            ok, encoded = cv2.imencode('.jpg', frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
            if not ok:
                raise DecodeError(f"Failed to encode frame from {path}")
            return encoded.tobytes()
        finally:
            cap.release()

    def image_preview_jpeg(self, path: str, max_size: int = 480, quality: int = 80) -> bytes:
        """Downscaled, orientation-corrected JPEG preview of an image."""
        try:
            with Image.open(path) as img:
                preview = ImageOps.exif_transpose(img).convert('RGB')
                preview.thumbnail((max_size, max_size))
                buffer = BytesIO()
                preview.save(buffer, format='JPEG', quality=quality)
                return buffer.getvalue()
        except (OSError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot build preview for {path}: {e}") from e
