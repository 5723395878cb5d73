"""Shared fixtures for Xtrim tests."""

import shutil
import tempfile
import time

import pytest

from xtrim.config import Settings
from xtrim.media.decoder import DecodeError


class FakeDecoder:
    """Stand-in for MediaDecoder with controllable latency and failures."""

    def __init__(self, delay: float = 0.0, fail: bool = False):
        self.delay = delay
        self.fail = fail
        self.paths = []

    def _work(self, path):
        self.paths.append(path)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise DecodeError(f"corrupt file: {path}")

    def video_duration(self, path):
        self._work(path)
        return 12.5

    def video_dimensions(self, path):
        self._work(path)
        return 1920, 1080

    def audio_duration(self, path):
        self._work(path)
        return 180.0

    def image_dimensions(self, path):
        self._work(path)
        return 4000, 3000

    def video_frame_jpeg(self, path, max_seek=1.0, quality=80):
        self._work(path)
        return b"\xff\xd8\xff\xe0video-frame"

    def image_preview_jpeg(self, path, max_size=480, quality=80):
        self._work(path)
        return b"\xff\xd8\xff\xe0image-preview"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for storage tests."""
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def test_settings(temp_dir):
    """Settings pointing at the temporary directory with short timeouts."""
    return Settings(
        storage_path=temp_dir,
        session_dir=f"{temp_dir}/session",
        probe_timeout=0.2,
        thumbnail_timeout=0.3,
    )


@pytest.fixture
def fake_decoder():
    return FakeDecoder()


@pytest.fixture
def decoder_factory():
    """Build FakeDecoders with custom latency or failure."""
    return FakeDecoder
