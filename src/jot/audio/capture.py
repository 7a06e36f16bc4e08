"""Audio capture capability.

The voice pipeline only depends on the AudioCapture protocol; how audio
is recorded (microphone, pre-recorded file, test fixture) is up to the
implementation.
"""

import mimetypes
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

DEFAULT_FILENAME = "audio.m4a"


@dataclass
class AudioClip:
    """A finished recording ready for upload.

    Attributes:
        data: Encoded audio bytes (m4a, wav, mp3, ...)
        filename: Name sent with the upload; its extension tells the
            service the format
        content_type: MIME type of the data
    """

    data: bytes
    filename: str = DEFAULT_FILENAME
    content_type: str = "audio/mp4"

    @property
    def is_empty(self) -> bool:
        """Return True if the clip holds no audio."""
        return not self.data

    @classmethod
    def from_file(cls, path: Path | str) -> "AudioClip":
        """Load a clip from an audio file.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(data=path.read_bytes(), filename=path.name, content_type=content_type)


@dataclass
class CaptureHandle:
    """Identifies an in-progress recording."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: float = field(default_factory=time.monotonic)


class AudioCapture(Protocol):
    """Interface for recording one voice interaction."""

    def start(self) -> CaptureHandle:
        """Start recording.

        Raises:
            RuntimeError: If a recording is already in progress
        """
        ...

    def stop(self, handle: CaptureHandle) -> AudioClip:
        """Stop the recording and return the clip.

        Raises:
            RuntimeError: If handle is not the active recording
        """
        ...


class _SingleRecording:
    """Tracks the one active recording allowed at a time."""

    def __init__(self) -> None:
        self._active: CaptureHandle | None = None

    @property
    def is_active(self) -> bool:
        """Return True if a recording is in progress."""
        return self._active is not None

    def start(self) -> CaptureHandle:
        if self._active is not None:
            raise RuntimeError("A recording is already in progress")
        self._active = CaptureHandle()
        return self._active

    def _finish(self, handle: CaptureHandle) -> None:
        if self._active is None or handle.id != self._active.id:
            raise RuntimeError("No active recording for this handle")
        self._active = None


class FileAudioCapture(_SingleRecording):
    """Capture that "records" a pre-recorded audio file.

    Used by the command-line interface to feed existing recordings
    through the same pipeline as live audio.
    """

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self._path = Path(path)

    def stop(self, handle: CaptureHandle) -> AudioClip:
        self._finish(handle)
        return AudioClip.from_file(self._path)


class MockAudioCapture(_SingleRecording):
    """Capture returning a preset clip, for testing."""

    def __init__(self, data: bytes = b"mock-audio", filename: str = DEFAULT_FILENAME) -> None:
        super().__init__()
        self._clip = AudioClip(data=data, filename=filename)
        self._start_count = 0

    def set_clip(self, data: bytes, filename: str = DEFAULT_FILENAME) -> None:
        """Set the clip returned by the next stop()."""
        self._clip = AudioClip(data=data, filename=filename)

    def start(self) -> CaptureHandle:
        self._start_count += 1
        return super().start()

    def stop(self, handle: CaptureHandle) -> AudioClip:
        self._finish(handle)
        return self._clip

    @property
    def start_count(self) -> int:
        """Get number of start calls."""
        return self._start_count


__all__ = [
    "AudioCapture",
    "AudioClip",
    "CaptureHandle",
    "FileAudioCapture",
    "MockAudioCapture",
]
