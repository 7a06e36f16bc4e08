"""Audio capture module for Jot."""

from .capture import (
    AudioCapture,
    AudioClip,
    CaptureHandle,
    FileAudioCapture,
    MockAudioCapture,
)

__all__ = [
    "AudioCapture",
    "AudioClip",
    "CaptureHandle",
    "FileAudioCapture",
    "MockAudioCapture",
]
