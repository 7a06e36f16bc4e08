"""Unit tests for audio capture."""

from pathlib import Path

import pytest

from jot.audio import AudioClip, FileAudioCapture, MockAudioCapture


class TestAudioClip:
    """Tests for AudioClip."""

    def test_is_empty(self) -> None:
        assert AudioClip(data=b"").is_empty
        assert not AudioClip(data=b"x").is_empty

    def test_from_file_guesses_type(self, tmp_path: Path) -> None:
        """Test loading a file keeps its name and guesses the MIME type."""
        path = tmp_path / "memo.wav"
        path.write_bytes(b"RIFF")

        clip = AudioClip.from_file(path)

        assert clip.data == b"RIFF"
        assert clip.filename == "memo.wav"
        assert clip.content_type in ("audio/wav", "audio/x-wav")


class TestCapture:
    """Tests for capture implementations."""

    def test_mock_capture(self) -> None:
        """Test the mock returns its preset clip."""
        capture = MockAudioCapture(b"abc")
        handle = capture.start()
        assert capture.is_active

        clip = capture.stop(handle)

        assert clip.data == b"abc"
        assert capture.start_count == 1
        assert not capture.is_active

    def test_one_recording_at_a_time(self) -> None:
        """Test a second start while recording is rejected."""
        capture = MockAudioCapture()
        capture.start()
        with pytest.raises(RuntimeError):
            capture.start()

    def test_stop_with_wrong_handle(self) -> None:
        """Test stopping with a stale handle is rejected."""
        capture = MockAudioCapture()
        first = capture.start()
        capture.stop(first)
        capture.start()
        with pytest.raises(RuntimeError):
            capture.stop(first)

    def test_file_capture(self, tmp_path: Path) -> None:
        """Test file capture returns the file contents."""
        path = tmp_path / "memo.m4a"
        path.write_bytes(b"m4a")
        capture = FileAudioCapture(path)

        clip = capture.stop(capture.start())

        assert clip.data == b"m4a"
        assert clip.filename == "memo.m4a"

    def test_file_capture_missing_file(self, tmp_path: Path) -> None:
        capture = FileAudioCapture(tmp_path / "missing.m4a")
        with pytest.raises(OSError):
            capture.stop(capture.start())
