"""Unit tests for the Jot service HTTP client."""

import json

import httpx
import pytest

from jot.api import APIError, NotesAPIClient
from jot.audio import AudioClip
from jot.commands.interpreter import CommandAction
from jot.errors import NoAudioError
from jot.notes.models import Category, Note

CLIP = AudioClip(data=b"audio", filename="memo.m4a")


def make_client(handler) -> NotesAPIClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return NotesAPIClient("http://jot.local:5000/", client=http)


class TestNotesAPIClient:
    """Tests for NotesAPIClient."""

    def test_process_capture_posts_form(self) -> None:
        """Test the capture request carries audio, sections and timezone."""
        seen: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(
                200,
                json={"notes": [{"rawText": "buy milk", "title": "Buy milk", "category": "shopping"}, "junk"]},
            )

        drafts = make_client(handler).process_capture(CLIP, [], "Europe/Berlin")

        assert len(drafts) == 1
        assert drafts[0].category is Category.SHOPPING
        request = seen["request"]
        assert str(request.url) == "http://jot.local:5000/transcribe"
        body = request.read()
        assert b'name="audio"; filename="memo.m4a"' in body
        assert b"Europe/Berlin" in body
        assert b'name="customSections"' in body

    def test_process_query_sends_notes(self) -> None:
        """Test the query request carries the caller's notes."""
        note = Note(id="n1", raw_text="x", title="Groceries", category=Category.SHOPPING)
        seen: dict[str, bytes] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.read()
            return httpx.Response(
                200,
                json={"query": "q", "response": "Done", "matchedNotes": [note.to_dict()], "action": "complete"},
            )

        result = make_client(handler).process_query(CLIP, [note], [], "America/New_York")

        assert result.action is CommandAction.COMPLETE
        assert result.matched_note_ids == ["n1"]
        assert json.dumps([note.to_dict()]).encode() in seen["body"]

    def test_error_body_message(self) -> None:
        """Test service errors carry the message and status."""
        client = make_client(lambda request: httpx.Response(400, json={"error": "No audio file provided"}))

        with pytest.raises(APIError) as exc_info:
            client.process_capture(CLIP, [], "UTC")

        assert str(exc_info.value) == "No audio file provided"
        assert exc_info.value.status_code == 400

    def test_plain_text_error_uses_status(self) -> None:
        """Test a non-JSON error page still reports the HTTP status."""
        client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(APIError) as exc_info:
            client.process_capture(CLIP, [], "UTC")

        assert str(exc_info.value) == "Service returned HTTP 502"
        assert exc_info.value.status_code == 502

    def test_invalid_json(self) -> None:
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(APIError, match="invalid JSON"):
            client.process_capture(CLIP, [], "UTC")

    def test_missing_notes_list(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json={"drafts": []}))

        with pytest.raises(APIError):
            client.process_capture(CLIP, [], "UTC")

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(APIError, match="Failed to reach"):
            make_client(handler).process_capture(CLIP, [], "UTC")

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(APIError, match="timed out"):
            make_client(handler).process_query(CLIP, [], [], "UTC")

    def test_empty_clip_not_sent(self) -> None:
        """Test empty clips are rejected locally."""
        client = make_client(lambda request: pytest.fail("request should not be sent"))

        with pytest.raises(NoAudioError):
            client.process_capture(AudioClip(data=b""), [], "UTC")
