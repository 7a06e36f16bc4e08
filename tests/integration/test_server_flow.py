"""Integration tests for the HTTP service.

Drives the FastAPI app with TestClient, and runs the HTTP client
against it so both sides of the wire format are exercised together.
"""

import json

import pytest
from fastapi.testclient import TestClient

from jot.api import APIError, NotesAPIClient
from jot.audio import AudioClip
from jot.backend import LocalBackend
from jot.commands.interpreter import CommandAction, CommandInterpreter
from jot.engine import JotEngine
from jot.llm import LLMAuthError, MockLanguageModel
from jot.notes.extractor import NoteExtractor
from jot.notes.models import Category, CustomSection, Note
from jot.server import create_app
from jot.storage.blob import MemoryBlobStore
from jot.stt import MockTranscriber

AUDIO = {"audio": ("memo.m4a", b"fake-audio", "audio/mp4")}


@pytest.fixture
def transcriber() -> MockTranscriber:
    return MockTranscriber("Remind me to call mom tomorrow, also buy milk")


@pytest.fixture
def llm() -> MockLanguageModel:
    return MockLanguageModel()


@pytest.fixture
def client(transcriber: MockTranscriber, llm: MockLanguageModel) -> TestClient:
    backend = LocalBackend(transcriber, NoteExtractor(llm), CommandInterpreter(llm))
    return TestClient(create_app(backend))


class TestTranscribeEndpoint:
    """Tests for POST /transcribe."""

    def test_returns_drafts(self, client: TestClient, llm: MockLanguageModel) -> None:
        """Test a recording with sections produces tagged drafts."""
        llm.set_response(
            json.dumps(
                {
                    "notes": [
                        {"rawText": "call mom tomorrow", "title": "Call mom", "category": "tomorrow", "tags": ["family"]},
                        {"rawText": "buy milk", "title": "Buy milk", "category": "shopping", "tags": ["Work"]},
                    ]
                }
            )
        )

        response = client.post(
            "/transcribe",
            files=AUDIO,
            data={
                "customSections": json.dumps([{"name": "Family", "keywords": ["mom"]}]),
                "timezone": "Europe/Berlin",
            },
        )

        assert response.status_code == 200
        notes = response.json()["notes"]
        assert [n["title"] for n in notes] == ["Call mom", "Buy milk"]
        assert notes[0]["tags"] == ["Family"]
        assert notes[1]["tags"] == []
        assert notes[1]["dueDate"] is None
        assert "Europe/Berlin" in llm.last_system_prompt

    def test_missing_audio(self, client: TestClient, transcriber: MockTranscriber) -> None:
        """Test a request without audio is rejected with 400."""
        response = client.post("/transcribe", data={"timezone": "America/New_York"})

        assert response.status_code == 400
        assert response.json() == {"error": "No audio file provided"}
        assert transcriber.call_count == 0

    def test_empty_audio(self, client: TestClient) -> None:
        response = client.post("/transcribe", files={"audio": ("memo.m4a", b"", "audio/mp4")})

        assert response.status_code == 400
        assert response.json() == {"error": "No audio file provided"}

    def test_invalid_sections_json(self, client: TestClient) -> None:
        response = client.post("/transcribe", files=AUDIO, data={"customSections": "{oops"})

        assert response.status_code == 400
        assert "customSections" in response.json()["error"]

    def test_upstream_failure(self, client: TestClient, transcriber: MockTranscriber) -> None:
        """Test transcription failures come back as an error body."""
        transcriber.set_error("Transcription service returned an error.")

        response = client.post("/transcribe", files=AUDIO)

        assert response.status_code == 502
        assert response.json() == {"error": "Transcription service returned an error."}

    def test_llm_auth_failure(self, client: TestClient, llm: MockLanguageModel) -> None:
        llm.set_error(LLMAuthError("Invalid API key."))

        response = client.post("/transcribe", files=AUDIO)

        assert response.status_code == 502
        assert "error" in response.json()


class TestQueryEndpoint:
    """Tests for POST /query."""

    @pytest.fixture
    def notes_field(self) -> str:
        notes = [
            Note(id="n1", raw_text="milk, eggs", title="Grocery list", category=Category.SHOPPING),
            Note(id="n2", raw_text="call mom", title="Call mom", category=Category.TOMORROW),
        ]
        return json.dumps([n.to_dict() for n in notes])

    def test_returns_command_result(
        self, client: TestClient, llm: MockLanguageModel, notes_field: str
    ) -> None:
        """Test matched notes are returned in full and unknown ids dropped."""
        llm.set_response(
            json.dumps(
                {"response": "Done!", "matchedNoteIds": ["n1", "zzz"], "action": "complete"}
            )
        )

        response = client.post("/query", files=AUDIO, data={"notes": notes_field})

        assert response.status_code == 200
        body = response.json()
        assert body["response"] == "Done!"
        assert body["action"] == "complete"
        assert [n["id"] for n in body["matchedNotes"]] == ["n1"]
        assert body["matchedNotes"][0]["title"] == "Grocery list"
        assert "America/New_York" in llm.last_system_prompt

    def test_missing_audio(self, client: TestClient, notes_field: str) -> None:
        response = client.post("/query", data={"notes": notes_field})

        assert response.status_code == 400
        assert response.json() == {"error": "No audio file provided"}

    def test_note_without_id(self, client: TestClient) -> None:
        response = client.post("/query", files=AUDIO, data={"notes": json.dumps([{"title": "x"}])})

        assert response.status_code == 400

    def test_malformed_model_reply(self, client: TestClient, llm: MockLanguageModel) -> None:
        """Test a bad model reply still yields a 200 fallback result."""
        llm.set_response("nope")

        response = client.post("/query", files=AUDIO, data={"notes": "[]"})

        assert response.status_code == 200
        assert response.json()["response"] == "I couldn't find anything related to that."
        assert response.json()["action"] is None


class TestRemoteBackend:
    """Tests for running the device-side pipeline against the service."""

    @pytest.fixture
    def engine(self, client: TestClient) -> JotEngine:
        remote = NotesAPIClient("http://testserver", client=client)
        return JotEngine(MemoryBlobStore(), remote)

    def test_capture_through_service(self, engine: JotEngine, llm: MockLanguageModel) -> None:
        """Test notes captured remotely land in the local store."""
        engine.sections.add_section("Family", keywords=["mom"])
        llm.set_response(
            '{"notes": [{"rawText": "call mom tomorrow", "title": "Call mom", "category": "tomorrow", "tags": ["Family"]}]}'
        )

        created = engine.pipeline.capture_notes(AudioClip(data=b"audio"))

        assert [n.title for n in created] == ["Call mom"]
        assert created[0].tags == ["Family"]
        assert engine.scheduler.handle_for(created[0].id) is not None
        assert '"Family": keywords = [mom]' in llm.last_system_prompt

    def test_query_through_service(self, engine: JotEngine, llm: MockLanguageModel) -> None:
        """Test a remote delete command is applied locally."""
        llm.set_response('{"notes": [{"rawText": "buy milk", "title": "Buy milk", "category": "shopping"}]}')
        note = engine.pipeline.capture_notes(AudioClip(data=b"audio"))[0]
        llm.set_response(
            json.dumps({"response": "Deleted.", "matchedNoteIds": [note.id], "action": "delete"})
        )

        result = engine.pipeline.ask(AudioClip(data=b"audio"))

        assert result.action is CommandAction.DELETE
        assert engine.notes.notes == []
        assert engine.scheduler.handle_for(note.id) is None

    def test_service_error_raises_api_error(
        self, engine: JotEngine, transcriber: MockTranscriber
    ) -> None:
        transcriber.set_error("Transcription service returned an error.")

        with pytest.raises(APIError) as exc_info:
            engine.pipeline.capture_notes(AudioClip(data=b"audio"))

        assert exc_info.value.status_code == 502
        assert engine.notes.notes == []

    def test_sections_sent_without_ids(self, client: TestClient, llm: MockLanguageModel) -> None:
        """Test the client sends only name and keywords for sections."""
        llm.set_response('{"notes": []}')
        remote = NotesAPIClient("http://testserver/", client=client)

        drafts = remote.process_capture(
            AudioClip(data=b"audio"),
            [CustomSection(id="s1", name="Work", icon="briefcase", keywords=["boss"])],
            "America/New_York",
        )

        assert drafts == []
        assert '"Work": keywords = [boss]' in llm.last_system_prompt
