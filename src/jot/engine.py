"""Composition root wiring stores, reminders and the voice pipeline."""

import logging
from collections.abc import Callable

from .backend import VoiceBackend, create_local_backend
from .commands.dispatch import CommandDispatcher
from .config import JotConfig
from .config.settings import Settings, SettingsStore
from .notes.store import NoteStore, SectionStore
from .pipeline import VoicePipeline
from .reminders.queue import Notification, NotificationQueue
from .reminders.scheduler import ReminderScheduler
from .storage import create_blob_store
from .storage.blob import BlobStore

logger = logging.getLogger(__name__)


class JotEngine:
    """All device-side components sharing one blob store."""

    def __init__(
        self,
        blob_store: BlobStore,
        backend: VoiceBackend,
        reschedule_on_unarchive: bool = False,
        on_deliver: Callable[[Notification], None] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            blob_store: Backing key-value store for all persisted state
            backend: Transcription and understanding backend
            reschedule_on_unarchive: Schedule a fresh reminder on unarchive
            on_deliver: Called when a reminder notification fires
        """
        self.blob_store = blob_store
        self.backend = backend
        self.settings = SettingsStore(blob_store)
        self.notes = NoteStore(blob_store)
        self.sections = SectionStore(blob_store)
        self.notifications = NotificationQueue(blob_store, on_deliver=on_deliver)
        self.scheduler = ReminderScheduler(
            self.notifications, blob_store, get_settings=self._current_settings
        )
        self.dispatcher = CommandDispatcher(
            self.notes,
            self.sections,
            scheduler=self.scheduler,
            reschedule_on_unarchive=reschedule_on_unarchive,
        )
        self.pipeline = VoicePipeline(
            backend,
            self.notes,
            self.sections,
            self.dispatcher,
            scheduler=self.scheduler,
            get_settings=self._current_settings,
        )

    @classmethod
    def from_config(
        cls,
        config: JotConfig,
        use_mocks: bool = False,
        backend: VoiceBackend | None = None,
    ) -> "JotEngine":
        """Create an engine from configuration.

        Args:
            config: Jot configuration
            use_mocks: Use mock transcriber and language model
            backend: Backend to use instead of the in-process one

        Returns:
            Configured JotEngine

        Raises:
            ValueError: If a provider is unknown or its API key is missing.
            PersistenceError: If the blob store cannot be opened.
        """
        blob_store = create_blob_store(config.storage)
        if backend is None:
            backend = create_local_backend(config, use_mocks=use_mocks)

        engine = cls(
            blob_store,
            backend,
            reschedule_on_unarchive=config.reminders.reschedule_on_unarchive,
        )
        logger.info(
            f"Engine ready: {len(engine.notes.notes)} notes, "
            f"{len(engine.sections.sections)} sections"
        )
        return engine

    def _current_settings(self) -> Settings:
        return self.settings.settings


__all__ = ["JotEngine"]
