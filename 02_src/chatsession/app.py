"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .config import resolve_db_path
from .event_bus import EventBus
from .llm import AnthropicTransport, ITransportClient
from .logging_config import get_logger
from .models import SessionConfig
from .session import SessionController
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Discard the session and all stored data."""
        ...

    async def open_session(
        self, config: SessionConfig | None = None, conversation_id: str | None = None
    ) -> SessionController:
        """Replace the current session."""
        ...

    async def resume(self, conversation_id: str) -> SessionController:
        """Open a session seeded with a stored conversation."""
        ...

    @property
    def storage(self) -> IStorage:
        ...

    @property
    def session(self) -> SessionController:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        transport: ITransportClient | None = None,
        config: SessionConfig | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._config = config

        # Components (initialized in start())
        self._storage: IStorage | None = None
        self._event_bus: EventBus | None = None
        self._tracker: ITracker | None = None
        self._transport: ITransportClient | None = transport
        self._session: SessionController | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. EventBus (no dependencies)
        self._event_bus = EventBus()

        # 3. Tracker (depends on EventBus + Storage)
        self._tracker = Tracker(self._event_bus, self._storage)
        await self._tracker.start()

        # 4. Transport (no internal dependencies)
        if self._transport is None:
            self._transport = AnthropicTransport()
        logger.info("Transport initialized")

        # 5. Session (depends on Transport, EventBus, Storage)
        await self.open_session(self._config)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._session:
            await self._session.close()
        if self._tracker:
            await self._tracker.stop()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Discard the session and all stored data."""
        if self._session:
            await self._session.close()
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")
        await self.open_session(self._config)
        logger.info("Reset complete")

    async def open_session(
        self, config: SessionConfig | None = None, conversation_id: str | None = None
    ) -> SessionController:
        """Replace the current session, stopping its in-flight request."""
        if not self._transport or not self._event_bus:
            raise RuntimeError("Application not started")

        if self._session:
            await self._session.close()

        self._session = SessionController(
            transport=self._transport,
            event_bus=self._event_bus,
            storage=self._storage,
            config=config,
            conversation_id=conversation_id,
        )
        logger.info(f"Session {self._session.conversation_id} opened")
        return self._session

    async def resume(self, conversation_id: str) -> SessionController:
        """Open a session seeded with a stored conversation."""
        messages = await self.storage.get_messages(conversation_id)
        if not messages:
            raise KeyError(conversation_id)

        base = self._config or SessionConfig()
        config = SessionConfig(
            model_name=base.model_name,
            system_instruction=base.system_instruction,
            max_tokens=base.max_tokens,
            title=base.title,
            history=messages,
        )
        return await self.open_session(config, conversation_id=conversation_id)

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def session(self) -> SessionController:
        """Get the current session."""
        if not self._session:
            raise RuntimeError("Application not started")
        return self._session
