"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatsession.models import Chunk, GenerationRequest, Response  # noqa: E402


class FakeTransport:
    """Transport double.

    Streams replay the next queued script; with no script left, each stream
    reads from its own queue in ``feeds`` so a test can push chunks by hand.
    Strings become chunks, exceptions are raised, ``None`` ends a feed.
    With ``linger`` set, a cancelled ``generate`` stays inside the transport
    until ``gate`` opens, like a call past its point of no return.
    """

    def __init__(self):
        self.requests: list[GenerationRequest] = []
        self.scripts: list[list] = []
        self.feeds: list[asyncio.Queue] = []
        self.response = Response(text="Test response")
        self.generate_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.ignore_cancel = False
        self.linger = False
        self.active = 0
        self.max_active = 0

    def script(self, *items) -> None:
        self.scripts.append(list(items))

    def _enter(self) -> None:
        self.active += 1
        self.max_active = max(self.max_active, self.active)

    def _exit(self) -> None:
        self.active -= 1

    async def generate(self, request: GenerationRequest) -> Response:
        self.requests.append(request)
        self._enter()
        try:
            if self.gate is not None:
                try:
                    await self.gate.wait()
                except asyncio.CancelledError:
                    if self.linger:
                        await self.gate.wait()
                        raise
                    if not self.ignore_cancel:
                        raise
            else:
                await asyncio.sleep(0)
            if self.generate_error is not None:
                raise self.generate_error
            return self.response
        finally:
            self._exit()

    async def generate_stream(self, request: GenerationRequest):
        self.requests.append(request)
        self._enter()
        try:
            if self.scripts:
                for item in self.scripts.pop(0):
                    await asyncio.sleep(0)
                    if isinstance(item, Exception):
                        raise item
                    yield Chunk(text=item)
                return

            feed: asyncio.Queue = asyncio.Queue()
            self.feeds.append(feed)
            while True:
                item = await feed.get()
                if item is None:
                    return
                if isinstance(item, Exception):
                    raise item
                yield Chunk(text=item)
        finally:
            self._exit()


@pytest.fixture
def transport():
    """Create fake transport."""
    return FakeTransport()


@pytest.fixture
def wait_until():
    """Poll a predicate until it holds (1s timeout)."""

    async def _wait_until(predicate, timeout: float = 1.0) -> None:
        async def _poll():
            while not predicate():
                await asyncio.sleep(0)

        await asyncio.wait_for(_poll(), timeout)

    return _wait_until


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from chatsession.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def event_bus():
    """Create EventBus."""
    from chatsession.event_bus import EventBus

    return EventBus()


@pytest.fixture
def tracker(storage, event_bus):
    """Create Tracker with storage and event bus."""
    from chatsession.tracker import Tracker

    return Tracker(event_bus=event_bus, storage=storage)


@pytest_asyncio.fixture
async def session(transport):
    """Create a bare SessionController (no bus, no storage)."""
    from chatsession.session import SessionController

    sc = SessionController(transport=transport)
    yield sc
    await sc.close()


@pytest_asyncio.fixture
async def wired_session(transport, event_bus, storage, tracker):
    """Create a SessionController with bus, storage and tracker attached."""
    from chatsession.session import SessionController

    await tracker.start()
    sc = SessionController(transport=transport, event_bus=event_bus, storage=storage)
    yield sc
    await sc.close()
    await tracker.stop()


@pytest_asyncio.fixture
async def application(transport):
    """Create a started Application backed by the fake transport."""
    from chatsession.app import Application

    app = Application(db_path=":memory:", transport=transport)
    await app.start()
    yield app
    await app.stop()
