"""Tests for Tracker."""

from datetime import datetime, timezone

import pytest

from chatsession.models import Topic


class TestTrackerTrack:
    """Tests for Tracker.track() method."""

    @pytest.mark.asyncio
    async def test_track_creates_event(self, tracker, storage):
        """Test that track() creates a TraceEvent."""
        await tracker.track(
            event_type="test_event",
            actor="test_actor",
            data={"key": "value"},
        )

        events = await storage.get_trace_events()
        assert len(events) == 1
        assert events[0].event_type == "test_event"
        assert events[0].actor == "test_actor"
        assert events[0].data == {"key": "value"}
        assert events[0].id

    @pytest.mark.asyncio
    async def test_track_generates_timestamp(self, tracker, storage):
        """Test that track() stamps the event with the current time."""
        before = datetime.now(timezone.utc)
        await tracker.track(event_type="test_event", actor="test_actor", data={})
        after = datetime.now(timezone.utc)

        events = await storage.get_trace_events()
        assert before <= events[0].timestamp <= after


class TestTrackerSubscription:
    """Tests for Tracker EventBus subscription."""

    @pytest.mark.asyncio
    async def test_subscription_creates_events(self, tracker, event_bus, storage):
        """Test that tracked topics become TraceEvents."""
        await tracker.start()

        await event_bus.emit(
            Topic.REQUEST_FINISHED, {"outcome": "completed"}, "test_source"
        )

        events = await storage.get_trace_events()
        assert len(events) == 1
        assert events[0].event_type == "request_finished"
        assert events[0].actor == "test_source"
        assert events[0].data == {"outcome": "completed"}

    @pytest.mark.asyncio
    async def test_stream_updates_not_tracked(self, tracker, event_bus, storage):
        """Test that per-chunk updates are skipped."""
        await tracker.start()

        await event_bus.emit(Topic.MESSAGE_UPDATED, {"delta": "x"}, "test_source")

        assert await storage.get_trace_events() == []

    @pytest.mark.asyncio
    async def test_stop_unsubscribes(self, tracker, event_bus, storage):
        """Test that nothing is tracked after stop()."""
        await tracker.start()
        await tracker.stop()

        await event_bus.emit(Topic.MESSAGES_CLEARED, {}, "test_source")

        assert await storage.get_trace_events() == []
