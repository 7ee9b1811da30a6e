"""Tests for the HTTP API."""

import base64

import httpx
import pytest
import pytest_asyncio

from chatsession.api import create_fastapi_app
from chatsession.errors import NetworkError


@pytest_asyncio.fixture
async def client(application):
    """HTTP client bound to the started application."""
    app = create_fastapi_app(application)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


class TestMessagingRoutes:
    """Tests for /api/messages and session state."""

    @pytest.mark.asyncio
    async def test_send_message(self, client, application, transport):
        """Test that a message is accepted and the reply is generated."""
        transport.script("He", "llo!")

        response = await client.post("/api/messages", json={"text": "Hello"})
        assert response.status_code == 202
        accepted = response.json()
        await application.session.wait()

        messages = (await client.get("/api/messages")).json()
        assert [m["content"] for m in messages] == ["Hello", "Hello!"]
        assert messages[1]["id"] == accepted["assistant_message_id"]
        assert messages[1]["state"] == "complete"

    @pytest.mark.asyncio
    async def test_send_blank_message(self, client):
        """Test that blank input without attachments is rejected."""
        response = await client.post("/api/messages", json={"text": "  "})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_session_view_reports_error(self, client, application, transport):
        """Test that a failed request shows up in the session view."""
        transport.script("H", NetworkError("connection reset"))

        await client.post("/api/messages", json={"text": "Hi"})
        await application.session.wait()

        view = (await client.get("/api/session")).json()
        assert view["in_progress"] is False
        assert view["error"] == {"kind": "network", "message": "connection reset"}
        assert view["messages"][1]["state"] == "failed"
        assert view["messages"][1]["content"] == "H"

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, client):
        """Test that stopping with nothing in flight succeeds."""
        response = await client.post("/api/stop")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_new_chat(self, client, application, transport):
        """Test that a new chat empties the log."""
        transport.script("ok")
        await client.post("/api/messages", json={"text": "Hello"})
        await application.session.wait()

        response = await client.post("/api/chat/new")

        assert response.status_code == 200
        assert (await client.get("/api/messages")).json() == []


class TestAttachmentRoutes:
    """Tests for /api/attachments."""

    @pytest.mark.asyncio
    async def test_add_inline_attachment(self, client):
        """Test queuing a base64 payload."""
        payload = base64.b64encode(b"png").decode("ascii")

        response = await client.post(
            "/api/attachments",
            json={"mime_type": "image/png", "data": payload, "display_name": "a.png"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["kind"] == "image"
        assert body["size"] == 3
        listed = (await client.get("/api/attachments")).json()
        assert [a["id"] for a in listed] == [body["id"]]

    @pytest.mark.asyncio
    async def test_add_link(self, client):
        """Test queuing a remote reference."""
        response = await client.post(
            "/api/attachments",
            json={"mime_type": "image/jpeg", "url": "https://example.com/a.jpeg"},
        )

        assert response.status_code == 201
        assert response.json()["url"] == "https://example.com/a.jpeg"

    @pytest.mark.asyncio
    async def test_invalid_payload(self, client):
        """Test that bad input is rejected."""
        bad_data = await client.post(
            "/api/attachments", json={"mime_type": "image/png", "data": "%%%"}
        )
        empty = await client.post("/api/attachments", json={})

        assert bad_data.status_code == 400
        assert empty.status_code == 400

    @pytest.mark.asyncio
    async def test_attachments_bound_to_message(self, client, application, transport):
        """Test that queued attachments move onto the next message."""
        transport.script("A cat")
        payload = base64.b64encode(b"png").decode("ascii")
        await client.post(
            "/api/attachments", json={"mime_type": "image/png", "data": payload}
        )

        await client.post("/api/messages", json={"text": ""})
        await application.session.wait()

        messages = (await client.get("/api/messages")).json()
        assert len(messages[0]["attachments"]) == 1
        assert (await client.get("/api/attachments")).json() == []

    @pytest.mark.asyncio
    async def test_remove_attachment(self, client):
        """Test removing a queued attachment."""
        created = await client.post(
            "/api/attachments",
            json={"mime_type": "image/jpeg", "url": "https://example.com/a.jpeg"},
        )
        attachment_id = created.json()["id"]

        removed = await client.delete(f"/api/attachments/{attachment_id}")
        missing = await client.delete(f"/api/attachments/{attachment_id}")

        assert removed.status_code == 200
        assert missing.status_code == 404


class TestObservabilityRoutes:
    """Tests for trace events and conversations."""

    @pytest.mark.asyncio
    async def test_trace_events(self, client, application, transport):
        """Test that request lifecycle events are queryable."""
        transport.script("ok")
        await client.post("/api/messages", json={"text": "Hello"})
        await application.session.wait()

        response = await client.get(
            "/api/trace-events", params={"event_type": "request_finished"}
        )

        assert response.status_code == 200
        events = response.json()
        assert len(events) == 1
        assert events[0]["data"]["outcome"] == "completed"

    @pytest.mark.asyncio
    async def test_trace_events_bad_timestamp(self, client):
        """Test that an invalid after filter is rejected."""
        response = await client.get("/api/trace-events", params={"after": "yesterday"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_conversations(self, client, application, transport):
        """Test that stored conversations are listed."""
        transport.script("ok")
        await client.post("/api/messages", json={"text": "Hello"})
        await application.session.wait()

        conversations = (await client.get("/api/conversations")).json()

        assert conversations[0]["conversation_id"] == application.session.conversation_id
        assert conversations[0]["message_count"] == 2


class TestControlRoutes:
    """Tests for /api/control."""

    @pytest.mark.asyncio
    async def test_list_samples(self, client):
        """Test that presets are listed with their index."""
        samples = (await client.get("/api/control/samples")).json()

        assert samples[0]["index"] == 0
        assert samples[0]["title"] == "Travel tips"

    @pytest.mark.asyncio
    async def test_open_sample(self, client):
        """Test that opening a preset seeds the session."""
        response = await client.post("/api/control/samples/0")

        assert response.status_code == 200
        assert response.json()["title"] == "Travel tips"
        view = (await client.get("/api/session")).json()
        assert len(view["messages"]) == 4
        assert view["initial_prompt"] == "What else is important when traveling?"

    @pytest.mark.asyncio
    async def test_open_unknown_sample(self, client):
        """Test that an out-of-range preset is not found."""
        response = await client.post("/api/control/samples/99")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_resume(self, client, application, transport):
        """Test reopening a stored conversation."""
        transport.script("ok")
        await client.post("/api/messages", json={"text": "Hello"})
        await application.session.wait()
        conversation_id = application.session.conversation_id
        await client.post("/api/chat/new")

        response = await client.post(f"/api/control/resume/{conversation_id}")

        assert response.status_code == 200
        assert len((await client.get("/api/messages")).json()) == 2

    @pytest.mark.asyncio
    async def test_resume_unknown(self, client):
        """Test that an unknown conversation is not found."""
        response = await client.post("/api/control/resume/missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reset(self, client, application, transport):
        """Test that reset wipes stored conversations."""
        transport.script("ok")
        await client.post("/api/messages", json={"text": "Hello"})
        await application.session.wait()

        response = await client.post("/api/control/reset")

        assert response.status_code == 200
        assert (await client.get("/api/conversations")).json() == []
