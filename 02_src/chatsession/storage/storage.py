"""SQLite storage implementation."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..errors import error_from_kind
from ..models import (
    Attachment,
    LoadingState,
    Message,
    MessageState,
    Participant,
    TraceEvent,
)


def _parse_timestamp(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class IStorage(Protocol):
    """Persistent storage for transcripts and trace events (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Messages
    async def save_message(
        self, conversation_id: str, position: int, message: Message
    ) -> None:
        """Insert or replace a message and its attachments."""
        ...

    async def get_messages(self, conversation_id: str) -> list[Message]:
        """Get messages for a conversation in log order."""
        ...

    async def list_conversations(self, limit: int = 100) -> list[dict]:
        """Summaries of stored conversations, most recent first."""
        ...

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self._db_path)
        await self._conn.execute("PRAGMA foreign_keys = ON")

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Messages
    async def save_message(
        self, conversation_id: str, position: int, message: Message
    ) -> None:
        """Insert or replace a message and its attachments."""
        conn = self._require_conn()

        error_kind = None
        error_message = None
        if message.error is not None:
            kind = getattr(message.error, "kind", None)
            error_kind = kind.value if kind is not None else None
            error_message = str(message.error)

        await conn.execute(
            """
            INSERT OR REPLACE INTO messages
            (id, conversation_id, position, participant, content, state,
             error_kind, error_message, grounding_metadata, timestamp)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                message.id,
                conversation_id,
                position,
                message.participant.value,
                message.content,
                message.state.value,
                error_kind,
                error_message,
                json.dumps(message.grounding_metadata)
                if message.grounding_metadata is not None
                else None,
                message.timestamp.isoformat(),
            ),
        )

        for index, attachment in enumerate(message.attachments):
            await conn.execute(
                """
                INSERT OR REPLACE INTO attachments
                (id, message_id, position, mime_type, display_name, data, url,
                 loading_state)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    attachment.id or str(uuid.uuid4()),
                    message.id,
                    index,
                    attachment.mime_type,
                    attachment.display_name,
                    attachment.data,
                    attachment.url,
                    attachment.loading_state.value,
                ),
            )

        await conn.commit()

    async def get_messages(self, conversation_id: str) -> list[Message]:
        """Get messages for a conversation in log order."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT id, participant, content, state, error_kind, error_message,
                   grounding_metadata, timestamp
            FROM messages
            WHERE conversation_id = ?
            ORDER BY position ASC
            """,
            (conversation_id,),
        )
        rows = await cursor.fetchall()

        messages = []
        for row in rows:
            att_cursor = await conn.execute(
                """
                SELECT id, mime_type, display_name, data, url, loading_state
                FROM attachments
                WHERE message_id = ?
                ORDER BY position ASC
                """,
                (row[0],),
            )
            att_rows = await att_cursor.fetchall()

            attachments = [
                Attachment(
                    id=att[0],
                    mime_type=att[1],
                    display_name=att[2],
                    data=att[3],
                    url=att[4],
                    loading_state=LoadingState(att[5]),
                )
                for att in att_rows
            ]

            error = None
            if row[5] is not None:
                error = error_from_kind(row[4], row[5])

            messages.append(
                Message(
                    id=row[0],
                    participant=Participant(row[1]),
                    content=row[2],
                    state=MessageState(row[3]),
                    error=error,
                    attachments=attachments,
                    grounding_metadata=json.loads(row[6]) if row[6] else None,
                    timestamp=_parse_timestamp(row[7]),
                )
            )

        return messages

    async def list_conversations(self, limit: int = 100) -> list[dict]:
        """Summaries of stored conversations, most recent first."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT conversation_id, COUNT(*), MIN(timestamp), MAX(timestamp)
            FROM messages
            GROUP BY conversation_id
            ORDER BY MAX(timestamp) DESC
            LIMIT ?
            """,
            (limit,),
        )
        rows = await cursor.fetchall()

        return [
            {
                "conversation_id": row[0],
                "message_count": row[1],
                "started_at": _parse_timestamp(row[2]),
                "updated_at": _parse_timestamp(row[3]),
            }
            for row in rows
        ]

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, data, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                json.dumps(event.data, default=str),
                event.timestamp.isoformat(),
            ),
        )
        await conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters, newest first."""
        conn = self._require_conn()

        conditions = []
        params: list = []

        if after:
            if after.tzinfo is None:
                after = after.replace(tzinfo=timezone.utc)
            conditions.append("timestamp > ?")
            params.append(after.astimezone(timezone.utc).isoformat())
        if event_types:
            placeholders = ",".join("?" * len(event_types))
            conditions.append(f"event_type IN ({placeholders})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, event_type, actor, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC, rowid DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            TraceEvent(
                id=row[0],
                event_type=row[1],
                actor=row[2],
                data=json.loads(row[3]),
                timestamp=_parse_timestamp(row[4]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._require_conn()

        for table in ["attachments", "messages", "trace_events"]:
            await conn.execute(f"DELETE FROM {table}")

        await conn.commit()
