"""Tests for AttachmentStore."""

from chatsession.attachments import AttachmentStore
from chatsession.models import Attachment


def _attachment(name: str) -> Attachment:
    return Attachment(mime_type="image/png", display_name=name, data=b"x")


class TestAttachmentStore:
    """Tests for AttachmentStore operations."""

    def test_add_keeps_insertion_order(self):
        """Test that attachments are returned in the order they were added."""
        store = AttachmentStore()
        a, b, c = _attachment("a"), _attachment("b"), _attachment("c")
        store.add(a)
        store.add(b)
        store.add(c)

        assert store.get_all() == [a, b, c]
        assert len(store) == 3

    def test_get_all_returns_copy(self):
        """Test that mutating the returned list does not touch the store."""
        store = AttachmentStore()
        store.add(_attachment("a"))

        store.get_all().clear()

        assert len(store) == 1

    def test_drain_all_empties_store(self):
        """Test that drain_all returns everything and leaves nothing."""
        store = AttachmentStore()
        a, b = _attachment("a"), _attachment("b")
        store.add(a)
        store.add(b)

        drained = store.drain_all()

        assert drained == [a, b]
        assert store.get_all() == []
        assert store.drain_all() == []

    def test_remove_by_id(self):
        """Test removing one attachment keeps the others."""
        store = AttachmentStore()
        a, b = _attachment("a"), _attachment("b")
        store.add(a)
        store.add(b)

        assert store.remove(a.id) is True
        assert store.get_all() == [b]
        assert store.remove("missing") is False

    def test_get(self):
        """Test lookup by id."""
        a = _attachment("a")
        store = AttachmentStore([a])

        assert store.get(a.id) is a
        assert store.get("missing") is None

    def test_clear(self):
        """Test that clear drops all attachments."""
        store = AttachmentStore([_attachment("a"), _attachment("b")])

        store.clear()

        assert len(store) == 0

    def test_initial_list_is_copied(self):
        """Test that the store does not alias the seed list."""
        seed = [_attachment("a")]
        store = AttachmentStore(seed)

        store.drain_all()

        assert len(seed) == 1
