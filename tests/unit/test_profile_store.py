"""
Unit tests for profile stores.
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import Mock

from barkbuddy.exceptions import StoreQueryError, StoreWriteError
from barkbuddy.utils.profile_store import (
    SERVER_TIMESTAMP,
    FirestoreProfileStore,
    InMemoryProfileStore,
    StoredDocument,
)


class TestInMemoryProfileStore:
    """Unit tests for InMemoryProfileStore."""

    @pytest.fixture
    def store(self):
        store = InMemoryProfileStore()
        store.add_document("walkers", {"email": "jo@example.com", "firstName": "Jo"}, document_id="w1")
        return store

    @pytest.mark.asyncio
    async def test_find_by_email(self, store):
        document = await store.find_by_email("walkers", "jo@example.com")

        assert isinstance(document, StoredDocument)
        assert document.id == "w1"
        assert document.data["firstName"] == "Jo"
        assert document.update_time is not None

    @pytest.mark.asyncio
    async def test_find_by_email_no_match(self, store):
        assert await store.find_by_email("walkers", "nobody@example.com") is None
        assert await store.find_by_email("owners", "jo@example.com") is None

    @pytest.mark.asyncio
    async def test_update_is_partial_and_stamps_time(self, store):
        before = (await store.find_by_email("walkers", "jo@example.com")).update_time

        await store.update_fields("walkers", "w1", {"bio": "Hi", "updatedAt": SERVER_TIMESTAMP})

        saved = store.get_document("walkers", "w1")
        assert saved["firstName"] == "Jo"
        assert saved["bio"] == "Hi"
        assert isinstance(saved["updatedAt"], datetime)
        after = (await store.find_by_email("walkers", "jo@example.com")).update_time
        assert after > before

    @pytest.mark.asyncio
    async def test_update_missing_document(self, store):
        with pytest.raises(StoreWriteError):
            await store.update_fields("walkers", "nope", {"bio": "Hi"})

    @pytest.mark.asyncio
    async def test_injected_failures(self, store):
        store.query_errors["walkers"] = "unavailable"
        with pytest.raises(StoreQueryError, match="unavailable"):
            await store.find_by_email("walkers", "jo@example.com")

        store.write_error = "permission denied"
        with pytest.raises(StoreWriteError, match="permission denied"):
            await store.update_fields("walkers", "w1", {"bio": "Hi"})


class TestFirestoreProfileStore:
    """Unit tests for FirestoreProfileStore against a mocked client."""

    @pytest.fixture
    def client(self):
        return Mock()

    @pytest.fixture
    def store(self, client):
        return FirestoreProfileStore(project_id="test-project", client=client)

    @pytest.mark.asyncio
    async def test_find_by_email(self, store, client):
        updated = datetime(2025, 4, 21, 12, 0, tzinfo=timezone.utc)
        snapshot = Mock(id="abc123", update_time=updated)
        snapshot.to_dict.return_value = {"email": "jo@example.com", "firstName": "Jo"}
        query = client.collection.return_value.where.return_value.limit.return_value
        query.get.return_value = [snapshot]

        document = await store.find_by_email("walkers", "jo@example.com")

        client.collection.assert_called_with("walkers")
        client.collection.return_value.where.return_value.limit.assert_called_once_with(1)
        assert document.id == "abc123"
        assert document.data["firstName"] == "Jo"
        assert document.update_time == updated

    @pytest.mark.asyncio
    async def test_find_by_email_empty(self, store, client):
        client.collection.return_value.where.return_value.limit.return_value.get.return_value = []

        assert await store.find_by_email("owners", "jo@example.com") is None

    @pytest.mark.asyncio
    async def test_query_failure_wrapped(self, store, client):
        query = client.collection.return_value.where.return_value.limit.return_value
        query.get.side_effect = RuntimeError("503 Service Unavailable")

        with pytest.raises(StoreQueryError, match="503 Service Unavailable"):
            await store.find_by_email("owners", "jo@example.com")

    @pytest.mark.asyncio
    async def test_update_maps_server_timestamp(self, store, client):
        from google.cloud import firestore

        await store.update_fields("walkers", "abc123", {"bio": "Hi", "updatedAt": SERVER_TIMESTAMP})

        client.collection.assert_called_with("walkers")
        client.collection.return_value.document.assert_called_once_with("abc123")
        doc_ref = client.collection.return_value.document.return_value
        payload = doc_ref.update.call_args.args[0]
        assert payload["bio"] == "Hi"
        assert payload["updatedAt"] is firestore.SERVER_TIMESTAMP

    @pytest.mark.asyncio
    async def test_update_failure_wrapped(self, store, client):
        doc_ref = client.collection.return_value.document.return_value
        doc_ref.update.side_effect = RuntimeError("404 No document to update")

        with pytest.raises(StoreWriteError, match="No document to update"):
            await store.update_fields("walkers", "abc123", {"bio": "Hi"})
