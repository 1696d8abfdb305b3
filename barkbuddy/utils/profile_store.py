"""
Profile document storage.
Looks up profile documents by email and applies partial updates, against
Firestore in production or an in-memory store in development and tests.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from loguru import logger
from pydantic import BaseModel, Field

from ..config import settings
from ..exceptions import StoreQueryError, StoreWriteError


class _ServerTimestamp:
    """Placeholder for a timestamp assigned by the store at write time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class StoredDocument(BaseModel):
    """A profile document as returned by a store query."""

    id: str = Field(..., description="Document identifier within its collection")
    data: Dict[str, Any] = Field(default_factory=dict)
    update_time: Optional[datetime] = Field(default=None, description="Last write time, if the store tracks it")


class ProfileStore(ABC):
    """Document-database operations the profile screen relies on."""

    @abstractmethod
    async def find_by_email(self, collection: str, email: str) -> Optional[StoredDocument]:
        """
        Find the first document in a collection whose `email` field matches.

        Raises:
            StoreQueryError: On transport or database failure
        """

    @abstractmethod
    async def update_fields(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        """
        Apply a partial update to one document.

        Raises:
            StoreWriteError: On transport or database failure
        """


class FirestoreProfileStore(ProfileStore):
    """Profile store backed by Google Cloud Firestore."""

    def __init__(self, project_id: Optional[str] = None, client=None):
        self.project_id = project_id or settings.gcp_project_id
        self._client = client

    @property
    def client(self):
        """Get or create Firestore client."""
        if self._client is None:
            from google.cloud import firestore

            if settings.gcp_credentials_path:
                self._client = firestore.Client.from_service_account_json(
                    settings.gcp_credentials_path, project=self.project_id
                )
            else:
                self._client = firestore.Client(project=self.project_id)
        return self._client

    async def find_by_email(self, collection: str, email: str) -> Optional[StoredDocument]:
        logger.debug(f"Querying {collection} for email={email}")

        # The SDK is blocking; keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            snapshots = await loop.run_in_executor(None, self._query_by_email, collection, email)
        except Exception as e:
            logger.error(f"Firestore query on {collection} failed: {e}")
            raise StoreQueryError(str(e)) from e

        if not snapshots:
            return None

        snapshot = snapshots[0]
        return StoredDocument(
            id=snapshot.id,
            data=snapshot.to_dict() or {},
            update_time=snapshot.update_time,
        )

    async def update_fields(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        from google.cloud import firestore

        payload = {
            key: firestore.SERVER_TIMESTAMP if value is SERVER_TIMESTAMP else value
            for key, value in fields.items()
        }
        doc_ref = self.client.collection(collection).document(document_id)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, doc_ref.update, payload)
        except Exception as e:
            logger.error(f"Firestore update of {collection}/{document_id} failed: {e}")
            raise StoreWriteError(str(e)) from e

        logger.info(f"Updated {len(payload)} fields on {collection}/{document_id}")

    def _query_by_email(self, collection: str, email: str) -> list:
        from google.cloud.firestore_v1.base_query import FieldFilter

        query = (
            self.client.collection(collection)
            .where(filter=FieldFilter("email", "==", email))
            .limit(1)
        )
        return list(query.get())


class InMemoryProfileStore(ProfileStore):
    """
    Dictionary-backed profile store for development and testing.

    Failures can be injected per collection through `query_errors` and for
    every write through `write_error`.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.update_times: Dict[Tuple[str, str], datetime] = {}
        self.writes: List[Tuple[str, str, Dict[str, Any]]] = []
        self.query_errors: Dict[str, str] = {}
        self.write_error: Optional[str] = None
        self._last_tick: Optional[datetime] = None

    def add_document(
        self,
        collection: str,
        data: Dict[str, Any],
        document_id: Optional[str] = None
    ) -> str:
        """Insert a document and return its identifier."""
        document_id = document_id or uuid.uuid4().hex[:20]
        self.collections.setdefault(collection, {})[document_id] = dict(data)
        self.update_times[(collection, document_id)] = self._tick()
        return document_id

    def delete_document(self, collection: str, document_id: str) -> None:
        """Remove a document if present."""
        self.collections.get(collection, {}).pop(document_id, None)
        self.update_times.pop((collection, document_id), None)

    def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Get a copy of a stored document's fields."""
        data = self.collections.get(collection, {}).get(document_id)
        return dict(data) if data is not None else None

    async def find_by_email(self, collection: str, email: str) -> Optional[StoredDocument]:
        if collection in self.query_errors:
            raise StoreQueryError(self.query_errors[collection])

        for document_id, data in self.collections.get(collection, {}).items():
            if data.get("email") == email:
                return StoredDocument(
                    id=document_id,
                    data=dict(data),
                    update_time=self.update_times.get((collection, document_id)),
                )
        return None

    async def update_fields(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        if self.write_error is not None:
            raise StoreWriteError(self.write_error)

        documents = self.collections.get(collection, {})
        if document_id not in documents:
            raise StoreWriteError(f"No document to update: {collection}/{document_id}")

        now = self._tick()
        payload = {
            key: now if value is SERVER_TIMESTAMP else value
            for key, value in fields.items()
        }
        documents[document_id].update(payload)
        self.update_times[(collection, document_id)] = now
        self.writes.append((collection, document_id, dict(fields)))

    def _tick(self) -> datetime:
        """Current time, strictly later than any time handed out before."""
        now = datetime.now(timezone.utc)
        if self._last_tick is not None and now <= self._last_tick:
            now = self._last_tick + timedelta(microseconds=1)
        self._last_tick = now
        return now


_store: Optional[ProfileStore] = None


def get_profile_store() -> ProfileStore:
    """Get or create the profile store selected by settings."""
    global _store
    if _store is None:
        if settings.mock_apis:
            logger.info("Using in-memory profile store")
            _store = InMemoryProfileStore()
        else:
            _store = FirestoreProfileStore()
    return _store
