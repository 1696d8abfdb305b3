"""Utility modules for BarkBuddy."""

from .auth import AuthIdentity, CurrentUser, SessionIdentity
from .image_fetcher import ImageFetcher, decode_image
from .profile_store import (
    SERVER_TIMESTAMP,
    FirestoreProfileStore,
    InMemoryProfileStore,
    ProfileStore,
    StoredDocument,
    get_profile_store,
)
from .validators import field_warnings, parse_hourly_rate, sanitize_string

__all__ = [
    "AuthIdentity",
    "CurrentUser",
    "SessionIdentity",
    "ImageFetcher",
    "decode_image",
    "SERVER_TIMESTAMP",
    "FirestoreProfileStore",
    "InMemoryProfileStore",
    "ProfileStore",
    "StoredDocument",
    "get_profile_store",
    "field_warnings",
    "parse_hourly_rate",
    "sanitize_string",
]
