"""
Error types raised while loading and saving profiles.

Every error carries the message shown to the user when it reaches the
profile screen.
"""

from typing import Optional


class ProfileError(Exception):
    """Base class for profile loading and saving failures."""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NoUserError(ProfileError):
    """No authenticated identity, or the identity has no email."""

    default_message = "No user logged in"


class ProfileNotFoundError(ProfileError):
    """No profile document matches the user's email."""

    default_message = "User profile not found"


class ProfileNotLoadedError(ProfileError):
    """An edit or save was attempted before the role was resolved."""

    default_message = "Profile has not been loaded yet"


class MalformedRecordError(ProfileError):
    """A profile document does not have the expected shape."""

    default_message = "User profile is malformed"


class ProfileConflictError(ProfileError):
    """The profile document changed after it was loaded."""

    default_message = "Profile was changed elsewhere; reload before saving"


class StoreError(ProfileError):
    """Transport or database failure reported by the profile store."""


class StoreQueryError(StoreError):
    """Querying the profile store failed."""

    default_message = "Error querying profile store"


class StoreWriteError(StoreError):
    """Writing to the profile store failed."""

    default_message = "Error writing to profile store"


class ImageFetchError(ProfileError):
    """A profile image could not be downloaded or decoded."""

    default_message = "Profile image could not be loaded"
