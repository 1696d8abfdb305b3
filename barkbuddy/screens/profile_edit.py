"""
Profile Edit Screen - Load, Edit and Save
Loads the signed-in user's profile from the owner or walker collection,
holds the editable fields, and writes changes back on save.
"""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..config import settings
from ..exceptions import (
    ImageFetchError,
    NoUserError,
    ProfileConflictError,
    ProfileError,
    ProfileNotFoundError,
    ProfileNotLoadedError,
    StoreQueryError,
    StoreWriteError,
)
from ..schemas.profile import OwnerFields, RoleFields, UserRole, WalkerFields, decode_record
from ..utils.auth import AuthIdentity
from ..utils.image_fetcher import ImageFetcher
from ..utils.profile_store import SERVER_TIMESTAMP, ProfileStore, StoredDocument, get_profile_store
from ..utils.validators import field_warnings, parse_hourly_rate

PHOTO_UNAVAILABLE_MESSAGE = "Profile picture functionality is unavailable in this build of the app."
SAVE_SUCCESS_MESSAGE = "Profile updated successfully!"


class ScreenPhase(str, Enum):
    """Lifecycle of the profile screen."""
    LOADING = "loading"
    EDITING = "editing"
    SAVING = "saving"
    FAILED = "failed"


class ScreenState(BaseModel):
    """Everything the profile screen displays."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    phase: ScreenPhase = Field(default=ScreenPhase.LOADING)
    profile: Optional[RoleFields] = Field(
        default=None,
        description="Role-specific form; None until the role is resolved"
    )
    message: Optional[str] = Field(default=None, description="Status message awaiting acknowledgment")
    error: Optional[ProfileError] = Field(default=None, description="Error behind the current message")
    warnings: List[str] = Field(default_factory=list)
    profile_image: Optional[Any] = Field(default=None, description="Decoded Pillow image, if loaded")
    image_error: Optional[str] = Field(default=None)
    loaded_update_time: Optional[datetime] = Field(default=None)

    @property
    def user_type(self) -> str:
        """Display name of the resolved role, or an empty string."""
        return self.profile.role.value if self.profile is not None else ""


def build_update_payload(fields: RoleFields) -> Dict[str, Any]:
    """
    Build the partial update written on save.

    Text fields are written exactly as edited and the email is never
    included. A walker rate that does not parse is left out so the stored
    rate is kept.

    Args:
        fields: Current form values

    Returns:
        Firestore field map
    """
    payload: Dict[str, Any] = {
        "firstName": fields.first_name,
        "lastName": fields.last_name,
        "phoneNumber": fields.phone_number,
        "bio": fields.bio,
        "address": fields.address,
        "city": fields.city,
        "state": fields.state,
        "zipCode": fields.zip_code,
        "updatedAt": SERVER_TIMESTAMP,
    }

    if isinstance(fields, OwnerFields):
        payload["dogInfo"] = {
            "name": fields.dog_name,
            "breed": fields.dog_breed,
            "age": fields.dog_age,
            "size": fields.dog_size.value,
            "temperament": fields.dog_temperament,
            "specialInstructions": fields.special_instructions,
        }
    else:
        payload["experience"] = fields.experience
        rate = parse_hourly_rate(fields.hourly_rate)
        if rate is not None:
            payload["hourlyRate"] = rate
        payload["servicesOffered"] = list(fields.services_offered)

    return payload


class ProfileEditScreen:
    """
    Edit screen for the signed-in user's profile.

    Failures from `enter()` and `save()` never propagate; they end up in
    `state.message` for the UI to show and acknowledge.
    """

    def __init__(
        self,
        identity: AuthIdentity,
        store: Optional[ProfileStore] = None,
        image_fetcher: Optional[ImageFetcher] = None,
        optimistic_concurrency: Optional[bool] = None,
    ):
        self.identity = identity
        self.store = store or get_profile_store()
        self.image_fetcher = image_fetcher or ImageFetcher()
        if optimistic_concurrency is None:
            optimistic_concurrency = settings.profile_optimistic_concurrency
        self.optimistic_concurrency = optimistic_concurrency
        self.collections = {
            UserRole.DOG_OWNER: settings.firestore_collection_owners,
            UserRole.DOG_WALKER: settings.firestore_collection_walkers,
        }
        self.state = ScreenState()
        self._image_task: Optional[asyncio.Task] = None

    async def enter(self) -> ScreenState:
        """
        Load the signed-in user's profile.

        Owners are looked up first; the walker collection is only queried
        when no owner profile matches.

        Returns:
            Screen state, EDITING on success or FAILED otherwise
        """
        self._cancel_image_fetch()
        self.state = ScreenState(phase=ScreenPhase.LOADING)

        try:
            email = self._require_email()
            role, document = await self._resolve_profile(email)
            record = decode_record(role, document.data)
        except ProfileError as e:
            logger.error(f"Failed to load profile: {e.message}")
            self.state.phase = ScreenPhase.FAILED
            self._show(e.message, e)
            return self.state

        if role == UserRole.DOG_OWNER:
            fields = OwnerFields.from_record(email, record)
        else:
            fields = WalkerFields.from_record(email, record)

        self.state.profile = fields
        self.state.loaded_update_time = document.update_time
        self.state.warnings = field_warnings(fields)
        self.state.phase = ScreenPhase.EDITING
        logger.info(f"Loaded {role.value} profile {document.id} for {email}")

        if fields.profile_image_url:
            self._image_task = asyncio.create_task(self._load_profile_image(fields.profile_image_url))

        return self.state

    async def save(self) -> ScreenState:
        """
        Write the edited fields back to the profile document.

        The document is looked up again by email rather than reusing the
        one found on load. Without optimistic concurrency the write is
        last-write-wins. The phase goes back to EDITING on every exit,
        cancellation included.

        Returns:
            Screen state, back in EDITING with a status message

        Raises:
            ProfileNotLoadedError: If called before the role is resolved
        """
        fields = self.state.profile
        if fields is None:
            raise ProfileNotLoadedError()
        if self.state.phase == ScreenPhase.SAVING:
            logger.debug("Save already in progress")
            return self.state

        self.state.phase = ScreenPhase.SAVING
        collection = self.collections[fields.role]
        payload = build_update_payload(fields)

        try:
            email = self._require_email()
            if email != fields.email:
                raise NoUserError("Signed-in user changed since the profile was loaded")
            document = await self._find_for_save(collection, email)
            self._check_unchanged(document)
            try:
                await self.store.update_fields(collection, document.id, payload)
            except StoreWriteError as e:
                raise StoreWriteError(f"Error updating profile: {e.message}") from e
            logger.info(f"Saved {fields.role.value} profile {document.id}")
            if self.optimistic_concurrency:
                await self._refresh_update_time(collection, email)
        except ProfileError as e:
            logger.error(f"Failed to save profile: {e.message}")
            self._show(e.message, e)
            return self.state
        except Exception as e:
            logger.error(f"Unexpected error saving profile: {e}")
            error = StoreWriteError(f"Error updating profile: {e}")
            self._show(error.message, error)
            return self.state
        finally:
            self.state.phase = ScreenPhase.EDITING

        self.state.warnings = field_warnings(fields)
        self._show(SAVE_SUCCESS_MESSAGE)
        return self.state

    def toggle_service(self, service: str, selected: bool = True) -> List[str]:
        """
        Select or deselect a walker service. Repeating a toggle is a no-op.

        Returns:
            Services now offered
        """
        fields = self.state.profile
        if not isinstance(fields, WalkerFields):
            raise ProfileNotLoadedError("Walker profile not loaded")
        fields.toggle_service(service, selected)
        return fields.services_offered

    def select_photo(self) -> str:
        """Photo upload is disabled; only tells the user so."""
        self._show(PHOTO_UNAVAILABLE_MESSAGE)
        return PHOTO_UNAVAILABLE_MESSAGE

    def dismiss_message(self) -> None:
        """Acknowledge the current status message."""
        self.state.message = None
        self.state.error = None

    async def wait_for_image(self) -> Optional[Any]:
        """Wait for a pending profile image fetch and return the image, if any."""
        task = self._image_task
        if task is not None and not task.done():
            await asyncio.wait([task])
        return self.state.profile_image

    def close(self) -> None:
        """Cancel the background image fetch. Store requests are not cancelled."""
        self._cancel_image_fetch()

    def _require_email(self) -> str:
        user = self.identity.current_user()
        if user is None or not user.email:
            raise NoUserError()
        return user.email

    async def _resolve_profile(self, email: str) -> Tuple[UserRole, StoredDocument]:
        """Find the profile document, owners first."""
        lookups = (
            (UserRole.DOG_OWNER, "Error fetching user data"),
            (UserRole.DOG_WALKER, "Error fetching walker data"),
        )
        for role, failure_prefix in lookups:
            try:
                document = await self.store.find_by_email(self.collections[role], email)
            except StoreQueryError as e:
                raise StoreQueryError(f"{failure_prefix}: {e.message}") from e
            if document is not None:
                return role, document
        raise ProfileNotFoundError()

    async def _find_for_save(self, collection: str, email: str) -> StoredDocument:
        try:
            document = await self.store.find_by_email(collection, email)
        except StoreQueryError as e:
            raise StoreQueryError(f"Error finding document: {e.message}") from e
        if document is None:
            raise ProfileNotFoundError("User document not found")
        return document

    def _check_unchanged(self, document: StoredDocument) -> None:
        if not self.optimistic_concurrency:
            return
        seen = self.state.loaded_update_time
        if seen is not None and document.update_time is not None and document.update_time != seen:
            logger.warning(f"Profile {document.id} changed since load ({seen} -> {document.update_time})")
            raise ProfileConflictError()

    async def _refresh_update_time(self, collection: str, email: str) -> None:
        try:
            document = await self.store.find_by_email(collection, email)
        except StoreQueryError as e:
            logger.warning(f"Could not re-read profile after save: {e.message}")
            document = None
        self.state.loaded_update_time = document.update_time if document else None

    async def _load_profile_image(self, url: str) -> Optional[Any]:
        try:
            image = await self.image_fetcher.load_image(url)
        except ImageFetchError as e:
            logger.warning(f"Profile image unavailable: {e.message}")
            self.state.image_error = e.message
            return None
        except Exception as e:
            logger.warning(f"Profile image unavailable: {e}")
            self.state.image_error = f"Profile image could not be loaded: {e}"
            return None
        self.state.profile_image = image
        return image

    def _cancel_image_fetch(self) -> None:
        if self._image_task is not None and not self._image_task.done():
            self._image_task.cancel()
        self._image_task = None

    def _show(self, message: str, error: Optional[ProfileError] = None) -> None:
        self.state.message = message
        self.state.error = error
