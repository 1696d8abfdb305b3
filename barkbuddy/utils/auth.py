"""
Signed-in identity access.
"""

from abc import ABC, abstractmethod
from typing import Optional
from loguru import logger
from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """The authenticated user as seen by the app."""

    email: Optional[str] = Field(default=None, description="Account email, if the provider supplies one")
    uid: Optional[str] = Field(default=None, description="Provider user ID")


class AuthIdentity(ABC):
    """Source of the currently signed-in user."""

    @abstractmethod
    def current_user(self) -> Optional[CurrentUser]:
        """Return the signed-in user, or None when nobody is signed in."""


class SessionIdentity(AuthIdentity):
    """In-process identity holder, set by the sign-in flow."""

    def __init__(self, user: Optional[CurrentUser] = None):
        self._user = user

    def current_user(self) -> Optional[CurrentUser]:
        return self._user

    def sign_in(self, email: str, uid: Optional[str] = None) -> CurrentUser:
        self._user = CurrentUser(email=email, uid=uid)
        logger.info(f"Signed in {email}")
        return self._user

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info(f"Signed out {self._user.email}")
        self._user = None
