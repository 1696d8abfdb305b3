"""Screens for BarkBuddy."""

from .profile_edit import ProfileEditScreen, ScreenPhase, ScreenState, build_update_payload

__all__ = [
    "ProfileEditScreen",
    "ScreenPhase",
    "ScreenState",
    "build_update_payload",
]
