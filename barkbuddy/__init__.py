"""
BarkBuddy - Profile editing for the dog owner / dog walker marketplace

This package loads a signed-in user's owner or walker profile from Firestore,
holds the editable fields, and writes changes back on save.
"""

__version__ = "1.0.0"

from .screens.profile_edit import ProfileEditScreen

__all__ = ["ProfileEditScreen"]
