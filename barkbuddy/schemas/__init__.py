"""Data schemas and models for BarkBuddy."""

from .profile import (
    UserRole,
    DogSize,
    ServiceOption,
    OwnerRecord,
    WalkerRecord,
    ProfileFields,
    OwnerFields,
    WalkerFields,
    decode_record,
)

__all__ = [
    "UserRole",
    "DogSize",
    "ServiceOption",
    "OwnerRecord",
    "WalkerRecord",
    "ProfileFields",
    "OwnerFields",
    "WalkerFields",
    "decode_record",
]
