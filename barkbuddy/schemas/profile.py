"""
Profile record and form models.

Records mirror the Firestore documents (camelCase field names) and are
validated on decode. Forms hold the editable values shown on the profile
screen; every form field is text except the owner's dog size and the
walker's services.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import MalformedRecordError


class UserRole(str, Enum):
    """Account roles, inferred from the collection holding the profile."""
    DOG_OWNER = "Dog Owner"
    DOG_WALKER = "Dog Walker"


class DogSize(str, Enum):
    """Dog size options."""
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    EXTRA_LARGE = "Extra Large"


class ServiceOption(str, Enum):
    """Services a walker can offer."""
    DOG_WALKING = "Dog Walking"
    OVERNIGHT_CARE = "Overnight Care"
    DROP_IN_VISITS = "Drop-in Visits"
    PUPPY_CARE = "Puppy Care"
    SPECIAL_NEEDS_CARE = "Special Needs Care"


class _Record(BaseModel):
    """Base for document models: null fields fall back to their defaults."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class DogInfoRecord(_Record):
    """The `dogInfo` map stored on an owner profile."""

    name: str = Field(default="")
    breed: str = Field(default="")
    age: str = Field(default="", description="Free text, usually years")
    size: DogSize = Field(default=DogSize.MEDIUM)
    temperament: str = Field(default="")
    special_instructions: str = Field(default="", alias="specialInstructions")

    @field_validator("age", mode="before")
    @classmethod
    def age_as_text(cls, v):
        """Older documents store the age as a number."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ProfileRecord(_Record):
    """Fields shared by owner and walker profile documents."""

    email: str = Field(default="")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    phone_number: str = Field(default="", alias="phoneNumber")
    bio: str = Field(default="")
    address: str = Field(default="")
    city: str = Field(default="")
    state: str = Field(default="")
    zip_code: str = Field(default="", alias="zipCode")
    profile_image_url: Optional[str] = Field(default=None, alias="profileImageURL")


class OwnerRecord(ProfileRecord):
    """Profile document from the owners collection."""

    dog_info: Optional[DogInfoRecord] = Field(default=None, alias="dogInfo")


class WalkerRecord(ProfileRecord):
    """Profile document from the walkers collection."""

    experience: str = Field(default="")
    hourly_rate: Optional[float] = Field(default=None, alias="hourlyRate")
    services_offered: List[str] = Field(default_factory=list, alias="servicesOffered")

    @field_validator("services_offered")
    @classmethod
    def unique_services(cls, v):
        """Services behave as a set; keep first occurrences in order."""
        return list(dict.fromkeys(v))


def decode_record(role: UserRole, data: Dict[str, Any]) -> Union[OwnerRecord, WalkerRecord]:
    """
    Validate a raw profile document for the given role.

    Args:
        role: Role implied by the collection the document came from
        data: Document fields as returned by the store

    Returns:
        OwnerRecord or WalkerRecord

    Raises:
        MalformedRecordError: If the document does not match the expected shape
    """
    model = OwnerRecord if role == UserRole.DOG_OWNER else WalkerRecord
    try:
        return model.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise MalformedRecordError(f"User profile is malformed: {problems}") from e


class ProfileFields(BaseModel):
    """Editable fields common to both roles."""

    model_config = ConfigDict(validate_assignment=True)

    first_name: str = ""
    last_name: str = ""
    email: str = Field(default="", description="From the auth identity; never written back")
    phone_number: str = ""
    bio: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    profile_image_url: Optional[str] = None


def _common_fields(email: str, record: ProfileRecord) -> Dict[str, Any]:
    return {
        "email": email,
        "first_name": record.first_name,
        "last_name": record.last_name,
        "phone_number": record.phone_number,
        "bio": record.bio,
        "address": record.address,
        "city": record.city,
        "state": record.state,
        "zip_code": record.zip_code,
        "profile_image_url": record.profile_image_url or None,
    }


class OwnerFields(ProfileFields):
    """Edit form for a dog owner."""

    role: Literal[UserRole.DOG_OWNER] = UserRole.DOG_OWNER
    dog_name: str = ""
    dog_breed: str = ""
    dog_age: str = ""
    dog_size: DogSize = DogSize.MEDIUM
    dog_temperament: str = ""
    special_instructions: str = ""

    @classmethod
    def from_record(cls, email: str, record: OwnerRecord) -> "OwnerFields":
        dog = record.dog_info or DogInfoRecord()
        return cls(
            **_common_fields(email, record),
            dog_name=dog.name,
            dog_breed=dog.breed,
            dog_age=dog.age,
            dog_size=dog.size,
            dog_temperament=dog.temperament,
            special_instructions=dog.special_instructions,
        )


class WalkerFields(ProfileFields):
    """Edit form for a dog walker."""

    role: Literal[UserRole.DOG_WALKER] = UserRole.DOG_WALKER
    experience: str = ""
    hourly_rate: str = Field(default="", description="Rate as typed, e.g. '25.00'")
    services_offered: List[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, email: str, record: WalkerRecord) -> "WalkerFields":
        hourly_rate = ""
        if record.hourly_rate is not None:
            hourly_rate = f"{record.hourly_rate:.2f}"
        return cls(
            **_common_fields(email, record),
            experience=record.experience,
            hourly_rate=hourly_rate,
            services_offered=list(record.services_offered),
        )

    def toggle_service(self, service: str, selected: bool) -> None:
        """
        Select or deselect a service.

        Selecting a service already offered, or deselecting one that is not,
        leaves the list unchanged.

        Raises:
            ValueError: If the service is not one of the known options
        """
        service = ServiceOption(service).value
        if selected:
            if service not in self.services_offered:
                self.services_offered = self.services_offered + [service]
        else:
            self.services_offered = [s for s in self.services_offered if s != service]


RoleFields = Union[OwnerFields, WalkerFields]
