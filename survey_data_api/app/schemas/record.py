"""
Pydantic models and enumerated domains for survey records.

A record has four categorical fields, each restricted to a fixed set
of values.  ``RecordCreate`` checks membership before anything is
written; the check ignores case so that legacy values such as
``"male"`` are accepted and stored exactly as given.  Filtering, on
the other hand, compares values exactly.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class AgeRange(str, Enum):
    AGE_18_24 = "18-24"
    AGE_25_34 = "25-34"
    AGE_35_44 = "35-44"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Location(str, Enum):
    NORTH_AMERICA = "North America"
    EUROPE = "Europe"
    ASIA = "Asia"


class Device(str, Enum):
    MOBILE = "Mobile"
    DESKTOP = "Desktop"
    TABLET = "Tablet"


RECORD_FIELDS: Tuple[str, ...] = ("age", "gender", "location", "device")

FIELD_DOMAINS: Dict[str, Tuple[str, ...]] = {
    "age": tuple(member.value for member in AgeRange),
    "gender": tuple(member.value for member in Gender),
    "location": tuple(member.value for member in Location),
    "device": tuple(member.value for member in Device),
}


def in_domain(field_name: str, value: str) -> bool:
    """Return True if ``value`` belongs to the field's domain, ignoring case."""
    return value.lower() in {allowed.lower() for allowed in FIELD_DOMAINS[field_name]}


class RecordBase(BaseModel):
    age: str = Field(..., examples=["18-24"])
    gender: str = Field(..., examples=["Male"])
    location: str = Field(..., examples=["North America"])
    device: str = Field(..., examples=["Mobile"])


class RecordCreate(RecordBase):
    """Schema for a record about to be written."""

    @field_validator("age", "gender", "location", "device")
    @classmethod
    def validate_domain(cls, v: str, info):
        if not in_domain(info.field_name, v):
            allowed = ", ".join(FIELD_DOMAINS[info.field_name])
            raise ValueError(f"must be one of: {allowed}")
        return v


class RecordRead(RecordBase):
    """Schema for a stored record as returned by the API."""

    id: str = Field(..., alias="_id")
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")

    model_config = {
        "populate_by_name": True,
    }


class RecordFilter(BaseModel):
    """Accepted values per field.

    A missing or empty list places no constraint on that field.  Keys
    other than the four record fields are ignored.
    """

    age: Optional[List[str]] = None
    gender: Optional[List[str]] = None
    location: Optional[List[str]] = None
    device: Optional[List[str]] = None


class DataQuery(BaseModel):
    """Request body for ``POST /api/data``."""

    filters: Optional[RecordFilter] = None


class DataResponse(BaseModel):
    success: bool = True
    count: int
    data: List[RecordRead]


class SeedResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
