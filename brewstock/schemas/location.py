from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from brewstock.schemas.catalog import ItemOut


class LocationCreateIn(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    address: str | None = Field(default=None, max_length=500)
    type: str = Field(default="retail", min_length=2, max_length=60)

    @field_validator("name", "type")
    @classmethod
    def strip_required(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("value cannot be empty")
        return cleaned


class LocationUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=120)
    address: str | None = Field(default=None, max_length=500)
    type: str | None = Field(default=None, min_length=2, max_length=60)

    @field_validator("name", "type")
    @classmethod
    def normalize_name(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("value cannot be null")
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("value cannot be empty")
        return cleaned

    @model_validator(mode="after")
    def validate_any_field_present(self) -> "LocationUpdateIn":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class LocationOut(BaseModel):
    id: str
    name: str
    address: str | None = None
    type: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class LocationListOut(BaseModel):
    items: list[LocationOut]


class LocationTypeCreateIn(BaseModel):
    name: str = Field(min_length=2, max_length=60)
    description: str | None = Field(default=None, max_length=255)
    color: str = Field(default="blue", max_length=20)
    icon: str = Field(default="map-pin", max_length=40)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("name cannot be empty")
        return cleaned


class LocationTypeUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=60)
    description: str | None = Field(default=None, max_length=255)
    color: str | None = Field(default=None, max_length=20)
    icon: str | None = Field(default=None, max_length=40)

    @model_validator(mode="after")
    def validate_any_field_present(self) -> "LocationTypeUpdateIn":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class LocationTypeOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    color: str
    icon: str
    is_default: bool
    location_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class LocationTypeListOut(BaseModel):
    items: list[LocationTypeOut]


class LocationAssignIn(BaseModel):
    item_ids: list[str] = Field(min_length=1)


class LocationAssignOut(BaseModel):
    location_id: str
    assigned_item_ids: list[str]
    skipped_item_ids: list[str]


class CategoryAssignmentOut(BaseModel):
    category_id: str
    category_name: str
    assigned_items: list[ItemOut]
    unassigned_items: list[ItemOut]
    assigned_count: int
    unassigned_count: int
    total_category_items: int


class LocationAssignmentOut(BaseModel):
    location: LocationOut
    assigned_items: list[ItemOut]
    unassigned_items: list[ItemOut]
    items_by_category: list[CategoryAssignmentOut]
    total_assigned: int
    total_unassigned: int
    total_items: int
