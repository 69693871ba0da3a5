from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _strip_required(value: str | None) -> str:
    if value is None:
        raise ValueError("name cannot be null")
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("name cannot be empty")
    return cleaned


class CategoryCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)


class CategoryUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str | None) -> str:
        return _strip_required(value)

    @model_validator(mode="after")
    def validate_any_field_present(self) -> "CategoryUpdateIn":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class CategoryOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CategoryListOut(BaseModel):
    items: list[CategoryOut]


class SupplierCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    contact: str | None = Field(default=None, max_length=120)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=40)

    @field_validator("contact", "email", "phone")
    @classmethod
    def normalize_optional_strings(cls, value: str | None) -> str | None:
        return _strip_optional(value)


class SupplierUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    contact: str | None = Field(default=None, max_length=120)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=40)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str | None) -> str:
        return _strip_required(value)

    @field_validator("contact", "email", "phone")
    @classmethod
    def normalize_optional_strings(cls, value: str | None) -> str | None:
        return _strip_optional(value)

    @model_validator(mode="after")
    def validate_any_field_present(self) -> "SupplierUpdateIn":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class SupplierOut(BaseModel):
    id: str
    name: str
    contact: str | None = None
    email: str | None = None
    phone: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SupplierListOut(BaseModel):
    items: list[SupplierOut]


class ItemCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    category_id: str | None = None
    supplier_id: str | None = None
    unit: str = Field(default="unit", min_length=1, max_length=30)
    min_stock: float = Field(default=0, ge=0)
    max_stock: float = Field(default=0, ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "House Espresso Beans",
                "category_id": "category-id-here",
                "supplier_id": "supplier-id-here",
                "unit": "kg",
                "min_stock": 5,
                "max_stock": 40,
            }
        }
    )


class ItemUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    category_id: str | None = None
    supplier_id: str | None = None
    unit: str | None = Field(default=None, min_length=1, max_length=30)
    min_stock: float | None = Field(default=None, ge=0)
    max_stock: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_any_field_present(self) -> "ItemUpdateIn":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class ItemOut(BaseModel):
    id: str
    name: str
    category_id: str | None = None
    supplier_id: str | None = None
    unit: str
    min_stock: float
    max_stock: float
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ItemListOut(BaseModel):
    items: list[ItemOut]
