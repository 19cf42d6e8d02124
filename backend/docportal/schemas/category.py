from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docportal.utils.sanitize import sanitize_text


class CategoryBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    icon: str = Field(default="folder", max_length=50)
    parent_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        name = sanitize_text(value)
        if not name:
            raise ValueError("Nome da categoria obrigatório")
        return name

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        return sanitize_text(value)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    parent_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        name = sanitize_text(value)
        if not name:
            raise ValueError("Nome da categoria obrigatório")
        return name

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else sanitize_text(value)


class CategoryOut(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    parent_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
