"""User profile models."""
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserUpsert(BaseModel):
    """Body of ``POST /users``; creates the user or updates the one with this email."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = Field(..., alias="firstName", min_length=1)
    email: str = Field(..., min_length=1)
    img_url: str = Field(..., alias="imgUrl", min_length=1)
    password: Optional[str] = Field(None, description="Kept unchanged on update when omitted")


class UserProfile(BaseModel):
    """Public projection of a user; the password is never part of it."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    first_name: Optional[str] = Field(None, alias="firstName")
    email: str
    img_url: Optional[str] = Field(None, alias="imgUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> str:
        return str(v)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "UserProfile":
        return cls.model_validate({k: v for k, v in doc.items() if k != "password"})


class UserUpsertResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    inserted_id: str = Field(..., alias="insertedId")
