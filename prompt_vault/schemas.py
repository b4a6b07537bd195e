from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from prompt_vault.tags import normalize_tags


class PromptPayload(BaseModel):
    """Body for creating or updating a prompt.

    Title and content are checked by the store so that a missing or blank value
    surfaces as the same validation error either way.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    tags: List[str] = []  # Comma-delimited string or list of strings
    notes: Optional[str] = None
    favorite: bool = False

    @field_validator("title", "content", "notes", mode="before")
    @classmethod
    def coerce_number_to_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tag_input(cls, value):
        return normalize_tags(value)

    @field_validator("favorite", mode="before")
    @classmethod
    def coerce_favorite(cls, value):
        # Only these literals mark a prompt as favorite, anything else is False
        return value is True or value in ("true", "1") or (type(value) is int and value == 1)


class PromptResponse(BaseModel):
    id: int
    title: str
    content: str
    tags: List[str] = []
    notes: Optional[str]
    favorite: bool
    use_count: int = Field(serialization_alias="useCount")
    last_used: Optional[datetime] = Field(serialization_alias="lastUsed")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    @field_serializer("last_used", "created_at", "updated_at")
    def serialize_utc(self, value: Optional[datetime]):
        # Stored naive in UTC; send an explicit offset so clients do not read local time
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()

    class Config:
        from_attributes = True


class TagCountResponse(BaseModel):
    tag: str
    count: int


class DeleteResponse(BaseModel):
    success: bool = True
