"""File DTOs. Pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field, computed_field


class FileRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    owner_id: int
    name: str
    mime_type: str
    size_bytes: int
    content_hash: str
    tags: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field
    @property
    def url(self) -> str:
        return f"/files/{self.id}/content"


class FileList(BaseModel):
    items: list[FileRead]
    total: int


class FileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    tags: str | None = None
