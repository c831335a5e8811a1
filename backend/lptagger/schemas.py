"""Pydantic request/response schemas."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


# ── Tag Schemas ──────────────────────────────────────────────────────────────

class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field("#ef4444", pattern=r"^#[0-9a-fA-F]{6}$")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tag name must not be blank")
        return v


class TagResponse(BaseModel):
    id: int
    name: str
    color: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TagListResponse(BaseModel):
    items: List[TagResponse]
    total: int


# ── Assignment Schemas ───────────────────────────────────────────────────────

class TagAssign(BaseModel):
    tag_id: int = Field(..., ge=1)


# ── Health Schemas ───────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    static_root: str
    static_root_found: bool
