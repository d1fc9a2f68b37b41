"""Moderation administration Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class KeywordCreate(BaseModel):
    """Schema for adding or replacing a keyword rule."""

    keyword: str = Field(..., min_length=1, max_length=100)
    action: Literal["block", "flag", "replace"]
    replacement: str | None = Field(None, max_length=100)

    @model_validator(mode="after")
    def _require_replacement(self) -> "KeywordCreate":
        if self.action == "replace" and not self.replacement:
            raise ValueError("replacement is required for replace rules")
        return self


class KeywordResponse(BaseModel):
    """Schema for keyword rules returned by the API."""

    id: int
    keyword: str
    action: str
    replacement: str | None
    is_active: bool
    created_by: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShadowBanRequest(BaseModel):
    """Schema for shadow banning a user; omit ``until`` for a permanent ban."""

    until: datetime | None = None
    reason: str | None = Field(None, max_length=500)


class ShadowBanResponse(BaseModel):
    """Shadow-ban fields of a user."""

    user_id: int
    is_shadow_banned: bool
    shadow_banned_until: datetime | None
    shadow_ban_reason: str | None
