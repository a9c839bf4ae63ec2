"""Pydantic schemas for user invites."""

from pydantic import BaseModel, Field


class InviteCreate(BaseModel):
    """Invite one or more users into a company the caller belongs to."""
    company_id: int
    user_ids: list[int] = Field(..., min_length=1)
