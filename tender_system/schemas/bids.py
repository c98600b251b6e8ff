from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


class BidCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    tenderID: str
    authorType: str
    authorID: str


class BidEditRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class BidResponse(BaseModel):
    id: str
    name: str
    status: str
    authorType: str
    authorID: str
    version: int
    createdAt: str


class BidFeedbackResponse(BaseModel):
    id: str
    description: str
    createdAt: str
