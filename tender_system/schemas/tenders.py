from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


class TenderCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    serviceType: str
    organizationId: str
    creatorUsername: str = Field(..., min_length=1)


class TenderEditRequest(BaseModel):
    """
    Partial edit: omitted fields keep their current value.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    serviceType: Optional[str] = None


class TenderResponse(BaseModel):
    id: str
    name: str
    description: str
    status: str
    serviceType: str
    version: int
    createdAt: str


class TenderVersionResponse(BaseModel):
    version: int
    name: str
    description: str
    serviceType: str
    createdAt: str
