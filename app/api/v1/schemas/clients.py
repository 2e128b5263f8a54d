# app/api/v1/schemas/clients.py
"""Request and response schemas for client endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ClientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    gstin: str = Field(min_length=15, max_length=15, description="15-character GSTIN of the client")


class ClientDetail(BaseModel):
    id: str
    name: str
    gstin: str
    created_at: datetime | None = None
