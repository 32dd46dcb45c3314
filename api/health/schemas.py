"""
Pydantic schemas for health endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    uptime: float
    timestamp: str


class ReadinessResponse(BaseModel):
    status: str
    database: str
