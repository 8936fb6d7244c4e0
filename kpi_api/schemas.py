from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class KpiResponse(BaseModel):
    ok: bool = True
    data: Dict[str, List[str]] = Field(default_factory=dict)
    rows: List[List[Any]] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
