"""Pydantic response schemas for the feed Web API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class StatusResponse(BaseModel):
    connected: bool
    polling: bool
    status_id: int
    session_update_count: int
    last_error: str | None = None


class SessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    update_count: int = Field(alias="updateCount")
    session_info: dict[str, Any] = Field(alias="sessionInfo")


class VarHeaderRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: int
    count: int
    offset: int
    count_as_time: bool = Field(alias="countAsTime")
    desc: str
    unit: str


class VarValueResponse(BaseModel):
    name: str
    entry: int | None = None
    value: bool | int | float | None
