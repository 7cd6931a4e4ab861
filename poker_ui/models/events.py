"""Pydantic models for UI events and server events."""
from __future__ import annotations
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field


class UIEvent(BaseModel):
    """Client → Server: one discrete interface event."""
    type: Literal["click", "input", "key"]
    payload: Dict[str, Any] = Field(default_factory=dict)
    version: Optional[int] = None  # snapshot version the client was looking at


class ClickPayload(BaseModel):
    control: Literal["call", "check", "fold", "bet", "raise", "commit", "cancel"]
    value: Optional[int] = None  # commit only: final slider value


class InputPayload(BaseModel):
    value: int


class KeyPayload(BaseModel):
    key: str


class ServerEvent(BaseModel):
    """Server → Client event envelope."""
    type: str  # "table_state" | "error" | "pong"
    payload: Dict[str, Any]
