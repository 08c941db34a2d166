"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Optional, List, Any, Dict

from pydantic import BaseModel, Field


# ============ Invite Schemas ============

class InviteCreateResponse(BaseModel):
    code: str


class InviteVerifyRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)


class InviteVerifyResponse(BaseModel):
    message: str
    token: str


class InviteCodeInfo(BaseModel):
    code: str
    used: bool
    created_at: datetime

    class Config:
        from_attributes = True


class InviteCodeListResponse(BaseModel):
    count: int
    codes: List[InviteCodeInfo]


# ============ Chat Schemas ============

class ChatRequest(BaseModel):
    # Forwarded to OpenAI as received, extra keys and content parts included
    messages: Optional[List[Dict[str, Any]]] = None


class ChatResponse(BaseModel):
    reply: str


# ============ Reflection Schemas ============

class ReflectionCreate(BaseModel):
    summary: Optional[Any] = None  # validated in the route so a bad value maps to one error message
    user: str = "anonymous"
    category: str = "general"
    sentiment: float = 0.0


class ReflectionCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Reflection successfully recorded."
    reflectionId: str
    timestamp: datetime


class ReflectionListResponse(BaseModel):
    success: bool = True
    count: int
    reflections: List[Dict[str, Any]]


# ============ Error Schema ============

class ErrorResponse(BaseModel):
    error: str
