from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AIRequest(BaseModel):
    action: Optional[str] = None
    content: Any = None


class ChatRequest(BaseModel):
    message: Optional[str] = None
    document: Optional[Dict[str, Any]] = None
    conversationHistory: List[Dict[str, Any]] = Field(default_factory=list)


class ChatResponse(BaseModel):
    response: str


class AnalyzeTextRequest(BaseModel):
    text: str = ""


class ExportRequest(BaseModel):
    document: Dict[str, Any]
