from typing import Any

from pydantic import BaseModel, Field, StrictStr

from .moderation import DEFAULT_SAFER


class ModerateRequest(BaseModel):
    text: StrictStr
    safer: float = Field(DEFAULT_SAFER, ge=0.0, le=1.0, strict=True)


class ModerateResponse(BaseModel):
    scorePct: int
    score01: float
    raw: Any = None


class RewriteRequest(BaseModel):
    text: StrictStr
    tone: StrictStr  # professional | calm | friendly | short, checked by the rewriter


class RewriteResponse(BaseModel):
    rewritten: str
    tone: str


class ErrorResponse(BaseModel):
    error: str
