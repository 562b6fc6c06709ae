from typing import List, Optional

from pydantic import BaseModel


class ReviewResponse(BaseModel):
    analysis: str


class KeywordMatchResponse(BaseModel):
    matchScore: int
    missing: List[str]


class HealthResponse(BaseModel):
    status: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
