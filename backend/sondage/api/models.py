"""
API data models for the sondage application.

This module contains Pydantic models for request and response data structures.
These models define the structure of incoming requests and outgoing responses
for the API endpoints.
"""
from typing import List, Optional, Any
from pydantic import BaseModel, Field, field_validator

from ..core.config import settings


class AnswerSubmission(BaseModel):
    """
    Model representing an answer submitted by a participant.
    
    Attributes:
        question_id: Question being answered
        text: Raw answer text
        response_time: Seconds taken to answer (optional)
    """
    question_id: int = Field(..., ge=1)
    text: str
    response_time: Optional[float] = None

    @field_validator("response_time")
    @classmethod
    def drop_out_of_range_time(cls, v: Optional[float]) -> Optional[float]:
        # Out-of-range timings are stored as unknown
        if v is None or v <= 0 or v > settings.MAX_RESPONSE_TIME:
            return None
        return v


class AnswerAccepted(BaseModel):
    """
    Model representing an accepted answer.
    
    Attributes:
        ok: Always True
        answer: Text that was stored
        merged: Whether the answer was folded into an existing one
    """
    ok: bool = True
    answer: str
    merged: bool = False


class QuestionPayload(BaseModel):
    """Request model for creating or updating a question."""
    category_id: int
    text: str = Field(..., min_length=1)


class CategoryPayload(BaseModel):
    """Request model for creating a category."""
    name: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request model for admin login."""
    password: str


class MergeRequest(BaseModel):
    """
    Model representing a manual merge of answers.
    
    Attributes:
        question_id: Question whose answers are merged
        answer_texts: Texts to rewrite, compared lowercased and trimmed
        canonical_text: Replacement text
    """
    question_id: int
    answer_texts: List[str] = Field(..., min_length=1)
    canonical_text: str = Field(..., min_length=1)


class BannedWordPayload(BaseModel):
    """Request model for adding a banned word."""
    word: str = Field(..., min_length=1)


class CorrectionPayload(BaseModel):
    """Request model for adding a correction rule."""
    wrong: str = Field(..., min_length=1)
    correct: str = Field(..., min_length=1)


class ToggleRequest(BaseModel):
    """Request model for boolean settings."""
    enabled: bool


class ClusterEntry(BaseModel):
    """
    Model representing one export cluster.
    
    Attributes:
        answer: Representative label
        count: Summed count of the clustered answers
        percentage: Share of the question's answers
    """
    answer: str
    count: int
    percentage: int


class ErrorResponse(BaseModel):
    """
    Model representing an error response from the API.
    
    Attributes:
        status_code: HTTP status code
        message: Human-readable error message
        details: Additional error details (optional)
    """
    status_code: int
    message: str
    details: Optional[Any] = None
