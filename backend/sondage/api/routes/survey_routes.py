"""
Survey API routes for the sondage application.

This module contains the public endpoints used by participants: fetching the
next question, submitting an answer and skipping a question.
"""
import json
import logging
from typing import Any, Dict, List, Union

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...core.config import settings
from ...services.answer_pipeline import RejectionReason, process_answer
from ...services.survey_service import SurveyService
from ...utils.rounding import round_half_up
from ..dependencies import get_db, limiter, config_cache
from ..models import AnswerAccepted, AnswerSubmission, ErrorResponse

# Create router
router = APIRouter(
    prefix="/api",
    tags=["survey"],
    responses={404: {"description": "Not found"}},
)

# Set up logging
logger = logging.getLogger(__name__)

REJECTION_MESSAGES = {
    RejectionReason.EMPTY_OR_OVERSIZE: "Réponse trop courte ou trop longue",
    RejectionReason.GIBBERISH: "Réponse incohérente",
    RejectionReason.BANNED: "Réponse refusée",
    RejectionReason.QUESTION_FULL: "Cette question a déjà assez de réponses",
}


def parse_exclude(raw: str) -> List[int]:
    """
    Parse the JSON list of question ids a participant already saw.
    
    Args:
        raw: JSON-encoded list from the query string
    
    Returns:
        List[int]: Integer ids; anything malformed yields an empty list
    """
    try:
        values = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(values, list):
        return []
    return [v for v in values if isinstance(v, int) and not isinstance(v, bool)]


@router.get("/questions/next")
async def next_question(exclude: str = "[]", db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Get a random question that still needs answers.
    
    Args:
        exclude: JSON list of question ids to leave out
        db: Database session
    
    Returns:
        Dict[str, Any]: The question id and text, or ``{"done": true}``
    """
    question = SurveyService(db).get_available_question(parse_exclude(exclude))
    if question is None:
        return {"done": True}
    return {"id": question.id, "text": question.text}


@router.post(
    "/answers",
    response_model=AnswerAccepted,
    responses={400: {"model": ErrorResponse}, 410: {"model": ErrorResponse}},
)
@limiter.limit(settings.ANSWER_RATE_LIMIT)
async def submit_answer(
    request: Request,
    submission: AnswerSubmission,
    db: Session = Depends(get_db),
) -> Union[AnswerAccepted, JSONResponse]:
    """
    Clean, deduplicate and store a participant's answer.
    
    Args:
        request: The FastAPI request object, used by the rate limiter
        submission: Question id, raw text and optional response time
        db: Database session
    
    Returns:
        Union[AnswerAccepted, JSONResponse]: The stored text, or an error
        response naming the rejection reason
    
    Raises:
        HTTPException: If the question does not exist
    """
    service = SurveyService(db)
    question = service.get_question(submission.question_id)
    if question is None or not question.active:
        raise HTTPException(status_code=404, detail="Question introuvable")

    question_full = service.is_question_full(question.id)
    config = config_cache.get(service.load_pipeline_config)
    existing = None
    if config.auto_merge and not question_full:
        existing = service.get_existing_answers(question.id)

    outcome = process_answer(submission.text, config, existing, question_full=question_full)

    if not outcome.accepted:
        if outcome.reason == RejectionReason.QUESTION_FULL:
            status_code = status.HTTP_410_GONE
        else:
            status_code = status.HTTP_400_BAD_REQUEST
            service.increment_rejected(question.id)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                status_code=status_code,
                message=REJECTION_MESSAGES[outcome.reason],
                details={"reason": outcome.reason.value},
            ).model_dump(),
        )

    response_time = round_half_up(submission.response_time) if submission.response_time is not None else None
    service.insert_answer(question.id, outcome.text, response_time)
    return AnswerAccepted(answer=outcome.text, merged=outcome.merged)


@router.post("/questions/{question_id}/skip")
async def skip_question(question_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Record that a participant skipped a question.
    
    Args:
        question_id: The skipped question
        db: Database session
    
    Returns:
        Dict[str, Any]: ``{"ok": true}``
    """
    service = SurveyService(db)
    if service.get_question(question_id) is None:
        raise HTTPException(status_code=404, detail="Question introuvable")
    service.increment_skip(question_id)
    return {"ok": True}
