"""
Admin API routes for the sondage application.

This module contains the endpoints of the administrator panel: login, survey
statistics, question management, answer review and merge, word lists,
settings and the clustered CSV export.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from ...services.admin_service import AdminService
from ...services.export_service import build_export_rows, cluster_question_answers, render_csv
from ...services.session_service import is_admin, login_admin, logout_admin, require_admin
from ..dependencies import get_db, config_cache
from ..models import (
    BannedWordPayload,
    CategoryPayload,
    ClusterEntry,
    CorrectionPayload,
    LoginRequest,
    MergeRequest,
    QuestionPayload,
    ToggleRequest,
)

# Set up logging
logger = logging.getLogger(__name__)

# Login endpoints stay reachable without a session
auth_router = APIRouter(prefix="/api/admin", tags=["admin"])

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={401: {"description": "Not authenticated"}},
)

EXPORT_FILENAME = "sondage-export.csv"


@auth_router.post("/login")
async def login(credentials: LoginRequest, request: Request) -> Dict[str, Any]:
    """
    Open an admin session.
    
    Args:
        credentials: Submitted password
        request: The FastAPI request object
    
    Returns:
        Dict[str, Any]: ``{"ok": true}``
    
    Raises:
        HTTPException: 401 if the password is wrong
    """
    if not login_admin(request, credentials.password):
        logger.warning("Failed admin login attempt")
        raise HTTPException(status_code=401, detail="Mot de passe incorrect")
    return {"ok": True}


@auth_router.get("/check")
async def check(request: Request) -> Dict[str, Any]:
    """Report whether the caller holds an admin session."""
    return {"authenticated": is_admin(request)}


@auth_router.post("/logout")
async def logout(request: Request) -> Dict[str, Any]:
    """Close the admin session."""
    logout_admin(request)
    return {"ok": True}


@router.get("/stats")
async def get_stats(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Get global survey statistics."""
    return AdminService(db).get_stats()


@router.get("/categories")
async def list_categories(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """List categories by name."""
    return [{"id": c.id, "name": c.name} for c in AdminService(db).get_categories()]


@router.post("/categories")
async def create_category(payload: CategoryPayload, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Create a category.
    
    Args:
        payload: Category name
        db: Database session
    
    Returns:
        Dict[str, Any]: The category id and name
    """
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Nom requis")
    category = AdminService(db).create_category(payload.name)
    return {"id": category.id, "name": category.name}


@router.get("/questions")
async def list_questions(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """List every question with its answer statistics."""
    return AdminService(db).get_questions_with_counts()


@router.post("/questions")
async def create_question(payload: QuestionPayload, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Create a question.
    
    Args:
        payload: Category id and question text
        db: Database session
    
    Returns:
        Dict[str, Any]: The new question id
    """
    if not payload.text.strip():
        raise HTTPException(status_code=400, detail="Catégorie et texte requis")
    question = AdminService(db).create_question(payload.category_id, payload.text)
    return {"id": question.id}


@router.put("/questions/{question_id}")
async def update_question(
    question_id: int,
    payload: QuestionPayload,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Update a question's text and category."""
    if not payload.text.strip():
        raise HTTPException(status_code=400, detail="Texte et catégorie requis")
    if not AdminService(db).update_question(question_id, payload.text, payload.category_id):
        raise HTTPException(status_code=404, detail="Question introuvable")
    return {"ok": True}


@router.delete("/questions/{question_id}")
async def delete_question(question_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Delete a question and its answers."""
    AdminService(db).delete_question(question_id)
    return {"ok": True}


def _question_or_404(service: AdminService, question_id: int) -> Dict[str, Any]:
    question = service.get_question(question_id)
    if question is None:
        raise HTTPException(status_code=404, detail="Question introuvable")
    return {
        "id": question.id,
        "text": question.text,
        "category_id": question.category_id,
        "active": question.active,
    }


@router.get("/questions/{question_id}/answers")
async def get_question_answers(question_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Get a question's answers grouped by text, with top-5 coverage.
    
    Args:
        question_id: The question identifier
        db: Database session
    
    Returns:
        Dict[str, Any]: The question, answer groups, total and coverage status
    """
    service = AdminService(db)
    question = _question_or_404(service, question_id)
    return {"question": question, **service.get_answers_grouped(question_id)}


@router.get("/questions/{question_id}/clusters")
async def get_question_clusters(question_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Get a question's answers clustered the way the export groups them.
    
    Args:
        question_id: The question identifier
        db: Database session
    
    Returns:
        Dict[str, Any]: The question, its clusters and the answer total
    """
    service = AdminService(db)
    question = _question_or_404(service, question_id)
    grouped = service.get_answers_grouped(question_id)
    clusters = cluster_question_answers(
        [{"answer": a["normalized"], "count": a["count"]} for a in grouped["answers"]]
    )
    return {
        "question": question,
        "clusters": [ClusterEntry(**c) for c in clusters],
        "totalCount": grouped["totalCount"],
    }


@router.post("/merge")
async def merge_answers(payload: MergeRequest, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Rewrite the selected answers of a question to one canonical text.
    
    Args:
        payload: Question id, texts to merge and the canonical text
        db: Database session
    
    Returns:
        Dict[str, Any]: Number of rewritten answers
    """
    if not payload.canonical_text.strip():
        raise HTTPException(status_code=400, detail="Données invalides")
    updated = AdminService(db).merge_answers(payload.question_id, payload.answer_texts, payload.canonical_text)
    return {"ok": True, "updated": updated}


@router.get("/export")
async def export_answers(db: Session = Depends(get_db)) -> Response:
    """
    Download every question's clustered answers as CSV.
    
    Args:
        db: Database session
    
    Returns:
        Response: Semicolon-separated CSV attachment
    """
    rows = AdminService(db).get_all_answers_for_export()
    report = build_export_rows(rows)
    logger.info(f"Exporting {len(report)} clustered rows from {len(rows)} answer groups")
    return Response(
        content=render_csv(report),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/reset")
async def reset_answers(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Delete every stored answer."""
    AdminService(db).delete_all_answers()
    return {"ok": True}


@router.get("/banned-words")
async def list_banned_words(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """List banned words alphabetically."""
    return [{"id": b.id, "word": b.word} for b in AdminService(db).get_banned_words()]


@router.post("/banned-words")
async def add_banned_word(payload: BannedWordPayload, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Add a banned word."""
    if not payload.word.strip():
        raise HTTPException(status_code=400, detail="Mot requis")
    banned = AdminService(db).add_banned_word(payload.word)
    config_cache.invalidate()
    return {"id": banned.id, "word": banned.word}


@router.delete("/banned-words/{banned_id}")
async def delete_banned_word(banned_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Remove a banned word."""
    AdminService(db).delete_banned_word(banned_id)
    config_cache.invalidate()
    return {"ok": True}


@router.get("/corrections")
async def list_corrections(db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """List correction rules."""
    return [
        {"id": c.id, "wrong": c.wrong, "correct": c.correct}
        for c in AdminService(db).get_corrections()
    ]


@router.post("/corrections")
async def add_correction(payload: CorrectionPayload, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Add or replace a correction rule."""
    if not payload.wrong.strip() or not payload.correct.strip():
        raise HTTPException(status_code=400, detail="Correction invalide")
    correction = AdminService(db).add_correction(payload.wrong, payload.correct)
    config_cache.invalidate()
    return {"id": correction.id, "wrong": correction.wrong, "correct": correction.correct}


@router.delete("/corrections/{correction_id}")
async def delete_correction(correction_id: int, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Remove a correction rule."""
    AdminService(db).delete_correction(correction_id)
    config_cache.invalidate()
    return {"ok": True}


@router.get("/settings/auto-merge")
async def get_auto_merge(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Report whether new answers are merged into similar stored ones."""
    return {"enabled": AdminService(db).get_setting("auto_merge") != "0"}


@router.put("/settings/auto-merge")
async def set_auto_merge(payload: ToggleRequest, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Turn automatic merging of similar answers on or off."""
    AdminService(db).set_setting("auto_merge", "1" if payload.enabled else "0")
    config_cache.invalidate()
    logger.info(f"Auto-merge {'enabled' if payload.enabled else 'disabled'}")
    return {"enabled": payload.enabled}
