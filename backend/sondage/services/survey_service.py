"""Service for the public survey flow."""

from typing import List, Optional, Dict, Any, Iterable

from sqlalchemy.orm import Session
from sqlalchemy import func

from sondage.core.config import settings
from sondage.models.survey import Answer, Question, BannedWord, Correction, Setting
from sondage.services.answer_pipeline import PipelineConfig


class SurveyService:
    """Service for serving questions and storing answers.

    This service is the persistence side of answer submission: it picks the
    next question, reports answer counts and stored answers, and records
    accepted answers, skips and rejections.
    """

    def __init__(self, db: Session, threshold: Optional[int] = None) -> None:
        """Initialize the survey service.

        Args:
            db: SQLAlchemy database session.
            threshold: Answer cap per question, defaults to the configured one.
        """
        self.db = db
        self.threshold = threshold if threshold is not None else settings.ANSWER_THRESHOLD

    def _answer_count_subquery(self):
        return (
            self.db.query(func.count(Answer.id))
            .filter(Answer.question_id == Question.id)
            .scalar_subquery()
        )

    def get_available_question(self, exclude_ids: Iterable[int] = ()) -> Optional[Question]:
        """Pick a random active question that still needs answers.

        Args:
            exclude_ids: Questions the participant already saw.

        Returns:
            Optional[Question]: A question, or None when the survey is done.
        """
        query = self.db.query(Question).filter(
            Question.active == 1,
            self._answer_count_subquery() < self.threshold,
        )
        exclude_ids = list(exclude_ids)
        if exclude_ids:
            query = query.filter(Question.id.notin_(exclude_ids))
        return query.order_by(func.random()).first()

    def get_question(self, question_id: int) -> Optional[Question]:
        """Get a question by id.

        Args:
            question_id: The question identifier.

        Returns:
            Optional[Question]: The question, if it exists.
        """
        return self.db.get(Question, question_id)

    def get_answer_count(self, question_id: int) -> int:
        """Count the stored answers for a question.

        Args:
            question_id: The question identifier.

        Returns:
            int: Number of stored answers.
        """
        return self.db.query(func.count(Answer.id)).filter(Answer.question_id == question_id).scalar()

    def is_question_full(self, question_id: int) -> bool:
        return self.get_answer_count(question_id) >= self.threshold

    def get_existing_answers(self, question_id: int) -> List[Dict[str, Any]]:
        """Get the distinct stored answers for a question, most frequent first.

        Args:
            question_id: The question identifier.

        Returns:
            List[Dict[str, Any]]: ``{"text", "count"}`` dicts.
        """
        count = func.count(Answer.id).label("count")
        rows = (
            self.db.query(Answer.text, count)
            .filter(Answer.question_id == question_id)
            .group_by(Answer.text)
            .order_by(count.desc())
            .all()
        )
        return [{"text": text, "count": int(n)} for text, n in rows]

    def insert_answer(self, question_id: int, text: str, response_time: Optional[int] = None) -> Answer:
        """Store an accepted answer.

        Args:
            question_id: The question identifier.
            text: Normalized answer text.
            response_time: Seconds the participant took, if known.

        Returns:
            Answer: The stored answer.
        """
        answer = Answer(question_id=question_id, text=text, response_time=response_time)
        self.db.add(answer)
        self.db.commit()
        self.db.refresh(answer)
        return answer

    def _increment(self, question_id: int, column) -> None:
        self.db.query(Question).filter(Question.id == question_id).update(
            {column: func.coalesce(column, 0) + 1}, synchronize_session=False
        )
        self.db.commit()

    def increment_skip(self, question_id: int) -> None:
        """Record that a participant skipped a question."""
        self._increment(question_id, Question.skip_count)

    def increment_rejected(self, question_id: int) -> None:
        """Record that an answer to a question was rejected."""
        self._increment(question_id, Question.rejected_count)

    def load_pipeline_config(self) -> PipelineConfig:
        """Build a pipeline configuration snapshot from the database.

        Returns:
            PipelineConfig: Banned words, corrections and the auto-merge toggle.
        """
        banned = [w for (w,) in self.db.query(BannedWord.word).all()]
        corrections = [
            (c.wrong, c.correct)
            for c in self.db.query(Correction).order_by(Correction.wrong).all()
        ]
        auto_merge = self.db.get(Setting, "auto_merge")
        return PipelineConfig.build(
            banned_words=banned,
            corrections=corrections,
            auto_merge=auto_merge is None or auto_merge.value != "0",
            min_length=settings.ANSWER_MIN_LENGTH,
            max_length=settings.ANSWER_MAX_LENGTH,
            raw_max_length=settings.RAW_ANSWER_MAX_LENGTH,
        )
