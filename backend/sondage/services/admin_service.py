"""Service for the administrator panel."""

import logging
from typing import List, Optional, Dict, Any

from sqlalchemy.orm import Session
from sqlalchemy import func

from sondage.core.config import settings
from sondage.utils.rounding import percentage, round_half_up
from sondage.models.survey import Answer, Category, Question, BannedWord, Correction, Setting

logger = logging.getLogger(__name__)

TOP_ANSWERS = 5
TOP_STATUS_MIN_ANSWERS = 20
TOP_GOOD_RANGE = (60, 85)


def top_coverage_status(top_pct: int, total: int) -> str:
    """Classify how concentrated a question's answers are.

    Args:
        top_pct: Share of answers held by the five largest groups, in percent.
        total: Total number of answers.

    Returns:
        str: ``neutral`` below 20 answers, else ``good``, ``concentrated``
        or ``scattered``.
    """
    if total < TOP_STATUS_MIN_ANSWERS:
        return "neutral"
    low, high = TOP_GOOD_RANGE
    if top_pct > high:
        return "concentrated"
    if top_pct < low:
        return "scattered"
    return "good"


class AdminService:
    """Service for curating questions, answers and the cleaning word lists.

    This service backs every administrator endpoint: statistics, category and
    question management, answer review and merge, banned words, corrections,
    settings and the raw export rows.
    """

    def __init__(self, db: Session, threshold: Optional[int] = None) -> None:
        """Initialize the admin service.

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

    def get_stats(self) -> Dict[str, Any]:
        """Get global survey statistics.

        Returns:
            Dict[str, Any]: Answer total, complete and active question counts,
            and the threshold.
        """
        total_answers = self.db.query(func.count(Answer.id)).scalar()
        complete_questions = (
            self.db.query(func.count(Question.id))
            .filter(self._answer_count_subquery() >= self.threshold)
            .scalar()
        )
        total_questions = self.db.query(func.count(Question.id)).filter(Question.active == 1).scalar()
        return {
            "totalAnswers": total_answers,
            "completeQuestions": complete_questions,
            "totalQuestions": total_questions,
            "threshold": self.threshold,
        }

    # Categories

    def get_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def create_category(self, name: str) -> Category:
        """Create a category, or return the existing one with that name.

        Args:
            name: Category name.

        Returns:
            Category: The created or existing category.
        """
        name = name.strip()
        category = self.db.query(Category).filter(Category.name == name).first()
        if category is None:
            category = Category(name=name)
            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)
        return category

    # Questions

    def get_questions_with_counts(self) -> List[Dict[str, Any]]:
        """List every question with its answer statistics.

        Returns:
            List[Dict[str, Any]]: Question rows with ``answer_count``,
            ``skip_count``, ``rejected_count`` and ``avg_time``.
        """
        answer_count = self._answer_count_subquery()
        avg_time = (
            self.db.query(func.avg(Answer.response_time))
            .filter(Answer.question_id == Question.id, Answer.response_time.isnot(None))
            .scalar_subquery()
        )
        rows = (
            self.db.query(Question, Category.name, answer_count, avg_time)
            .join(Category, Category.id == Question.category_id)
            .order_by(Category.name, Question.id)
            .all()
        )
        return [
            {
                "id": question.id,
                "text": question.text,
                "active": question.active,
                "category_id": question.category_id,
                "category_name": category_name,
                "answer_count": int(count or 0),
                "skip_count": int(question.skip_count or 0),
                "rejected_count": int(question.rejected_count or 0),
                "avg_time": round_half_up(float(avg)) if avg is not None else None,
            }
            for question, category_name, count, avg in rows
        ]

    def get_question(self, question_id: int) -> Optional[Question]:
        return self.db.get(Question, question_id)

    def create_question(self, category_id: int, text: str) -> Question:
        question = Question(category_id=category_id, text=text.strip())
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)
        return question

    def update_question(self, question_id: int, text: str, category_id: int) -> bool:
        """Update a question's text and category.

        Returns:
            bool: False if the question does not exist.
        """
        question = self.get_question(question_id)
        if question is None:
            return False
        question.text = text.strip()
        question.category_id = category_id
        self.db.commit()
        return True

    def delete_question(self, question_id: int) -> None:
        """Delete a question together with its answers."""
        self.db.query(Answer).filter(Answer.question_id == question_id).delete(synchronize_session=False)
        self.db.query(Question).filter(Question.id == question_id).delete(synchronize_session=False)
        self.db.commit()

    # Answers

    def get_answers_grouped(self, question_id: int) -> Dict[str, Any]:
        """Group a question's answers by lowercased text.

        Args:
            question_id: The question identifier.

        Returns:
            Dict[str, Any]: Groups with counts and percentages, the total,
            and the top-5 coverage with its status.
        """
        normalized = func.lower(func.trim(Answer.text))
        count = func.count(Answer.id).label("count")
        rows = (
            self.db.query(normalized.label("normalized"), func.min(Answer.text), count)
            .filter(Answer.question_id == question_id)
            .group_by(normalized)
            .order_by(count.desc())
            .all()
        )
        total = sum(int(n) for _, _, n in rows)
        top_count = sum(int(n) for _, _, n in rows[:TOP_ANSWERS])
        top_pct = percentage(top_count, total)
        return {
            "answers": [
                {
                    "normalized": norm,
                    "sample_text": sample,
                    "count": int(n),
                    "percentage": percentage(int(n), total),
                }
                for norm, sample, n in rows
            ],
            "totalCount": total,
            "top5Pct": top_pct,
            "top5Status": top_coverage_status(top_pct, total),
        }

    def merge_answers(self, question_id: int, texts: List[str], canonical: str) -> int:
        """Rewrite every answer matching one of ``texts`` to ``canonical``.

        Args:
            question_id: The question identifier.
            texts: Answer texts to merge, compared lowercased and trimmed.
            canonical: Replacement text.

        Returns:
            int: Number of rewritten answers.
        """
        lowered = [t.lower().strip() for t in texts]
        updated = (
            self.db.query(Answer)
            .filter(Answer.question_id == question_id, func.lower(func.trim(Answer.text)).in_(lowered))
            .update({Answer.text: canonical.strip()}, synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Merged {updated} answers of question {question_id} into '{canonical.strip()}'")
        return updated

    def get_all_answers_for_export(self) -> List[Dict[str, Any]]:
        """Get every question's answers grouped by lowercased text.

        Returns:
            List[Dict[str, Any]]: Rows with ``question_id``, ``category``,
            ``question``, ``answer`` and ``count``, per question by count
            descending.
        """
        normalized = func.lower(func.trim(Answer.text))
        count = func.count(Answer.id).label("count")
        rows = (
            self.db.query(Question.id, Category.name, Question.text, normalized, count)
            .select_from(Answer)
            .join(Question, Question.id == Answer.question_id)
            .join(Category, Category.id == Question.category_id)
            .group_by(Question.id, Category.name, Question.text, normalized)
            .order_by(Question.id, count.desc())
            .all()
        )
        return [
            {
                "question_id": question_id,
                "category": category,
                "question": question,
                "answer": answer,
                "count": int(n),
            }
            for question_id, category, question, answer, n in rows
        ]

    def delete_all_answers(self) -> None:
        self.db.query(Answer).delete(synchronize_session=False)
        self.db.commit()
        logger.info("All answers deleted")

    # Banned words

    def get_banned_words(self) -> List[BannedWord]:
        return self.db.query(BannedWord).order_by(BannedWord.word).all()

    def add_banned_word(self, word: str) -> BannedWord:
        """Add a banned word, stored lowercase; duplicates are ignored.

        Returns:
            BannedWord: The new or existing row.
        """
        word = word.strip().lower()
        banned = self.db.query(BannedWord).filter(BannedWord.word == word).first()
        if banned is None:
            banned = BannedWord(word=word)
            self.db.add(banned)
            self.db.commit()
            self.db.refresh(banned)
        return banned

    def delete_banned_word(self, banned_id: int) -> None:
        self.db.query(BannedWord).filter(BannedWord.id == banned_id).delete(synchronize_session=False)
        self.db.commit()

    # Corrections

    def get_corrections(self) -> List[Correction]:
        return self.db.query(Correction).order_by(Correction.wrong).all()

    def add_correction(self, wrong: str, correct: str) -> Correction:
        """Add a correction rule, replacing the target of an existing one.

        Both sides are stored lowercase.

        Returns:
            Correction: The new or updated row.
        """
        wrong = wrong.strip().lower()
        correction = self.db.query(Correction).filter(Correction.wrong == wrong).first()
        if correction is None:
            correction = Correction(wrong=wrong, correct=correct.strip().lower())
            self.db.add(correction)
        else:
            correction.correct = correct.strip().lower()
        self.db.commit()
        self.db.refresh(correction)
        return correction

    def delete_correction(self, correction_id: int) -> None:
        self.db.query(Correction).filter(Correction.id == correction_id).delete(synchronize_session=False)
        self.db.commit()

    # Settings

    def get_setting(self, key: str) -> Optional[str]:
        setting = self.db.get(Setting, key)
        return setting.value if setting is not None else None

    def set_setting(self, key: str, value: str) -> None:
        setting = self.db.get(Setting, key)
        if setting is None:
            self.db.add(Setting(key=key, value=value))
        else:
            setting.value = value
        self.db.commit()
