"""Survey models for SQLAlchemy."""

from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index

from sondage.core.database import Base


class Category(Base):
    """SQLAlchemy model for question categories."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class Question(Base):
    """SQLAlchemy model for survey questions."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    text = Column(String, nullable=False)
    active = Column(Integer, default=1)
    skip_count = Column(Integer, default=0)
    rejected_count = Column(Integer, default=0)

    def __repr__(self) -> str:
        """Return a string representation of the question.

        Returns:
            str: String representation of the question.
        """
        return f"<Question(id={self.id}, text='{self.text[:50]}...')>"


class Answer(Base):
    """SQLAlchemy model for accepted answers, stored normalized."""

    __tablename__ = "answers"
    __table_args__ = (Index("idx_answers_question", "question_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    text = Column(String, nullable=False)
    response_time = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id}, text='{self.text}')>"


class BannedWord(Base):
    """SQLAlchemy model for banned words."""

    __tablename__ = "banned_words"

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(String, nullable=False, unique=True)


class Correction(Base):
    """SQLAlchemy model for correction rules."""

    __tablename__ = "corrections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wrong = Column(String, nullable=False, unique=True)
    correct = Column(String, nullable=False)


class Setting(Base):
    """SQLAlchemy model for key/value settings edited from the admin panel."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
