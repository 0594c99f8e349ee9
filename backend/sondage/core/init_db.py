"""Database initialization script."""

import logging

from sondage.core.database import Base, SessionLocal, engine
from sondage.models.survey import Category, Question, BannedWord, Correction, Setting

logger = logging.getLogger(__name__)

SEED_CATEGORIES = ["vacances", "nourriture", "cinéma"]

SEED_QUESTIONS = [
    ("vacances", "Tu es au bar en vacances, qu'est-ce que tu commandes ?"),
    ("vacances", "Quel est LE pays où tu rêves d'aller ?"),
    ("vacances", "Quel est LE truc que tu oublies toujours dans ta valise ?"),
    ("vacances", "Quel est LE truc le plus énervant en avion ?"),
    ("nourriture", "Quel est L'aliment que tu manges en cachette dans le frigo ?"),
    ("nourriture", "Qu'est ce que tu commandes en livraison quand t'as la flemme de faire a manger ?"),
    ("nourriture", "Quel est LE truc que tu grignotes devant la télé ?"),
    ("cinéma", "Quel est LE méchant de film que tout le monde connaît ?"),
    ("cinéma", "Quel est ton genre de film préféré ? (horreur, comédie, science fiction, etc...)"),
    ("cinéma", "Quel est LE Disney que tu préfères ?"),
]

# Phrases with an apostrophe are listed in both spellings, normalization keeps either
SEED_BANNED_WORDS = [
    "jsp",
    "je sais pas",
    "aucune idée",
    "j'étais pas né",
    "j’étais pas né",
    "pas née",
    "caca",
    "hitler",
    "pornhub",
    "n'importe quoi",
    "n’importe quoi",
]

SEED_CORRECTIONS = [
    ("fesbook", "facebook"),
    ("face book", "facebook"),
    ("youtybe", "youtube"),
    ("youtunes", "youtube"),
    ("googel", "google"),
    ("formage", "fromage"),
    ("chocolay", "chocolat"),
    ("saucision", "saucisson"),
    ("sky blog", "skyblog"),
    ("slyblog", "skyblog"),
]


def seed_db() -> None:
    """Insert the default categories, questions, word lists and settings.

    Existing rows are left untouched, so this is safe to run on every start.
    """
    db = SessionLocal()
    try:
        if db.query(Category).count() == 0:
            for name in SEED_CATEGORIES:
                db.add(Category(name=name))
            db.flush()

        categories = {c.name: c.id for c in db.query(Category).all()}
        for category_name, text in SEED_QUESTIONS:
            category_id = categories.get(category_name)
            if category_id is None:
                continue
            if db.query(Question).filter(Question.text == text).first() is None:
                db.add(Question(category_id=category_id, text=text))

        for word in SEED_BANNED_WORDS:
            if db.query(BannedWord).filter(BannedWord.word == word).first() is None:
                db.add(BannedWord(word=word))

        for wrong, correct in SEED_CORRECTIONS:
            if db.query(Correction).filter(Correction.wrong == wrong).first() is None:
                db.add(Correction(wrong=wrong, correct=correct))

        if db.get(Setting, "auto_merge") is None:
            db.add(Setting(key="auto_merge", value="1"))

        db.commit()
    finally:
        db.close()


def init_db() -> None:
    """Initialize the database by creating all tables and seeding them."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    seed_db()
    logger.info("Database tables created successfully.")
