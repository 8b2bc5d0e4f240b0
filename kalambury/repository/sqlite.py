"""
SQLite phrase store.

Uses SQLAlchemy 2.x with the synchronous SQLite driver; queries run in a
worker thread so the event loop never blocks on disk I/O.
"""

from __future__ import annotations
import asyncio
import logging
from pathlib import Path

from sqlalchemy import Column, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from ..engine_core.state import Category, Phrase
from ..errors import PhraseRepositoryError
from .base import PhraseRepository
from .defaults import DEFAULT_CATEGORIES, DEFAULT_PHRASES

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class CategoryRecord(Base):
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    name = Column(Text, nullable=False)


class PhraseRecord(Base):
    __tablename__ = "phrases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, index=True)


def _make_engine(database_url: str):
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every worker thread sees an empty database
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite:///"):
        Path(database_url.removeprefix("sqlite:///")).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url)


class SqlPhraseRepository(PhraseRepository):
    """
    Phrase repository backed by a relational database.

    Usage:
        repo = SqlPhraseRepository("sqlite:///phrases.db")
        repo.create_tables()
        repo.initialize_default_data()

        categories = await repo.list_categories()
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._engine = _make_engine(database_url)
        self._session_factory = sessionmaker(bind=self._engine)

    def create_tables(self) -> None:
        """Create all tables if they do not exist."""
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as exc:
            raise PhraseRepositoryError(f"Could not create tables: {exc}") from exc

    def initialize_default_data(self) -> bool:
        """
        Seed the default categories and phrases into an empty store.

        Returns True if data was inserted, False if the store already had
        categories.
        """
        try:
            with self._session_factory() as db:
                existing = db.scalars(select(CategoryRecord.id).limit(1)).first()
                if existing is not None:
                    logger.info("Phrase store already initialized")
                    return False

                for category_id, name in DEFAULT_CATEGORIES:
                    db.add(CategoryRecord(id=category_id, name=name))
                    for text in DEFAULT_PHRASES.get(category_id, []):
                        db.add(PhraseRecord(text=text, category=category_id))
                db.commit()
        except SQLAlchemyError as exc:
            raise PhraseRepositoryError(f"Could not seed default data: {exc}") from exc

        logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))
        return True

    def add_category(self, category_id: str, name: str) -> Category:
        try:
            with self._session_factory() as db:
                db.add(CategoryRecord(id=category_id, name=name))
                db.commit()
        except SQLAlchemyError as exc:
            raise PhraseRepositoryError(f"Could not insert category {category_id}: {exc}") from exc
        return Category(id=category_id, name=name)

    def add_phrase(self, text: str, category_id: str) -> Phrase:
        try:
            with self._session_factory() as db:
                record = PhraseRecord(text=text, category=category_id)
                db.add(record)
                db.commit()
                return Phrase(id=str(record.id), text=record.text, category=record.category)
        except SQLAlchemyError as exc:
            raise PhraseRepositoryError(f"Could not insert phrase {text!r}: {exc}") from exc

    async def list_categories(self) -> list[Category]:
        return await asyncio.to_thread(self._query_categories)

    async def list_phrases(self, category_id: str) -> list[Phrase]:
        return await asyncio.to_thread(self._query_phrases, category_id)

    def _query_categories(self) -> list[Category]:
        try:
            with self._session_factory() as db:
                rows = db.scalars(select(CategoryRecord)).all()
                return [Category(id=row.id, name=row.name) for row in rows]
        except SQLAlchemyError as exc:
            raise PhraseRepositoryError(f"Could not fetch categories: {exc}") from exc

    def _query_phrases(self, category_id: str) -> list[Phrase]:
        try:
            with self._session_factory() as db:
                rows = db.scalars(
                    select(PhraseRecord).where(PhraseRecord.category == category_id)
                ).all()
                return [Phrase(id=str(row.id), text=row.text, category=row.category) for row in rows]
        except SQLAlchemyError as exc:
            raise PhraseRepositoryError(
                f"Could not fetch phrases for category {category_id}: {exc}"
            ) from exc

    def dispose(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
