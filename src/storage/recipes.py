"""Durable recipe store.

Generated recipes are saved in the background, keyed by a freshly minted id
distinct from the in-memory cache key. SQLite under tmp/ by default,
Postgres when DATABASE_URL is set. Sync SQLAlchemy calls run in a worker
thread so the event loop never blocks on the database.
"""

import asyncio
import os
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, Optional

from sqlalchemy import JSON, Boolean, DateTime, String, create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from src.models.models import RecipeDetail
from src.utils.deadline import spawn_background
from src.utils.errors import PersistenceConflict
from src.utils.logger import logger

DEFAULT_SQLITE_PATH = "tmp/recipe_assistant_recipes.db"


class Base(DeclarativeBase):
    pass


class RecipeRecord(Base):
    __tablename__ = "recipe"

    id: Mapped[str] = mapped_column(String(256), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    user_id: Mapped[str] = mapped_column(String(256), nullable=False)
    details: Mapped[dict] = mapped_column(JSON, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class RecipeStore:
    """Recipe records with update-instead-of-insert semantics.

    Args:
        database_url: SQLAlchemy URL. None means a SQLite file under tmp/.
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        if not database_url:
            os.makedirs(os.path.dirname(DEFAULT_SQLITE_PATH), exist_ok=True)
            database_url = f"sqlite:///{DEFAULT_SQLITE_PATH}"

        if database_url.startswith("sqlite"):
            # Saves run in worker threads
            self.engine = create_engine(database_url, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(database_url, pool_pre_ping=True)
        Base.metadata.create_all(self.engine)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def save_recipe(self, record_id: str, user_id: str, details: dict[str, Any]) -> None:
        """Insert a record, or update it in place when the id already exists.

        Raises:
            PersistenceConflict: If the insert hits a duplicate key anyway
                (a concurrent writer claimed the id between check and insert).
        """
        try:
            with self.session() as db:
                existing = db.get(RecipeRecord, record_id)
                if existing is not None:
                    existing.details = details
                    existing.user_id = user_id
                else:
                    db.add(
                        RecipeRecord(
                            id=record_id,
                            created_at=datetime.now(timezone.utc),
                            user_id=user_id,
                            details=details,
                            is_favorite=False,
                        )
                    )
        except IntegrityError as e:
            raise PersistenceConflict(record_id) from e

    def get_recipe(self, record_id: str) -> Optional[RecipeRecord]:
        with self.session() as db:
            return db.get(RecipeRecord, record_id)

    async def asave_recipe(self, record_id: str, user_id: str, details: dict[str, Any]) -> None:
        await asyncio.to_thread(self.save_recipe, record_id, user_id, details)


def mint_record_id(recipe_id: str) -> str:
    return f"{recipe_id}_{uuid.uuid4().hex[:8]}"


def alternate_record_id(recipe_id: str) -> str:
    return f"{recipe_id}_{int(time.time() * 1000)}"


async def persist_recipe(store: RecipeStore, recipe_id: str, user_id: str, details: dict[str, Any]) -> Optional[str]:
    """Save a recipe under a fresh id, retrying once with an alternate id on conflict.

    Returns:
        The record id that was written, or None if the save failed (logged only).
    """
    record_id = mint_record_id(recipe_id)
    try:
        await store.asave_recipe(record_id, user_id, details)
        logger.info(f"✓ Recipe {recipe_id} saved as {record_id}")
        return record_id
    except PersistenceConflict:
        retry_id = alternate_record_id(recipe_id)
        logger.warning(f"Recipe id {record_id} already taken, retrying as {retry_id}")
        try:
            await store.asave_recipe(retry_id, user_id, details)
            logger.info(f"✓ Recipe {recipe_id} saved as {retry_id}")
            return retry_id
        except Exception as e:
            logger.error(f"Failed to save recipe {recipe_id} after retry: {e}")
            return None
    except Exception as e:
        logger.error(f"Failed to save recipe {recipe_id}: {e}")
        return None


def schedule_persist(store: RecipeStore, recipe: RecipeDetail, user_id: str) -> asyncio.Task:
    """Detach a durable write of `recipe`; the request path never awaits it."""
    details = recipe.model_dump(mode="json", by_alias=True)
    return spawn_background(
        persist_recipe(store, recipe.id, user_id, details),
        name=f"persist recipe {recipe.id}",
    )
