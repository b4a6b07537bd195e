"""
Prompt Store - durable CRUD for prompts plus usage tracking.

Every operation runs in its own session and transaction. Usage and favorite
changes are issued as single UPDATE statements built from column expressions so
that concurrent callers never observe or produce a half-applied change.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Callable, List, Optional, Tuple
import logging

from sqlalchemy import delete, not_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prompt_vault.database import create_db_engine, create_session_factory, init_db
from prompt_vault.errors import NotFoundError, PromptVaultError, StorageError, ValidationError
from prompt_vault.models import Prompt
from prompt_vault.models.prompt import utcnow
from prompt_vault.tags import TagInput, count_tags, normalize_tags

logger = logging.getLogger(__name__)


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    return str(notes).strip() or None


def _require_text(title, content) -> Tuple[str, str]:
    title = str(title).strip() if title is not None else ""
    content = str(content).strip() if content is not None else ""
    if not title or not content:
        raise ValidationError("Title and content are required")
    return title, content


class PromptStore:
    """Owns the prompt table. Construct once at startup, close at shutdown."""

    def __init__(self, engine, clock: Callable[[], datetime] = utcnow):
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        self._clock = clock

    @classmethod
    def open(cls, database_url: str, echo: bool = False, clock: Callable[[], datetime] = utcnow) -> "PromptStore":
        """Create the engine, make sure the schema exists and return a store."""
        engine = create_db_engine(database_url, echo=echo)
        init_db(engine)
        return cls(engine, clock=clock)

    def close(self):
        self.engine.dispose()

    @contextmanager
    def _session(self):
        db: Session = self._session_factory()
        try:
            yield db
            db.commit()
        except PromptVaultError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Prompt storage failure: {e}")
            raise StorageError(str(e)) from e
        finally:
            db.close()

    @staticmethod
    def _fetch(db: Session, prompt_id: int) -> Prompt:
        prompt = db.get(Prompt, prompt_id)
        if prompt is None:
            raise NotFoundError(prompt_id)
        return prompt

    def create(
        self,
        title: str,
        content: str,
        tags: TagInput = None,
        notes: Optional[str] = None,
        favorite: bool = False,
    ) -> Prompt:
        title, content = _require_text(title, content)
        now = self._clock()
        prompt = Prompt(
            title=title,
            content=content,
            tags=normalize_tags(tags),
            notes=_clean_notes(notes),
            favorite=bool(favorite),
            use_count=0,
            last_used=None,
            created_at=now,
            updated_at=now,
        )
        with self._session() as db:
            db.add(prompt)
            db.flush()

        logger.info(f"Created prompt {prompt.id}: {prompt.title[:50]}")
        return prompt

    def update(
        self,
        prompt_id: int,
        title: str,
        content: str,
        tags: TagInput = None,
        notes: Optional[str] = None,
        favorite: bool = False,
    ) -> Prompt:
        """Replace the editable fields. Usage stats and created_at are kept."""
        title, content = _require_text(title, content)
        with self._session() as db:
            prompt = self._fetch(db, prompt_id)
            prompt.title = title
            prompt.content = content
            prompt.tags = normalize_tags(tags)
            prompt.notes = _clean_notes(notes)
            prompt.favorite = bool(favorite)
            prompt.updated_at = self._clock()

        logger.info(f"Updated prompt {prompt_id}")
        return prompt

    def delete(self, prompt_id: int) -> None:
        with self._session() as db:
            result = db.execute(
                delete(Prompt)
                .where(Prompt.id == prompt_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(prompt_id)

        logger.info(f"Deleted prompt {prompt_id}")

    def get(self, prompt_id: int) -> Prompt:
        with self._session() as db:
            return self._fetch(db, prompt_id)

    def record_usage(self, prompt_id: int) -> Prompt:
        """Count one use of the prompt (the user copied it)."""
        now = self._clock()
        with self._session() as db:
            result = db.execute(
                update(Prompt)
                .where(Prompt.id == prompt_id)
                .values(use_count=Prompt.use_count + 1, last_used=now, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(prompt_id)
            prompt = self._fetch(db, prompt_id)

        logger.info(f"Recorded usage of prompt {prompt_id} (use_count={prompt.use_count})")
        return prompt

    def toggle_favorite(self, prompt_id: int) -> Prompt:
        now = self._clock()
        with self._session() as db:
            result = db.execute(
                update(Prompt)
                .where(Prompt.id == prompt_id)
                .values(favorite=not_(Prompt.favorite), updated_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(prompt_id)
            prompt = self._fetch(db, prompt_id)

        logger.info(f"Prompt {prompt_id} favorite={prompt.favorite}")
        return prompt

    def list_prompts(
        self,
        predicate: Optional[Callable[[Prompt], bool]] = None,
        favorite_only: bool = False,
    ) -> List[Prompt]:
        """Load prompts in one read, optionally filtered by a predicate."""
        with self._session() as db:
            query = db.query(Prompt)
            if favorite_only:
                query = query.filter(Prompt.favorite.is_(True))
            prompts = query.all()

        if predicate is None:
            return prompts
        return [prompt for prompt in prompts if predicate(prompt)]

    def tag_counts(self) -> List[Tuple[str, int]]:
        """Number of prompts per tag, computed from the live rows."""
        with self._session() as db:
            rows = db.query(Prompt.tags).all()
        return count_tags(row.tags for row in rows)

    def count(self) -> int:
        with self._session() as db:
            return db.query(Prompt).count()
