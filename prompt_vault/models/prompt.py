from sqlalchemy import Column, DateTime, Text, Integer, Boolean, String
from sqlalchemy.types import TypeDecorator
from datetime import datetime, timezone
import json
from prompt_vault.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, the form DateTime columns round-trip on SQLite."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TagList(TypeDecorator):
    """List of tag strings stored as a JSON array in a text column."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps(list(value or []), ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(TagList, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    favorite = Column(Boolean, nullable=False, default=False, index=True)

    # Usage tracking, only changed by PromptStore.record_usage
    use_count = Column(Integer, nullable=False, default=0)
    last_used = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<Prompt id={self.id} title={self.title!r} favorite={self.favorite}>"
