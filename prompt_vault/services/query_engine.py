"""
Query Engine - filter and order prompts.

Filters are plain case-insensitive substring and exact-tag checks combined with
AND. Results always come back favorites first, then most recently updated, then
most recently created.
"""

from dataclasses import dataclass
from typing import List, Optional

from prompt_vault.models import Prompt
from prompt_vault.services.prompt_store import PromptStore
from prompt_vault.tags import normalize_tag


@dataclass(frozen=True)
class PromptFilter:
    term: Optional[str] = None
    tag: Optional[str] = None
    favorite_only: bool = False

    @classmethod
    def build(cls, term: Optional[str] = None, tag: Optional[str] = None, favorite_only: bool = False) -> "PromptFilter":
        """Normalize raw request values. Blank values count as absent."""
        term = (term or "").strip().lower() or None
        tag = normalize_tag(tag) if tag else None
        return cls(term=term, tag=tag or None, favorite_only=bool(favorite_only))

    def matches(self, prompt: Prompt) -> bool:
        if self.favorite_only and not prompt.favorite:
            return False

        tags = prompt.tags or []
        if self.tag is not None and self.tag not in tags:
            return False

        if self.term is not None:
            return (
                self.term in prompt.title.lower()
                or self.term in prompt.content.lower()
                or any(self.term in tag.lower() for tag in tags)
            )
        return True


def sort_prompts(prompts: List[Prompt]) -> List[Prompt]:
    return sorted(
        prompts,
        key=lambda prompt: (prompt.favorite, prompt.updated_at, prompt.id),
        reverse=True,
    )


class QueryEngine:
    def __init__(self, store: PromptStore):
        self.store = store

    def query(
        self,
        term: Optional[str] = None,
        tag: Optional[str] = None,
        favorite_only: bool = False,
    ) -> List[Prompt]:
        prompt_filter = PromptFilter.build(term=term, tag=tag, favorite_only=favorite_only)
        prompts = self.store.list_prompts(
            predicate=prompt_filter.matches,
            favorite_only=prompt_filter.favorite_only,
        )
        return sort_prompts(prompts)
