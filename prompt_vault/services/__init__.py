from prompt_vault.services.prompt_store import PromptStore
from prompt_vault.services.query_engine import PromptFilter, QueryEngine

__all__ = [
    "PromptStore",
    "PromptFilter",
    "QueryEngine",
]
