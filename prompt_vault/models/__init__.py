from prompt_vault.models.prompt import Prompt, TagList

__all__ = [
    "Prompt",
    "TagList",
]
