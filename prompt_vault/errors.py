"""Errors raised by the prompt store and surfaced by the HTTP layer."""


class PromptVaultError(Exception):
    """Base class for prompt vault errors."""


class ValidationError(PromptVaultError):
    """A required field is missing or blank. The record is left unchanged."""


class NotFoundError(PromptVaultError):
    """The referenced prompt does not exist."""

    def __init__(self, prompt_id: int):
        self.prompt_id = prompt_id
        super().__init__("Prompt not found")


class StorageError(PromptVaultError):
    """The underlying database failed. The operation was rolled back."""
