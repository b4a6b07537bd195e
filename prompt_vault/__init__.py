"""Prompt Vault: a personal prompt library service."""

__version__ = "1.0.0"
