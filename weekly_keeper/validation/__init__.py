"""Validation package."""

from weekly_keeper.validation.validator import EntryValidator, InvalidEntryError

__all__ = ["EntryValidator", "InvalidEntryError"]
