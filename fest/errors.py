"""Errors raised by the fest services. The web layer maps them to HTTP responses."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from fest.services.cascade import DeletionSummary


class FestError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFound(FestError):
    """Target id is absent from the store."""

    def __init__(self, kind: str, entity_id):
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class MissingCredential(FestError):
    """A new user account was required but no password was supplied."""


class Conflict(FestError):
    """Uniqueness or foreign-key constraint rejected the write."""


class ValidationError(FestError):
    """Malformed input rejected before any write."""


class PartialDeletion(FestError):
    """A cascade stopped partway. ``summary`` records which levels were removed."""

    def __init__(self, message: str, summary: Optional["DeletionSummary"] = None):
        super().__init__(message)
        self.summary = summary
