"""Exception types raised by the CRM core."""
from __future__ import annotations


class CrmError(Exception):
    """Base class for errors raised by the CRM core."""


class CrmValidationError(CrmError, ValueError):
    """Raised when caller supplied data fails validation."""
