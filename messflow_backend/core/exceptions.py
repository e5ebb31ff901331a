# core/exceptions.py

"""
DOMAIN ERRORS

Centralized base errors for every service in the project.

Mapping used by the API layer (see core/api.py):
- ValidationFailure   -> 400 (nothing was written)
- RecordNotFound      -> 404 (missing OR belongs to another tenant)
- LimitReached        -> 403 (free-tier gate)
- SubscriptionExpired -> 403 (route-level gating)
"""


class MessFlowError(Exception):
    """Base exception for all service failures."""


class ValidationFailure(MessFlowError, ValueError):
    """Raised when input is rejected before any write happens."""


class RecordNotFound(MessFlowError):
    """Raised when a record does not exist for the requesting tenant."""


class LimitReached(MessFlowError):
    """Raised when a free-tier limit blocks the initiating action."""


class SubscriptionExpired(MessFlowError):
    """Raised when a write is attempted on an expired subscription."""
