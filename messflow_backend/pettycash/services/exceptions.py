# pettycash/services/exceptions.py

from core.exceptions import ValidationFailure


class PettyCashError(ValidationFailure):
    """Raised when a petty-cash change would break the balance chain."""


class InsufficientBalance(PettyCashError):
    """Raised when a small expense exceeds the current petty-cash balance."""
