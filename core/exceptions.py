"""
Error taxonomy surfaced at the store boundary.

Storage-level failures (check constraints, foreign keys) are translated into
one of these before they reach a caller.
"""


class FlashcardsError(Exception):
    """Base class for all store errors."""


class ValidationError(FlashcardsError):
    """A length, range or enum constraint was violated."""


class ReferenceError(FlashcardsError):  # noqa: A001
    """A foreign reference is dangling or missing."""


class NotFoundError(FlashcardsError):
    """The requested row does not exist."""


class AuthorizationError(FlashcardsError):
    """The principal does not own the target row."""


class AuthenticationRequiredError(AuthorizationError):
    """The principal is anonymous."""
