"""Recoverable errors raised by the planner services.

Store failures are not wrapped: SQLAlchemy errors propagate to the request
boundary as they are.
"""


class DinnerPlannerError(Exception):
    """Base class for errors a request handler can report back to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DinnerPlannerError):
    """Bad input: empty name, malformed date, unknown member, non-numeric id."""


class NotFoundError(DinnerPlannerError):
    """The referenced meal or dinner does not exist."""
