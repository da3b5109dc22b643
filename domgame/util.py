"""Module containung various utility definitions.

In particular, the base class :class:`BaseModel` and the exception classes used throughout the package.
"""
from traceback import format_exception
from typing import Any, LiteralString, Self

from pydantic import ConfigDict, BaseModel as PydanticBaseModel


class BaseModel(PydanticBaseModel):
    """Base class for all pydantic models."""

    model_config = ConfigDict(extra="forbid", from_attributes=True)


class DomgameBaseException(Exception):
    """Base exception class for errors used by the domgame package."""

    def __init__(self, message: LiteralString, *, detail: str | list[str] | list[dict[str, Any]] | None = None) -> None:
        """Base exception class for errors used by the domgame package.

        Args:
            message: Simple error message that can always be displayed.
            detail: More detailed error message, e.g. the individual schema violations of a dataset.
        """
        self.message = message
        self.detail = detail
        super().__init__(message)


class DatasetError(DomgameBaseException):
    """Indicates that the graph catalog could not be loaded or does not fit the schema."""


class SessionError(DomgameBaseException):
    """Indicates that a game command was issued while the session cannot process it."""


class ExceptionInfo(BaseModel):
    """Details about an exception that was raised."""

    type: str
    message: str
    detail: str | list[str] | list[dict[str, Any]] | None = None

    @classmethod
    def from_exception(cls, error: Exception) -> Self:
        """Constructs an instance from a raised exception."""
        if isinstance(error, DomgameBaseException):
            return cls(
                type=error.__class__.__name__,
                message=error.message,
                detail=error.detail,
            )
        else:
            return cls(
                type=error.__class__.__name__,
                message=str(error),
                detail=format_exception(error),
            )
