"""
Error types raised by the NerdGraph client and the operation builders.

Three failure kinds come back from a request, and callers can tell them apart:

    TransportError:   the HTTP exchange itself failed (connect, read, timeout)
    DecodeError:      a body arrived but is not a GraphQL response envelope
    GraphQLApiError:  the envelope carried a non-empty `errors` array

Bad caller input is rejected before any I/O with ValueError subclasses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nrkeys.models import ApiError

# Raw body context kept on DecodeError
BODY_PREVIEW_CHARS = 200


class NerdGraphError(Exception):
    """Base class for failures talking to NerdGraph."""


class TransportError(NerdGraphError):
    def __init__(self, message: str, endpoint: str = "") -> None:
        super().__init__(message)
        self.endpoint = endpoint


class DecodeError(NerdGraphError):
    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body[:BODY_PREVIEW_CHARS]


class GraphQLApiError(NerdGraphError):
    """The API answered with one or more GraphQL errors.

    str(exc) is every error message joined by ", " in response order.
    """

    def __init__(self, errors: list[ApiError]) -> None:
        super().__init__(", ".join(e.message for e in errors))
        self.errors = errors

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


class InvalidArgumentError(ValueError):
    """A caller-supplied value cannot be sent as the declared GraphQL type."""


class MissingFieldError(ValueError):
    """A required operation variable was not supplied."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field
