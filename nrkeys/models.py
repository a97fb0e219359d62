"""
Data models for nrkeys.

Wire-facing shapes (the GraphQL response envelope and its error entries) are
pydantic models so that shape mismatches surface as validation errors.
Everything built on our side of the wire is a plain dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel

# A single GraphQL variable value. Lists and objects are never sent.
Scalar = Union[str, int, float, bool, None]

NOT_AVAILABLE = "N/A"


# ─── Wire models ─────────────────────────────────────────────────────


class Location(BaseModel):
    line: int
    column: int


class ApiError(BaseModel):
    """One entry of a GraphQL `errors` array.

    Only `message` is surfaced to users; locations and path are decoded so
    they can be inspected from GraphQLApiError.errors.
    """

    message: str
    locations: list[Location] | None = None
    path: list[str | int] | None = None


class Envelope(BaseModel):
    """Top-level GraphQL response: {"data"?: any, "errors"?: [...]}."""

    data: Any = None
    errors: list[ApiError] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


# ─── Request side ────────────────────────────────────────────────────


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


@dataclass(frozen=True)
class Operation:
    """A GraphQL document plus the variables bound into it."""

    document: str
    variables: dict[str, Scalar] | None = None

    def __post_init__(self) -> None:
        if self.variables is None:
            return
        for name, value in self.variables.items():
            if not is_scalar(value):
                raise TypeError(
                    f"Variable {name!r} must be a str, int, float, bool or None, "
                    f"got {type(value).__name__}"
                )
        # Detach from the caller's dict
        object.__setattr__(self, "variables", dict(self.variables))


# ─── Results ─────────────────────────────────────────────────────────


@dataclass
class Credential:
    """An API key as returned by the query path.

    Any field missing (or null) in the response reads as "N/A".
    """

    key: str = NOT_AVAILABLE
    name: str = NOT_AVAILABLE
    key_type: str = NOT_AVAILABLE
    notes: str = NOT_AVAILABLE
    id: str = NOT_AVAILABLE

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Credential:
        return cls(
            key=_value_or_na(payload, "key"),
            name=_value_or_na(payload, "name"),
            key_type=_value_or_na(payload, "type"),
            notes=_value_or_na(payload, "notes"),
            id=_value_or_na(payload, "id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "type": self.key_type,
            "notes": self.notes,
        }


def _value_or_na(payload: dict[str, Any], name: str) -> Any:
    value = payload.get(name)
    return NOT_AVAILABLE if value is None else value


@dataclass
class MutationResult:
    """Decoded `data` of a key mutation, passed through untouched.

    NerdGraph key mutations report per-key failures inside the payload
    (`<root_field>.errors`) rather than in the top-level `errors` array.
    Both channels stay visible: top-level errors raise GraphQLApiError,
    payload errors are exposed here via `payload_errors`.
    """

    root_field: str
    keys_field: str
    data: Any = None

    @property
    def payload(self) -> dict[str, Any] | None:
        if not isinstance(self.data, dict):
            return None
        payload = self.data.get(self.root_field)
        return payload if isinstance(payload, dict) else None

    @property
    def keys(self) -> list[dict[str, Any]]:
        payload = self.payload
        if payload is None:
            return []
        return _object_entries(payload.get(self.keys_field))

    @property
    def payload_errors(self) -> list[dict[str, Any]]:
        payload = self.payload
        if payload is None:
            return []
        return _object_entries(payload.get("errors"))

    @property
    def ok(self) -> bool:
        """True when the mutation payload reported no per-key errors."""
        return not self.payload_errors


def _object_entries(value: Any) -> list[dict[str, Any]]:
    """Object entries of a GraphQL list; nulls and scalars are skipped."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]
