"""
API key operations — one fixed GraphQL document per action.

Each action has a pure builder that maps caller input to an Operation, and an
async runner that executes it and shapes the result:

    query_key   → Credential, or None when the key is not found
    create_key  → MutationResult over apiAccessCreateKeys
    update_key  → MutationResult over apiAccessUpdateKeys
    delete_key  → MutationResult over apiAccessDeleteKeys

Mutation variables go through a FieldRule table that decides, per field,
whether a missing value is an error, omitted, or sent as null.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from nrkeys.client import NerdGraphClient
from nrkeys.errors import InvalidArgumentError, MissingFieldError
from nrkeys.models import Credential, MutationResult, Operation, Scalar

logger = logging.getLogger(__name__)


# ─── Documents ───────────────────────────────────────────────────────

QUERY_KEY_DOCUMENT = """
query($id: ID!, $keyType: ApiAccessKeyType!) {
    actor {
        apiAccess {
            key(id: $id, keyType: $keyType) {
                id
                key
                name
                notes
                type
            }
        }
    }
}"""

CREATE_KEY_DOCUMENT = """
mutation($accountId: Int!, $keyType: ApiAccessKeyType!, $name: String!, $notes: String) {
    apiAccessCreateKeys(keys: [{
        accountId: $accountId,
        keyType: $keyType,
        name: $name,
        notes: $notes
    }]) {
        createdKeys {
            id
            name
            type
            key
            notes
        }
        errors {
            message
            type
        }
    }
}"""

UPDATE_KEY_DOCUMENT = """
mutation($keyId: String!, $name: String, $notes: String) {
    apiAccessUpdateKeys(keys: [{
        id: $keyId,
        name: $name,
        notes: $notes
    }]) {
        updatedKeys {
            id
            name
            type
            notes
        }
        errors {
            message
            type
        }
    }
}"""

# The id argument is list-typed; a single id is coerced to a one-element list.
_DELETE_KEY_TEMPLATE = """
mutation($keyId: ID!) {
    apiAccessDeleteKeys(keys: {%s: $keyId}) {
        deletedKeys {
            id
        }
        errors {
            message
            type
        }
    }
}"""

DELETE_KEY_DOCUMENTS: dict[str, str] = {
    "INGEST": _DELETE_KEY_TEMPLATE % "ingestKeyIds",
    "USER": _DELETE_KEY_TEMPLATE % "userKeyIds",
}


# ─── Variable binding ────────────────────────────────────────────────


class Presence(StrEnum):
    REQUIRED = "required"
    OMIT_IF_ABSENT = "omit_if_absent"
    NULL_IF_ABSENT = "null_if_absent"


class _Clear:
    """Sentinel: send an explicit null to clear a field."""

    _instance: _Clear | None = None

    def __new__(cls) -> _Clear:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLEAR"


CLEAR = _Clear()


@dataclass(frozen=True)
class FieldRule:
    name: str
    presence: Presence = Presence.OMIT_IF_ABSENT
    clearable: bool = False


CREATE_RULES: tuple[FieldRule, ...] = (
    FieldRule("accountId", Presence.REQUIRED),
    FieldRule("keyType", Presence.REQUIRED),
    FieldRule("name", Presence.REQUIRED),
    FieldRule("notes"),
)

UPDATE_RULES: tuple[FieldRule, ...] = (
    FieldRule("keyId", Presence.REQUIRED),
    FieldRule("name"),
    FieldRule("notes", clearable=True),
)

DELETE_RULES: tuple[FieldRule, ...] = (FieldRule("keyId", Presence.REQUIRED),)


def bind_variables(rules: tuple[FieldRule, ...], values: dict[str, Any]) -> dict[str, Scalar]:
    """Build a variables mapping from caller values according to `rules`.

    None means "not supplied". CLEAR means "send null", and is only
    accepted on clearable fields. Values without a rule are rejected.
    """
    unknown = set(values) - {r.name for r in rules}
    if unknown:
        raise ValueError(f"Unknown variable(s): {', '.join(sorted(unknown))}")

    variables: dict[str, Scalar] = {}
    for rule in rules:
        value = values.get(rule.name)
        if value is CLEAR:
            if not rule.clearable:
                raise ValueError(f"Field {rule.name!r} cannot be cleared")
            variables[rule.name] = None
        elif value is not None:
            variables[rule.name] = value
        elif rule.presence is Presence.REQUIRED:
            raise MissingFieldError(rule.name)
        elif rule.presence is Presence.NULL_IF_ABSENT:
            variables[rule.name] = None
    return variables


def parse_account_id(account_id: str | int) -> int:
    """Coerce an account id to the Int the create mutation declares."""
    if isinstance(account_id, bool):
        raise InvalidArgumentError(f"Account id must be a number, got {account_id!r}")
    if isinstance(account_id, int):
        value = account_id
    else:
        text = str(account_id).strip()
        # ASCII digits only
        if not (text.isascii() and text.isdecimal()):
            raise InvalidArgumentError(f"Account id must be a number, got {account_id!r}")
        value = int(text)
    if value <= 0:
        raise InvalidArgumentError(f"Account id must be positive, got {value}")
    return value


# ─── Query ───────────────────────────────────────────────────────────


def build_query_operation(key_id: str | None, key_type: str | None) -> Operation:
    """Variables are only bound when both the id and the type are given."""
    variables: dict[str, Scalar] = {}
    if key_id is not None and key_type is not None:
        variables["id"] = key_id
        variables["keyType"] = key_type
    else:
        logger.warning(
            "Querying without a complete filter (key id and key type are both needed); "
            "sending no variables"
        )
    return Operation(QUERY_KEY_DOCUMENT, variables)


def extract_key(data: Any) -> Credential | None:
    """Pull actor.apiAccess.key out of query data. None means not found."""
    node = data
    for segment in ("actor", "apiAccess", "key"):
        if not isinstance(node, dict):
            return None
        node = node.get(segment)
    # A null key object is "not found", not an all-N/A credential
    if not isinstance(node, dict):
        return None
    return Credential.from_payload(node)


async def query_key(
    client: NerdGraphClient, key_id: str | None = None, key_type: str | None = None
) -> Credential | None:
    operation = build_query_operation(key_id, key_type)
    data = await client.run(operation)
    return extract_key(data)


# ─── Create ──────────────────────────────────────────────────────────


def build_create_operation(
    account_id: str | int, key_type: str, name: str, notes: str | None = None
) -> Operation:
    variables = bind_variables(
        CREATE_RULES,
        {
            "accountId": parse_account_id(account_id),
            "keyType": key_type,
            "name": name,
            "notes": notes,
        },
    )
    return Operation(CREATE_KEY_DOCUMENT, variables)


async def create_key(
    client: NerdGraphClient,
    account_id: str | int,
    key_type: str,
    name: str,
    notes: str | None = None,
) -> MutationResult:
    operation = build_create_operation(account_id, key_type, name, notes)
    data = await client.run(operation)
    return MutationResult(root_field="apiAccessCreateKeys", keys_field="createdKeys", data=data)


# ─── Update ──────────────────────────────────────────────────────────


def build_update_operation(
    key_id: str, name: str | None = None, notes: str | _Clear | None = None
) -> Operation:
    """Fields left as None are not touched; notes=CLEAR blanks the notes."""
    variables = bind_variables(UPDATE_RULES, {"keyId": key_id, "name": name, "notes": notes})
    return Operation(UPDATE_KEY_DOCUMENT, variables)


async def update_key(
    client: NerdGraphClient,
    key_id: str,
    name: str | None = None,
    notes: str | _Clear | None = None,
) -> MutationResult:
    operation = build_update_operation(key_id, name, notes)
    data = await client.run(operation)
    return MutationResult(root_field="apiAccessUpdateKeys", keys_field="updatedKeys", data=data)


# ─── Delete ──────────────────────────────────────────────────────────


def build_delete_operation(key_id: str, key_type: str = "INGEST") -> Operation:
    document = DELETE_KEY_DOCUMENTS.get(key_type.upper())
    if document is None:
        raise InvalidArgumentError(
            f"Cannot delete keys of type {key_type!r} "
            f"(expected one of: {', '.join(DELETE_KEY_DOCUMENTS)})"
        )
    return Operation(document, bind_variables(DELETE_RULES, {"keyId": key_id}))


async def delete_key(
    client: NerdGraphClient, key_id: str, key_type: str = "INGEST"
) -> MutationResult:
    operation = build_delete_operation(key_id, key_type)
    data = await client.run(operation)
    return MutationResult(root_field="apiAccessDeleteKeys", keys_field="deletedKeys", data=data)
