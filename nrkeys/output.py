"""Rendering of operation results for the terminal (json or text)."""

from __future__ import annotations

import json
from typing import Any

from nrkeys.models import Credential, MutationResult

NOT_FOUND_MESSAGE = "No API keys found or unable to retrieve keys"


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_credential(credential: Credential | None, fmt: str = "json") -> str:
    if credential is None:
        return NOT_FOUND_MESSAGE
    if fmt == "json":
        return to_json(credential.to_dict())
    return "\n".join(
        [
            "",
            "API Key Details:",
            f"Key: {credential.key}",
            f"Name: {credential.name}",
            f"Type: {credential.key_type}",
            f"Notes: {credential.notes}",
        ]
    )


def render_mutation(result: MutationResult, fmt: str = "json") -> str:
    """JSON mode prints the decoded data verbatim; text mode summarizes it."""
    if fmt == "json":
        return to_json(result.data)

    lines = []
    for key in result.keys:
        parts = [str(key.get("id", "?"))]
        for field_name in ("name", "type", "key", "notes"):
            if key.get(field_name) is not None:
                parts.append(f"{field_name}={key[field_name]}")
        lines.append("  ".join(parts))
    if not lines and not result.payload_errors:
        lines.append("No keys affected.")
    for err in result.payload_errors:
        lines.append(f"! {err.get('type') or 'ERROR'}: {err.get('message', '')}")
    return "\n".join(lines)
