"""
Async client for New Relic's NerdGraph GraphQL API.

Wraps httpx.AsyncClient: serializes a document plus variables, POSTs it,
decodes the response envelope and classifies failures as TransportError,
DecodeError or GraphQLApiError. One request per execute() call, no retries.

Usage:
    from nrkeys.client import NerdGraphClient
    from nrkeys.config import get_config

    async with NerdGraphClient(get_config()) as client:
        data = await client.execute("{ actor { user { name } } }")
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from nrkeys.config import Config
from nrkeys.errors import DecodeError, GraphQLApiError, TransportError
from nrkeys.models import Envelope, Operation, Scalar

logger = logging.getLogger(__name__)

API_KEY_HEADER = "API-Key"


def build_request_body(document: str, variables: dict[str, Scalar] | None = None) -> dict[str, Any]:
    """JSON body for a GraphQL POST. `variables` is left out when None."""
    body: dict[str, Any] = {"query": document}
    if variables is not None:
        body["variables"] = variables
    return body


def decode_envelope(text: str, status_code: int | None = None) -> Envelope:
    """Parse a raw response body into an Envelope.

    Raises DecodeError for malformed JSON and for JSON that is not shaped
    like a GraphQL response.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(
            f"Response is not valid JSON (HTTP {status_code}): {e.msg} at position {e.pos}",
            status_code=status_code,
            body=text,
        ) from e

    if not isinstance(raw, dict):
        raise DecodeError(
            f"Response is not a GraphQL envelope (HTTP {status_code}): "
            f"expected a JSON object, got {type(raw).__name__}",
            status_code=status_code,
            body=text,
        )

    try:
        return Envelope.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(
            f"Response is not a GraphQL envelope (HTTP {status_code}): "
            f"{e.error_count()} validation error(s)",
            status_code=status_code,
            body=text,
        ) from e


def unwrap_envelope(envelope: Envelope) -> Any:
    """Return `data`, or raise GraphQLApiError if any errors were reported.

    Partial data alongside errors is discarded. No errors and no data
    returns None.
    """
    if envelope.errors:
        raise GraphQLApiError(envelope.errors)
    return envelope.data


class NerdGraphClient:
    """Transport and envelope codec for a single NerdGraph endpoint."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.endpoint = config.endpoint
        self._client = httpx.AsyncClient(timeout=config.timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> NerdGraphClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.config.api_key,
        }

    async def execute(self, document: str, variables: dict[str, Scalar] | None = None) -> Any:
        """POST one GraphQL operation and return its decoded `data`."""
        body = build_request_body(document, variables)
        logger.debug(
            "POST %s (variables: %s, key %s)",
            self.endpoint,
            ", ".join(sorted(variables)) if variables else "none",
            self.config.masked_key,
        )

        try:
            resp = await self._client.post(self.endpoint, json=body, headers=self.headers)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request to {self.endpoint} timed out after {self.config.timeout:g}s",
                endpoint=self.endpoint,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {self.endpoint} failed: {e}", endpoint=self.endpoint
            ) from e

        text = resp.text
        logger.debug("HTTP %d, %d bytes", resp.status_code, len(text))
        if not 200 <= resp.status_code < 300:
            logger.warning("NerdGraph returned HTTP %d, decoding body anyway", resp.status_code)

        envelope = decode_envelope(text, resp.status_code)
        if envelope.has_errors:
            logger.debug("NerdGraph reported %d error(s)", len(envelope.errors or []))
        return unwrap_envelope(envelope)

    async def run(self, operation: Operation) -> Any:
        """Execute a prebuilt Operation."""
        return await self.execute(operation.document, operation.variables)
