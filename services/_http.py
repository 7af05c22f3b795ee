"""Helpers shared by the outbound API clients."""

from typing import Any

import httpx


def failure_message(service: str, response: httpx.Response) -> str:
    return f"{service} request failed with status code {response.status_code}"


def transport_message(service: str, exc: httpx.RequestError) -> str:
    return f"{service} request failed: {str(exc) or type(exc).__name__}"


def response_payload(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or the raw text when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def expires_in(payload: dict) -> float:
    """Token lifetime in seconds; a missing value counts as 0.

    Raises ``TypeError`` or ``ValueError`` when the provider sends something
    that is not a number.
    """
    return float(payload.get("expires_in") or 0)
