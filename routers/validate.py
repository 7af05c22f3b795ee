"""Validate endpoint: standardize a SugarCRM contact's address via USPS."""

from functools import lru_cache
from html import escape
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from config import get_settings
from errors import AddressSyncError
from logging_config import get_logger
from services.sugar import SugarClient
from services.token_cache import TokenCache
from services.usps import UspsClient
from services.validator import AddressValidator

logger = get_logger(__name__)

router = APIRouter(prefix="/usps", tags=["validate"])


@lru_cache
def get_validator() -> AddressValidator:
    """Build the process-wide validator; its SugarCRM token cache is shared."""
    settings = get_settings()
    sugar = SugarClient(
        settings.sugar_url,
        settings.sugar_username,
        settings.sugar_password,
        platform=settings.sugar_platform,
        cache=TokenCache(),
        timeout=settings.http_timeout,
    )
    usps = UspsClient(
        settings.usps_client_id,
        settings.usps_client_secret,
        base_url=settings.usps_url,
        cache=TokenCache() if settings.usps_cache_token else None,
        timeout=settings.http_timeout,
    )
    return AddressValidator(sugar, usps)


@router.get("/validate", response_class=HTMLResponse)
async def validate_contact(
    record_id: Optional[str] = Query(None),
    validator: AddressValidator = Depends(get_validator),
) -> Response:
    try:
        await validator.validate(record_id)
    except AddressSyncError as err:
        if err.status_code < 500:
            return PlainTextResponse(err.message, status_code=err.status_code)
        logger.error(
            "Error during validation",
            record_id=record_id,
            error=err.message,
            upstream=err.detail,
        )
        return HTMLResponse(
            f"<h3>Address validation failed</h3><pre>{escape(err.message, quote=False)}</pre>",
            status_code=err.status_code,
        )
    except Exception as exc:
        logger.exception("Unexpected error during validation", record_id=record_id)
        return HTMLResponse(
            "<h3>Address validation failed</h3>"
            f"<pre>{escape(str(exc) or type(exc).__name__, quote=False)}</pre>",
            status_code=500,
        )
    return HTMLResponse(
        f"<h3>Address validated and updated for Contact ID: {escape(record_id, quote=False)}</h3>"
    )
