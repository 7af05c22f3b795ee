"""USPS Addresses API v3 client: client-credentials token and standardization."""

from typing import Optional

import httpx
import pydantic

from config import DEFAULT_USPS_URL
from errors import AuthError, UpstreamError, ValidationError
from logging_config import get_logger
from models import AddressParams, StandardizedAddress
from services._http import (
    expires_in,
    failure_message,
    response_payload,
    transport_message,
)
from services.token_cache import TokenCache

logger = get_logger(__name__)

# Statuses USPS uses when the address itself cannot be resolved.
_UNRESOLVABLE = (400, 404)


def _usps_error_message(payload) -> Optional[str]:
    """Pull ``error.message`` out of a USPS error body, if there is one."""
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return None


class UspsClient:
    """Client for the USPS OAuth and address-standardization endpoints.

    Tokens are fetched fresh for every call unless a *cache* is given, in
    which case they are reused with the same expiry margin as SugarCRM's.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_USPS_URL,
        cache: Optional[TokenCache] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def get_access_token(self) -> str:
        now = self.cache.clock() if self.cache is not None else None
        if self.cache is not None:
            cached = self.cache.get(now)
            if cached:
                logger.debug("Using cached USPS token")
                return cached

        logger.info("Requesting USPS access token")
        try:
            async with self._client() as client:
                response = await client.post(
                    "/oauth2/v3/token",
                    json={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "grant_type": "client_credentials",
                    },
                )
        except httpx.RequestError as exc:
            raise AuthError(transport_message("USPS token", exc)) from exc

        payload = response_payload(response)
        if not response.is_success:
            raise AuthError(failure_message("USPS token", response), payload)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthError("USPS token response did not include an access_token")

        if self.cache is not None:
            try:
                lifetime = expires_in(payload)
            except (TypeError, ValueError) as exc:
                raise AuthError("USPS token response had an invalid expires_in") from exc
            self.cache.store(token, lifetime, now)
        logger.info("Got USPS access token")
        return token

    async def standardize(self, params: AddressParams) -> StandardizedAddress:
        """Return USPS's standardized form of *params*.

        Raises ``ValidationError`` when USPS cannot resolve the address and
        ``UpstreamError`` for any other failure.
        """
        token = await self.get_access_token()
        try:
            async with self._client() as client:
                response = await client.get(
                    "/addresses/v3/address-standardization",
                    params=params.model_dump(),
                    headers={
                        "Authorization": f"Bearer {token}",
                        "Accept": "application/json",
                    },
                )
        except httpx.RequestError as exc:
            raise UpstreamError(transport_message("USPS", exc)) from exc

        payload = response_payload(response)
        if response.status_code in _UNRESOLVABLE:
            raise ValidationError(
                _usps_error_message(payload) or failure_message("USPS", response),
                payload,
            )
        if not response.is_success:
            raise UpstreamError(failure_message("USPS", response), payload)

        address = payload.get("address") if isinstance(payload, dict) else None
        if not isinstance(address, dict):
            raise ValidationError("USPS response did not include an address", payload)
        logger.info("USPS response received", address=address)
        try:
            return StandardizedAddress.model_validate(address)
        except pydantic.ValidationError as exc:
            raise UpstreamError("USPS returned a malformed address", payload) from exc
