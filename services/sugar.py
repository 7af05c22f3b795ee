"""SugarCRM client: password-grant token and Contact read/update."""

from typing import Optional
from urllib.parse import quote

import httpx
import pydantic

from errors import AuthError, NotFoundError, UpstreamError
from logging_config import get_logger
from models import Contact, ContactUpdate
from services._http import (
    expires_in,
    failure_message,
    response_payload,
    transport_message,
)
from services.token_cache import TokenCache

logger = get_logger(__name__)

API_PATH = "/rest/v11_10"
CLIENT_ID = "sugar"


class SugarClient:
    """Talks to the SugarCRM v11_10 REST API.

    The access token is memoized in *cache*; pass the same
    :class:`TokenCache` to every client in the process so requests share it.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        platform: str = "custom_api",
        cache: Optional[TokenCache] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") + API_PATH
        self.username = username
        self.password = password
        self.platform = platform
        self.cache = cache if cache is not None else TokenCache()
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def get_token(self) -> str:
        """Return a SugarCRM access token, fetching a new one when needed."""
        now = self.cache.clock()
        cached = self.cache.get(now)
        if cached:
            logger.debug("Using cached SugarCRM token")
            return cached

        logger.info("Requesting new SugarCRM token")
        try:
            async with self._client() as client:
                response = await client.post(
                    "/oauth2/token",
                    json={
                        "grant_type": "password",
                        "client_id": CLIENT_ID,
                        "client_secret": "",
                        "username": self.username,
                        "password": self.password,
                        "platform": self.platform,
                    },
                )
        except httpx.RequestError as exc:
            raise AuthError(transport_message("SugarCRM token", exc)) from exc

        payload = response_payload(response)
        if not response.is_success:
            raise AuthError(failure_message("SugarCRM token", response), payload)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthError("SugarCRM token response did not include an access_token")

        try:
            lifetime = expires_in(payload)
        except (TypeError, ValueError) as exc:
            raise AuthError("SugarCRM token response had an invalid expires_in") from exc

        self.cache.store(token, lifetime, now)
        logger.info("Got new SugarCRM token", expires_in=lifetime)
        return token

    def _contact_path(self, record_id: str) -> str:
        return f"/Contacts/{quote(record_id, safe='')}"

    async def _headers(self) -> dict[str, str]:
        return {"OAuth-Token": await self.get_token()}

    async def get_contact(self, record_id: str) -> Contact:
        headers = await self._headers()
        logger.info("Fetching SugarCRM contact", record_id=record_id)
        try:
            async with self._client() as client:
                response = await client.get(
                    self._contact_path(record_id), headers=headers
                )
        except httpx.RequestError as exc:
            raise UpstreamError(transport_message("SugarCRM", exc)) from exc

        if response.status_code == 404:
            raise NotFoundError(
                failure_message("SugarCRM", response), response_payload(response)
            )
        if not response.is_success:
            raise UpstreamError(
                failure_message("SugarCRM", response), response_payload(response)
            )
        payload = response_payload(response)
        if not isinstance(payload, dict):
            raise UpstreamError("SugarCRM returned a malformed contact", payload)
        logger.info("Got SugarCRM contact", record_id=record_id)
        try:
            return Contact.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise UpstreamError("SugarCRM returned a malformed contact", payload) from exc

    async def update_contact(self, record_id: str, update: ContactUpdate) -> None:
        """PUT the non-empty fields of *update* onto the contact."""
        headers = await self._headers()
        body = update.model_dump(exclude_none=True)
        logger.info("Updating SugarCRM contact", record_id=record_id, data=body)
        try:
            async with self._client() as client:
                response = await client.put(
                    self._contact_path(record_id), json=body, headers=headers
                )
        except httpx.RequestError as exc:
            raise UpstreamError(transport_message("SugarCRM", exc)) from exc

        if not response.is_success:
            raise UpstreamError(
                failure_message("SugarCRM", response), response_payload(response)
            )
        logger.info("Updated SugarCRM contact", record_id=record_id)
