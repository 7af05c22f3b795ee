"""Fetch a contact, standardize its address with USPS, write it back."""

from typing import Optional

import structlog

from errors import MissingInputError, MissingRequiredFieldsError
from logging_config import get_logger
from models import AddressParams
from services.sugar import SugarClient
from services.usps import UspsClient

logger = get_logger(__name__)


class AddressValidator:
    def __init__(self, sugar: SugarClient, usps: UspsClient):
        self.sugar = sugar
        self.usps = usps

    async def validate(self, record_id: Optional[str]) -> str:
        """Run the validate-and-update workflow for one contact.

        Each step makes at most one attempt; the first failure propagates as
        an ``AddressSyncError`` and nothing already done is undone.  Returns
        the record id on success.
        """
        if not record_id:
            logger.info("Missing record_id in request")
            raise MissingInputError()

        with structlog.contextvars.bound_contextvars(record_id=record_id):
            contact = await self.sugar.get_contact(record_id)

            params = AddressParams.from_contact(contact)
            logger.info("USPS validation input", params=params.model_dump())
            if not params.is_complete():
                logger.info("Missing one or more required address fields")
                raise MissingRequiredFieldsError()

            corrected = await self.usps.standardize(params)
            logger.info(
                "Corrected address from USPS",
                address=corrected.model_dump(exclude_none=True),
            )

            await self.sugar.update_contact(record_id, corrected.to_contact_update())
        return record_id
