"""Pydantic models for the CRM and USPS payloads."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

VALIDATED_STATUS = "Validated"


# ---------------------------------------------------------------------------
# SugarCRM
# ---------------------------------------------------------------------------

class Contact(BaseModel):
    """The address-related slice of a SugarCRM Contact record.

    Absent or ``null`` fields stay ``None`` here; they are only turned into
    empty strings when the USPS request is built.
    """
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    primary_address_street: Optional[str] = None
    mailing_address_2_c: Optional[str] = None
    primary_address_city: Optional[str] = None
    primary_address_state: Optional[str] = None
    primary_address_postalcode: Optional[str] = None
    address_validation_status_c: Optional[str] = None


class ContactUpdate(BaseModel):
    primary_address_street: Optional[str] = None
    primary_address_city: Optional[str] = None
    primary_address_state: Optional[str] = None
    primary_address_postalcode: Optional[str] = None
    address_validation_status_c: str = VALIDATED_STATUS


# ---------------------------------------------------------------------------
# USPS
# ---------------------------------------------------------------------------

class AddressParams(BaseModel):
    """Query parameters for the USPS address-standardization endpoint."""
    streetAddress: str
    secondaryAddress: str = ""
    city: str
    state: str
    ZIPCode: str

    @classmethod
    def from_contact(cls, contact: Contact) -> "AddressParams":
        return cls(
            streetAddress=contact.primary_address_street or "",
            secondaryAddress=contact.mailing_address_2_c or "",
            city=contact.primary_address_city or "",
            state=contact.primary_address_state or "",
            ZIPCode=contact.primary_address_postalcode or "",
        )

    def is_complete(self) -> bool:
        """True when every field except the secondary address is non-empty."""
        return all((self.streetAddress, self.city, self.state, self.ZIPCode))


class StandardizedAddress(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    street_address: Optional[str] = Field(None, alias="streetAddress")
    street_address_abbreviation: Optional[str] = Field(
        None, alias="streetAddressAbbreviation"
    )
    secondary_address: Optional[str] = Field(None, alias="secondaryAddress")
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="ZIPCode")
    zip_plus_4: Optional[str] = Field(None, alias="ZIPPlus4")

    def to_contact_update(self) -> ContactUpdate:
        return ContactUpdate(
            primary_address_street=self.street_address_abbreviation,
            primary_address_city=self.city,
            primary_address_state=self.state,
            primary_address_postalcode=self.zip_code,
        )
