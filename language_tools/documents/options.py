"""Closed option types for PII analysis tasks.

Tool arguments arrive as free-form strings. They are parsed exactly once, at
the tool boundary, into `PiiCategory` members and a `RedactionPolicy` variant;
everything downstream only sees these typed values.

Parsing is case-insensitive. Unknown values raise `InvalidArgument` listing the
allowed names.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from language_tools.documents.errors import InvalidArgument

ALLOWED_REDACTION_CHARACTERS = frozenset("!#$%&*+-=?@^_~")
DEFAULT_REDACTION_CHARACTER = "*"


class PiiCategory(str, Enum):
    """PII entity categories recognized by the analysis service."""

    PERSON = "Person"
    PERSON_TYPE = "PersonType"
    PHONE_NUMBER = "PhoneNumber"
    ORGANIZATION = "Organization"
    ADDRESS = "Address"
    EMAIL = "Email"
    URL = "URL"
    IP_ADDRESS = "IPAddress"
    DATE_TIME = "DateTime"
    DATE = "Date"
    AGE = "Age"
    BANK_ACCOUNT_NUMBER = "BankAccountNumber"
    CREDIT_CARD_NUMBER = "CreditCardNumber"
    INTERNATIONAL_BANKING_ACCOUNT_NUMBER = "InternationalBankingAccountNumber"
    SWIFT_CODE = "SWIFTCode"
    PASSPORT_NUMBER = "PassportNumber"
    DRIVERS_LICENSE_NUMBER = "DriversLicenseNumber"
    US_SOCIAL_SECURITY_NUMBER = "USSocialSecurityNumber"
    US_INDIVIDUAL_TAXPAYER_IDENTIFICATION = "USIndividualTaxpayerIdentification"
    US_BANK_ACCOUNT_NUMBER = "USBankAccountNumber"
    UK_NATIONAL_INSURANCE_NUMBER = "UKNationalInsuranceNumber"
    UK_NATIONAL_HEALTH_NUMBER = "UKNationalHealthNumber"
    EU_PASSPORT_NUMBER = "EUPassportNumber"
    EU_DRIVERS_LICENSE_NUMBER = "EUDriversLicenseNumber"
    EU_SOCIAL_SECURITY_NUMBER = "EUSocialSecurityNumber"
    EU_TAX_IDENTIFICATION_NUMBER = "EUTaxIdentificationNumber"
    EU_GPS_COORDINATES = "EUGPSCoordinates"
    CA_SOCIAL_INSURANCE_NUMBER = "CASocialInsuranceNumber"
    AZURE_STORAGE_ACCOUNT_KEY = "AzureStorageAccountKey"
    AZURE_DOCUMENT_DB_AUTH_KEY = "AzureDocumentDBAuthKey"
    AZURE_SAS = "AzureSAS"
    SQL_SERVER_CONNECTION_STRING = "SQLServerConnectionString"
    DEFAULT = "Default"
    ALL = "All"


class RedactionPolicyKind(str, Enum):
    """Wire names of the redaction policy variants."""

    CHARACTER_MASK = "characterMask"
    ENTITY_MASK = "entityMask"
    NO_MASK = "noMask"


@dataclass(frozen=True)
class CharacterMask:
    """Replace each PII character with `redaction_character`."""

    redaction_character: str = DEFAULT_REDACTION_CHARACTER

    kind = RedactionPolicyKind.CHARACTER_MASK

    def __post_init__(self):
        if self.redaction_character not in ALLOWED_REDACTION_CHARACTERS:
            allowed = "".join(sorted(ALLOWED_REDACTION_CHARACTERS))
            raise InvalidArgument(
                f"Invalid redaction character {self.redaction_character!r}. Allowed characters are: {allowed}."
            )

    def to_dict(self) -> dict:
        return {"policyKind": self.kind.value, "redactionCharacter": self.redaction_character}


@dataclass(frozen=True)
class EntityMask:
    """Replace each PII span with its entity category, e.g. `[Person]`."""

    kind = RedactionPolicyKind.ENTITY_MASK

    def to_dict(self) -> dict:
        return {"policyKind": self.kind.value}


@dataclass(frozen=True)
class NoMask:
    """Detect PII without redacting it."""

    kind = RedactionPolicyKind.NO_MASK

    def to_dict(self) -> dict:
        return {"policyKind": self.kind.value}


RedactionPolicy = Union[CharacterMask, EntityMask, NoMask]


def _normalize(value: str) -> str:
    return value.strip().replace("_", "").replace("-", "").lower()


_POLICY_LOOKUP = {_normalize(member.value): member for member in RedactionPolicyKind}


def parse_choice(enum_cls, value):
    """Parse a name into a member of the string enum `enum_cls`.

    Matching ignores case, surrounding blanks, `_` and `-`, against both the
    member value and the member name.

    Raises:
        InvalidArgument: No member matches; the message lists allowed values.
    """
    wanted = _normalize(str(value or ""))
    for member in enum_cls:
        if wanted and wanted in (_normalize(member.value), _normalize(member.name)):
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise InvalidArgument(f"Invalid value '{value}'. Allowed values are: {allowed}.")


def parse_choices(enum_cls, values) -> list:
    """Parse an optional list of names; `None` yields an empty list."""
    if not values:
        return []
    if isinstance(values, str):
        values = values.split(",")
    return [parse_choice(enum_cls, value) for value in values]


def parse_pii_category(value: str) -> PiiCategory:
    """Parse one category name into a `PiiCategory` member."""
    return parse_choice(PiiCategory, value)


def parse_pii_categories(values) -> list[PiiCategory]:
    """Parse an optional list of category names; `None` yields an empty list."""
    return parse_choices(PiiCategory, values)


def parse_redaction_policy(
    value: str | None,
    redaction_character: str | None = None,
) -> RedactionPolicy:
    """Parse a policy name into a `RedactionPolicy` variant.

    Args:
        value: Policy name (`CharacterMask`, `EntityMask`, `NoMask`); `None`
            selects character masking.
        redaction_character: Mask character, only used by `CharacterMask`.

    Raises:
        InvalidArgument: Unknown policy name or unsupported mask character.
    """
    if value is None or not str(value).strip():
        kind = RedactionPolicyKind.CHARACTER_MASK
    else:
        kind = _POLICY_LOOKUP.get(_normalize(str(value)))
        if kind is None:
            raise InvalidArgument(
                f"Invalid value '{value}'. Allowed values are: CharacterMask, EntityMask, NoMask."
            )

    if kind is RedactionPolicyKind.ENTITY_MASK:
        return EntityMask()
    if kind is RedactionPolicyKind.NO_MASK:
        return NoMask()
    return CharacterMask(redaction_character or DEFAULT_REDACTION_CHARACTER)
