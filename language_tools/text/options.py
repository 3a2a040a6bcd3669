"""Closed option types for the analyze-text tools.

Like the PII options, each value is parsed once at the tool boundary; an
unknown name raises `InvalidArgument` listing the allowed values.
"""

from enum import Enum

from language_tools.documents.options import parse_choice, parse_choices


class EntityCategory(str, Enum):
    """Named-entity types accepted by `inclusionList` and `exclusionList`."""

    PERSON = "Person"
    PERSON_TYPE = "PersonType"
    LOCATION = "Location"
    ORGANIZATION = "Organization"
    EVENT = "Event"
    PRODUCT = "Product"
    SKILL = "Skill"
    ADDRESS = "Address"
    PHONE_NUMBER = "PhoneNumber"
    EMAIL = "Email"
    URL = "URL"
    IP = "IP"
    DATE_TIME = "DateTime"
    DATE = "Date"
    TIME = "Time"
    DURATION = "Duration"
    QUANTITY = "Quantity"
    NUMBER = "Number"
    PERCENTAGE = "Percentage"
    ORDINAL = "Ordinal"
    AGE = "Age"
    CURRENCY = "Currency"
    DIMENSION = "Dimension"
    TEMPERATURE = "Temperature"
    AIRPORT = "Airport"
    CITY = "City"
    STATE = "State"
    COUNTRY_REGION = "CountryRegion"
    CONTINENT = "Continent"
    GEOPOLITICAL_ENTITY = "GPE"
    STRUCTURAL = "Structural"
    GEOLOGICAL = "Geological"


class OverlapPolicy(str, Enum):
    """How overlapping entity spans are resolved."""

    MATCH_LONGEST = "matchLongest"
    ALLOW_OVERLAP = "allowOverlap"

    def to_dict(self) -> dict:
        return {"policyKind": self.value}


class HealthcareDocumentType(str, Enum):
    NONE = "None"
    CLINICAL_TRIAL = "ClinicalTrial"
    DISCHARGE_SUMMARY = "DischargeSummary"
    PROGRESS_NOTE = "ProgressNote"
    HISTORY_AND_PHYSICAL = "HistoryAndPhysical"
    CONSULT = "Consult"
    IMAGING = "Imaging"
    PATHOLOGY = "Pathology"
    PROCEDURE_NOTE = "ProcedureNote"


class SummarizationType(str, Enum):
    ABSTRACTIVE = "abstractive"
    EXTRACTIVE = "extractive"


class SummaryLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


def parse_entity_categories(values) -> list[EntityCategory]:
    """Parse an optional list of entity type names; `None` yields an empty list."""
    return parse_choices(EntityCategory, values)


def parse_overlap_policy(value) -> OverlapPolicy:
    """Parse an overlap policy name; `None` or blank selects `matchLongest`."""
    if value is None or not str(value).strip():
        return OverlapPolicy.MATCH_LONGEST
    return parse_choice(OverlapPolicy, value)


def parse_healthcare_document_type(value) -> HealthcareDocumentType:
    if value is None or not str(value).strip():
        return HealthcareDocumentType.NONE
    return parse_choice(HealthcareDocumentType, value)


def parse_summarization_type(value) -> SummarizationType:
    if value is None or not str(value).strip():
        return SummarizationType.ABSTRACTIVE
    return parse_choice(SummarizationType, value)


def parse_summary_length(value) -> SummaryLength:
    if value is None or not str(value).strip():
        return SummaryLength.MEDIUM
    return parse_choice(SummaryLength, value)
