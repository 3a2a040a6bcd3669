import pytest

from language_tools.documents.errors import InvalidArgument
from language_tools.documents.options import (
    CharacterMask,
    EntityMask,
    NoMask,
    PiiCategory,
    parse_pii_categories,
    parse_pii_category,
    parse_redaction_policy,
)
from language_tools.text.options import (
    EntityCategory,
    HealthcareDocumentType,
    OverlapPolicy,
    SummarizationType,
    SummaryLength,
    parse_entity_categories,
    parse_healthcare_document_type,
    parse_overlap_policy,
    parse_summarization_type,
    parse_summary_length,
)


@pytest.mark.parametrize("value", ["Person", "person", "PERSON", " person "])
def test_category_parsing_is_case_insensitive(value):
    assert parse_pii_category(value) is PiiCategory.PERSON


def test_category_parsing_ignores_separators():
    assert parse_pii_category("us_social_security_number") is PiiCategory.US_SOCIAL_SECURITY_NUMBER
    assert parse_pii_category("phone-number") is PiiCategory.PHONE_NUMBER


def test_unknown_category_lists_allowed_values():
    with pytest.raises(InvalidArgument) as excinfo:
        parse_pii_category("Nickname")

    message = str(excinfo.value)
    assert message.startswith("Invalid value 'Nickname'. Allowed values are: ")
    assert "Person" in message and "Email" in message


def test_missing_category_list_is_empty():
    assert parse_pii_categories(None) == []
    assert parse_pii_categories([]) == []


def test_category_list_keeps_order():
    assert parse_pii_categories(["email", "Person"]) == [PiiCategory.EMAIL, PiiCategory.PERSON]


def test_default_policy_is_star_character_mask():
    policy = parse_redaction_policy(None)

    assert policy == CharacterMask("*")
    assert policy.to_dict() == {"policyKind": "characterMask", "redactionCharacter": "*"}


@pytest.mark.parametrize("value,expected", [
    ("CharacterMask", CharacterMask()),
    ("entitymask", EntityMask()),
    ("NO_MASK", NoMask()),
])
def test_policy_names(value, expected):
    assert parse_redaction_policy(value) == expected


@pytest.mark.parametrize("character", list("!#$%&*+-=?@^_~"))
def test_every_supported_redaction_character(character):
    policy = parse_redaction_policy("CharacterMask", character)

    assert policy.to_dict() == {"policyKind": "characterMask", "redactionCharacter": character}


def test_entity_mask_ignores_redaction_character():
    assert parse_redaction_policy("EntityMask", "#").to_dict() == {"policyKind": "entityMask"}


def test_unknown_policy_is_rejected():
    with pytest.raises(InvalidArgument, match="Allowed values are: CharacterMask, EntityMask, NoMask"):
        parse_redaction_policy("Blur")


@pytest.mark.parametrize("character", ["x", "/", ".", "|"])
def test_unsupported_redaction_character_is_rejected(character):
    with pytest.raises(InvalidArgument, match="redaction character"):
        CharacterMask(character)


# ============================================================
# Analyze-text options
# ============================================================

def test_entity_categories_accept_names_and_comma_strings():
    assert parse_entity_categories(["person", "IP"]) == [EntityCategory.PERSON, EntityCategory.IP]
    assert parse_entity_categories("Location, date_time") == [EntityCategory.LOCATION, EntityCategory.DATE_TIME]
    assert parse_entity_categories(None) == []


def test_unknown_entity_category_lists_allowed_values():
    with pytest.raises(InvalidArgument) as excinfo:
        parse_entity_categories(["Person", "Planet"])

    assert str(excinfo.value).startswith("Invalid value 'Planet'. Allowed values are: Person, PersonType")


@pytest.mark.parametrize("value,expected", [
    (None, OverlapPolicy.MATCH_LONGEST),
    ("", OverlapPolicy.MATCH_LONGEST),
    ("MatchLongest", OverlapPolicy.MATCH_LONGEST),
    ("allow_overlap", OverlapPolicy.ALLOW_OVERLAP),
])
def test_overlap_policy(value, expected):
    assert parse_overlap_policy(value) is expected


def test_overlap_policy_wire_shape():
    assert OverlapPolicy.ALLOW_OVERLAP.to_dict() == {"policyKind": "allowOverlap"}


def test_healthcare_document_type():
    assert parse_healthcare_document_type(None) is HealthcareDocumentType.NONE
    assert parse_healthcare_document_type("none") is HealthcareDocumentType.NONE
    assert parse_healthcare_document_type("progress-note") is HealthcareDocumentType.PROGRESS_NOTE
    with pytest.raises(InvalidArgument):
        parse_healthcare_document_type("Prescription")


def test_summarization_defaults():
    assert parse_summarization_type(None) is SummarizationType.ABSTRACTIVE
    assert parse_summary_length(None) is SummaryLength.MEDIUM
    assert parse_summary_length("LONG") is SummaryLength.LONG
