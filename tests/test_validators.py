import pytest

from services.validators import (
    clean_currency,
    normalize_phone,
    notes_mark_inactive,
    parse_client_name,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,242.50", "1242.50"),
        ("  $700 ", "700.00"),
        ("700.00/mo", "700.00"),
        ("1,000.555", "1000.56"),
        ("-25", "-25.00"),
        ("1e3", "1000.00"),
        ("1e30", "0.00"),
        ("99999999999999999999999999999", "0.00"),
        ("   ", "0.00"),
        ("abc", "0.00"),
        ("", "0.00"),
        ("N/A", "0.00"),
        (None, "0.00"),
    ],
)
def test_clean_currency(raw, expected):
    assert clean_currency(raw) == expected


def test_parse_client_name_variants():
    assert parse_client_name("Lonelle Johnson") == ("Lonelle", "Johnson")
    assert parse_client_name("  Mary   Ann  Smith ") == ("Mary", "Ann Smith")
    assert parse_client_name("Cher") == ("Cher", "")
    assert parse_client_name("") == ("", "")
    assert parse_client_name(None) == ("", "")


def test_parse_client_name_named_fields():
    parsed = parse_client_name("Ann Lee")
    assert parsed.first_name == "Ann"
    assert parsed.last_name == "Lee"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("6515551234", "(651) 555-1234"),
        ("651-555-1234", "(651) 555-1234"),
        ("+1 (651) 555 1234", "(651) 555-1234"),
        ("555-1234", "555-1234"),
        ("  ext 12 ", "ext 12"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_notes_mark_inactive_is_case_insensitive():
    assert notes_mark_inactive("Moved out; CASE INACTIVE since May")
    assert notes_mark_inactive("case inactive")
    assert not notes_mark_inactive("case active")
    assert not notes_mark_inactive(None)
