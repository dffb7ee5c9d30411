import pytest

from jsonvalidator.errors import RuleParameterError

VALID_UUID = "123e4567-e89b-12d3-a456-426614174000"
ZERO_UUID = "00000000-0000-0000-0000-000000000000"


# ── Dates ──

@pytest.mark.parametrize("value", ["2024-02-29", "2023-12-31", "0000-01-01", "9999-06-30"])
def test_valid_dates(check, value):
    assert check("date", value) == []


@pytest.mark.parametrize("value", ["2023-02-29", "2023-13-01", "2023-04-31", "2023-1-01", "2023-01-01T00:00:00", "1900-02-29"])
def test_invalid_dates(check, value):
    assert check("date", value) == [f"[date]: Must be a valid YYYY-MM-DD date formatted string - Got: [{value}]"]


def test_date_requires_a_string(check):
    assert check("date", 20240101) == ["[date]: Must be a valid YYYY-MM-DD date formatted string - Non string given"]


# ── Identifiers ──

def test_uuid_rejects_the_zero_uuid(check):
    assert check("uuid", VALID_UUID) == []
    assert check("uuid", ZERO_UUID) == ["[uuid]: Must be a valid uuid string and not the zero uuid"]
    assert len(check("uuid", VALID_UUID.upper())) == 1


def test_zeroable_uuid_accepts_the_zero_uuid(check):
    assert check("zeroableUuid", ZERO_UUID) == []
    assert check("zeroableUuid", "not-a-uuid") == ["[zeroableUuid]: Must be a valid uuid string"]


# ── Regex ──

def test_regex_search(check):
    assert check("regex:^[a-z]+$", "abc") == []
    assert check("regex:^[a-z]+$", "ab1") == ["[regex]: Must be a string matching regex: ^[a-z]+$"]
    assert len(check("regex:^[a-z]+$", 12)) == 1


def test_regex_keeps_commas_and_colons(check):
    assert check("regex:^a{1,3}$", "aa") == []
    assert check("regex:^a{1,3}$", "aaaa") == ["[regex]: Must be a string matching regex: ^a{1,3}$"]
    assert check(r"regex:^\d{2}:\d{2}$", "12:30") == []


def test_invalid_regex_is_a_fault(check):
    with pytest.raises(RuleParameterError):
        check("regex:(unclosed", "x")


# ── Network ──

@pytest.mark.parametrize(
    "value",
    ["https://example.com", "http://sub.example.co.uk/path?q=1&r=2", "https://example.com/a/b#frag"],
)
def test_valid_urls(check, value):
    assert check("url", value) == []


@pytest.mark.parametrize(
    "value",
    [
        "ftp://example.com",
        "https://example.com:8080/",
        "http://localhost/x",
        "http://127.0.0.1/x",
        "https://example",
        "https://exa mple.com",
        "example.com",
    ],
)
def test_invalid_urls(check, value):
    assert check("url", value) == [
        "[url]: Must be a valid http/https url string without port (ip and localhost are not allowed)"
    ]


@pytest.mark.parametrize("value, ok", [("192.168.0.1", True), ("::1", True), ("999.1.1.1", False), ("", False)])
def test_ip(check, value, ok):
    assert (check("ip", value) == []) is ok


def test_email(check):
    assert check("email", "jane.doe@acme.io") == []
    assert check("email", "not-an-email") == ["[email]: Must be a valid email string"]
    assert check("email", 42) == ["[email]: Must be a valid email string"]


def test_phone_number_e164(check):
    assert check("phoneNumberE164", "+44 2071838750") == []
    assert len(check("phoneNumberE164", "+442071838750")) == 1
    assert len(check("phoneNumberE164", "+1234 5550100")) == 1


# ── Code lists ──

def test_country_and_currency_codes(check):
    assert check("alpha2Country", "DE") == []
    assert check("alpha2Country", "XX") == ["[alpha2Country]: Must be a valid alpha-2 country code - [XX] given"]
    assert check("alpha3Currency", "EUR") == []
    assert check("alpha3Currency", "eur") == ["[alpha3Currency]: Must be a valid alpha-3 currency code - [eur] given"]
