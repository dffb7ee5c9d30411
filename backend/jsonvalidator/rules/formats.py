"""Format rules — dates, identifiers, network addresses and code lists."""

import ipaddress
import re
from functools import lru_cache
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from jsonvalidator.errors import RuleParameterError
from jsonvalidator.rules.context import FieldContext
from jsonvalidator.rules.reference_data import COUNTRY_CODES_ALPHA2, CURRENCY_CODES_ALPHA3
from jsonvalidator.rules.values import describe_given

DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
UUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")
ZERO_UUID = "00000000-0000-0000-0000-000000000000"
URL_PATTERN = re.compile(r"https?://[\w./#=?&%~+:@!$'()*,;-]+")
E164_PATTERN = re.compile(r"\+[0-9]{1,3} [0-9]{1,12}")

DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise RuleParameterError(f"Invalid regex pattern '{pattern}': {e}") from None


# ── Dates & identifiers ──

def is_date(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid YYYY-MM-DD date formatted string"
    if not isinstance(ctx.value, str):
        return f"{message} - Non string given", False

    message = f"{message} - Got: [{ctx.value}]"
    match = DATE_PATTERN.fullmatch(ctx.value)
    if not match:
        return message, False

    year, month, day = (int(part) for part in match.groups())
    if not 1 <= month <= 12:
        return message, False
    days = DAYS_IN_MONTH[month - 1] + (1 if month == 2 and _is_leap(year) else 0)
    return message, 1 <= day <= days


def is_uuid(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid uuid string and not the zero uuid"
    if not isinstance(ctx.value, str) or ctx.value == ZERO_UUID:
        return message, False
    return message, UUID_PATTERN.fullmatch(ctx.value) is not None


def is_zeroable_uuid(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid uuid string"
    if not isinstance(ctx.value, str):
        return message, False
    return message, UUID_PATTERN.fullmatch(ctx.value) is not None


def matches_regex(ctx: FieldContext) -> tuple[str, bool]:
    # Commas inside the pattern were split off as parameters
    pattern = ",".join(ctx.params)
    message = f"Must be a string matching regex: {pattern}"
    regex = _compile(pattern)
    if not isinstance(ctx.value, str):
        return message, False
    return message, regex.search(ctx.value) is not None


# ── Network ──

def _is_ip_or_localhost(host: str) -> bool:
    if host.lower() == "localhost":
        return True
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def is_url(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid http/https url string without port (ip and localhost are not allowed)"
    if not isinstance(ctx.value, str) or not URL_PATTERN.fullmatch(ctx.value):
        return message, False

    try:
        parts = urlsplit(ctx.value)
        port = parts.port
    except ValueError:
        return message, False

    host = parts.hostname or ""
    if port is not None or not host or _is_ip_or_localhost(host):
        return message, False

    labels = host.split(".")
    if len(labels) < 2 or not all(labels):
        return message, False
    return message, labels[-1].isalpha() and len(labels[-1]) >= 2


def is_ip(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid ip string"
    if not isinstance(ctx.value, str) or ctx.value == "":
        return message, False
    try:
        ipaddress.ip_address(ctx.value)
    except ValueError:
        return message, False
    return message, True


def is_email(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid email string"
    if not isinstance(ctx.value, str):
        return message, False
    try:
        validate_email(ctx.value, check_deliverability=False)
    except EmailNotValidError:
        return message, False
    return message, True


def is_phone_number_e164(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be an E.164 phone number formatted as '+<country code> <number>'"
    if not isinstance(ctx.value, str):
        return message, False
    return message, E164_PATTERN.fullmatch(ctx.value) is not None


# ── Code lists ──

def is_alpha2_country(ctx: FieldContext) -> tuple[str, bool]:
    message = f"Must be a valid alpha-2 country code - {describe_given(ctx)}"
    return message, isinstance(ctx.value, str) and ctx.value in COUNTRY_CODES_ALPHA2


def is_alpha3_currency(ctx: FieldContext) -> tuple[str, bool]:
    message = f"Must be a valid alpha-3 currency code - {describe_given(ctx)}"
    return message, isinstance(ctx.value, str) and ctx.value in CURRENCY_CODES_ALPHA3
