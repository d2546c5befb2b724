"""
Synchronous field checks applied to request bodies before persistence.

A check is a plain callable `(field, value) -> None` that raises
`BadRequest` naming the field. Resource rules are ordered mappings of
field -> tuple of checks; the first failing check wins.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Mapping, Sequence

from email_validator import EmailNotValidError, validate_email

from .errors import BadRequest

Check = Callable[[str, Any], None]
Rules = Mapping[str, Sequence[Check]]

# Largest value a BIGINT column (and asyncpg int8 parameter) can hold.
MAX_BIGINT = 2**63 - 1

_PHONE_RE = re.compile(r"^\+?[0-9][0-9 \-]*[0-9]$")
_POSTAL_CODE_RE = re.compile(r"^[A-Za-z0-9]+(?:[ \-][A-Za-z0-9]+)?$")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


def string(field: str, value: Any) -> None:
    if not isinstance(value, str):
        raise BadRequest(f"{field} must be a string")
    if not value.strip():
        raise BadRequest(f"{field} must not be empty")


def integer(field: str, value: Any) -> None:
    if not _is_int(value):
        raise BadRequest(f"{field} must be an integer")


def positive_integer(field: str, value: Any) -> None:
    integer(field, value)
    if value <= 0:
        raise BadRequest(f"{field} must be a positive integer")
    if value > MAX_BIGINT:
        raise BadRequest(f"{field} is out of range")


def number(field: str, value: Any) -> None:
    if not _is_number(value):
        raise BadRequest(f"{field} must be a number")
    try:
        finite = math.isfinite(float(value))
    except OverflowError:
        finite = False
    if not finite:
        raise BadRequest(f"{field} is out of range")


def non_negative(field: str, value: Any) -> None:
    if value < 0:
        raise BadRequest(f"{field} must not be negative")


def between(low: float, high: float) -> Check:
    def check(field: str, value: Any) -> None:
        if not (low <= value <= high):
            raise BadRequest(f"{field} must be between {low} and {high}")

    return check


def min_length(size: int, message: str | None = None) -> Check:
    def check(field: str, value: Any) -> None:
        if len(value) < size:
            raise BadRequest(message or f"{field} must be at least {size} characters long")

    return check


def max_bytes(size: int, message: str | None = None) -> Check:
    """
    Upper bound on the UTF-8 encoded length (bcrypt only accepts 72 bytes).
    """

    def check(field: str, value: Any) -> None:
        if len(value.encode("utf-8")) > size:
            raise BadRequest(message or f"{field} must be at most {size} bytes long")

    return check


def email(field: str, value: Any) -> None:
    string(field, value)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise BadRequest(f"{field} must be a valid email address") from exc


def phone(field: str, value: Any) -> None:
    string(field, value)
    digits = sum(ch.isdigit() for ch in value)
    if not _PHONE_RE.match(value.strip()) or not (7 <= digits <= 15):
        raise BadRequest(f"{field} must be a valid phone number")


def postal_code(field: str, value: Any) -> None:
    string(field, value)
    raw = value.strip()
    compact = raw.replace(" ", "").replace("-", "")
    if not _POSTAL_CODE_RE.match(raw) or not (3 <= len(compact) <= 10):
        raise BadRequest(f"{field} must be a valid postal code")


def _run(field: str, value: Any, checks: Iterable[Check]) -> None:
    for check in checks:
        check(field, value)


def _reject_unknown(body: Mapping[str, Any], known: Iterable[str]) -> None:
    allowed = set(known)
    for key in body:
        if key not in allowed:
            raise BadRequest(f"Unknown field: {key}")


def require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")
    return body


def validate_create(body: Any, rules: Rules) -> dict[str, Any]:
    """
    Validate a create payload. Every field in `rules` is required.
    Returns a new dict holding only the declared fields.
    """
    body = require_object(body)
    _reject_unknown(body, rules)

    for field in rules:
        if body.get(field) is None:
            raise BadRequest(f"{field} is required")

    values: dict[str, Any] = {}
    for field, checks in rules.items():
        _run(field, body[field], checks)
        values[field] = body[field]
    return values


def validate_patch(body: Any, rules: Rules, *, identity: str) -> dict[str, Any]:
    """
    Validate a merge-patch payload: only declared, non-identity fields, each
    run through the same checks as on create.
    """
    if body is None or body == {}:
        raise BadRequest("No data provided for update")
    body = require_object(body)

    if identity in body:
        raise BadRequest(f"{identity} cannot be updated")
    _reject_unknown(body, rules)

    for field, value in body.items():
        if value is None:
            raise BadRequest(f"{field} must not be null")
        _run(field, value, rules[field])
    return dict(body)


def parse_positive_int(raw: Any) -> int | None:
    """
    Accept ints and digit strings in 1..MAX_BIGINT. Returns None for anything else.
    """
    value: int | None = None
    if _is_int(raw):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        # More than 19 digits cannot fit a BIGINT; skip int() on huge strings.
        if text.isascii() and text.isdigit() and len(text) <= 19:
            value = int(text)
    if value is None or not (0 < value <= MAX_BIGINT):
        return None
    return value


def parse_id(raw: Any, label: str) -> int:
    value = parse_positive_int(raw)
    if value is None:
        raise BadRequest(f"Invalid {label} ID")
    return value
