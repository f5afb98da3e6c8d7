"""
Users API — Email Address Validation
======================================

What:  A pure predicate deciding whether a string is a well-formed email address.
How:   email-validator (the library behind pydantic's EmailStr) with DNS
       deliverability checks off, so the result depends only on the input.
"""

from typing import Any

from email_validator import EmailNotValidError, validate_email


def is_valid_email(value: Any) -> bool:
    """Return True if `value` is a syntactically valid email address. Never raises."""
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
