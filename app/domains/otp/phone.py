import re
from app.shared.exceptions import ValidationError

_NON_DIGITS = re.compile(r"\D")


def format_phone_number(phone_number: str, country_code: str = "91") -> str:
    """
    Canonicalize a user-entered phone number into the `+<digits>` lookup key.

    Every non-digit character is dropped; the default country code is
    prepended when the digits do not already start with it.

    Args:
        phone_number (str): Raw phone number as typed by the user.
        country_code (str): Default country code digits, without '+'.

    Returns:
        str: Normalized phone number, e.g. "+919876543210".
    """
    digits = _NON_DIGITS.sub("", phone_number or "")
    if not digits:
        raise ValidationError("Phone number is required")

    if not digits.startswith(country_code):
        digits = f"{country_code}{digits}"

    return f"+{digits}"
