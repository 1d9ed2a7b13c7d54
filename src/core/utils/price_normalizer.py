import math
import re
from typing import Any, Optional

# Anything that is not an ASCII digit or one of the two separators is noise ("EUR", "$", spaces, ...)
_NON_NUMERIC = re.compile(r"[^0-9.,]")


def _decimal_separator(cleaned: str) -> Optional[str]:
    """
    Decide which separator marks the decimal part of a cleaned price string.

    When both separators occur, the one appearing last is the decimal separator
    ("1.234,56" -> ",", "1,234.56" -> "."). A lone comma is always treated as a
    decimal separator, so "1,234" reads as 1.234.

    Returns:
        "," or "." or None when the string holds only periods or no separator at all.
    """
    last_comma = cleaned.rfind(",")
    last_dot = cleaned.rfind(".")

    if last_comma != -1 and last_dot != -1:
        return "," if last_comma > last_dot else "."
    if last_comma != -1:
        return ","
    return None


def normalize_separators(cleaned: str) -> str:
    """
    Rewrite a string of digits and separators so that ``float`` can parse it.

    Args:
        cleaned: String containing only digits, commas and periods

    Returns:
        The string with the thousands separator removed and the decimal
        separator replaced by a period.

    Examples:
        "1.234,56" -> "1234.56"
        "1,234.56" -> "1234.56"
        "19,99" -> "19.99"
    """
    decimal = _decimal_separator(cleaned)
    if decimal is None:
        return cleaned

    thousands = "." if decimal == "," else ","
    return cleaned.replace(thousands, "").replace(decimal, ".")


def to_number_or_none(value: Any) -> Optional[float]:
    """
    Convert an arbitrary price representation into a finite number.

    Numbers pass through unchanged (non-finite ones are rejected). Anything else
    is converted to text, stripped of currency symbols and other noise, and
    parsed with locale-aware separator handling.

    Args:
        value: Raw price (number, string, or anything with a string form)

    Returns:
        The numeric price, or None if the value cannot be read as a finite number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            finite = math.isfinite(value)
        except OverflowError:
            # ints beyond float range
            return None
        return value if finite else None

    text = str(value).strip()
    if not text:
        return None

    cleaned = _NON_NUMERIC.sub("", text)
    if not cleaned:
        return None

    try:
        number = float(normalize_separators(cleaned))
    except ValueError:
        return None

    return number if math.isfinite(number) else None
