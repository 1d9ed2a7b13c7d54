from typing import Optional, Tuple

# Checked in order; the first rule with a matching marker wins.
# Letter markers are compared case-insensitively, symbols as-is.
CURRENCY_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("EUR", "€"), "EUR"),
    (("USD", "$"), "USD"),
    (("GBP", "£"), "GBP"),
)


def detect_currency(text: Optional[str]) -> Optional[str]:
    """
    Guess a currency code from free text such as "$19.99" or "19,99 EUR".

    Parameters:
        text (str): Any text that may mention a currency code or symbol.

    Returns:
        str: "EUR", "USD" or "GBP" following the priority of CURRENCY_RULES,
        or None when no marker is present.
    """
    if not text:
        return None

    upper = str(text).upper()
    for markers, code in CURRENCY_RULES:
        if any(marker in upper for marker in markers):
            return code
    return None
