"""Currency code validation."""


def is_currency_code(code: str) -> bool:
    """Check whether a string is a well-formed alphabetic currency code.

    A code has at least three characters, each an uppercase ASCII letter
    (ISO 4217 style, e.g. "EUR"; longer codes such as "USDT" also pass).
    Case is never coerced.

    Dimension names built from a code plus a suffix do not pass; strip the
    suffix first (see fxunits.units.code_from_dimension).

    Args:
        code: Candidate string.

    Returns:
        True if the string is a valid currency code.
    """
    if not isinstance(code, str) or len(code) < 3:
        return False
    return all("A" <= c <= "Z" for c in code)
