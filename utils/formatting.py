"""
Formatting utilities.
"""


def format_number(value: float) -> str:
    """Format a number without a trailing '.0' for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_currency(amount: float, currency: str = "EUR") -> str:
    """
    Format an amount as currency.

    Args:
        amount: The amount in whole units (e.g., euros, not cents).
        currency: Currency code (default EUR).

    Returns:
        Formatted currency string, symbol appended (e.g. "1250€").
    """
    symbols = {
        "EUR": "€",
        "GBP": "£",
        "USD": "$",
    }
    symbol = symbols.get(currency, " " + currency)
    return f"{format_number(amount)}{symbol}"


def format_percent(value: float, decimals: int = 1) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value:.{decimals}f}%"


def format_area(value: float) -> str:
    """Format a floor area in square metres."""
    return f"{format_number(value)} m²"
