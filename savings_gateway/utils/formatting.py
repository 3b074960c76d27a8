"""Turkish Lira display formatting"""

from savings_gateway.domain.parsing import parse_amount_input


def format_grouped(amount: float, decimals: int = 2) -> str:
    """Format with Turkish separators: 1234567.891 -> "1.234.567,89" """
    english = f"{amount:,.{decimals}f}"
    return english.replace(",", "\0").replace(".", ",").replace("\0", ".")


def format_try(amount: float) -> str:
    """Currency display used for returns, e.g. "74,59 ₺" """
    return f"{format_grouped(amount, 2)} ₺"


def format_amount_input(value: str) -> str:
    """Reformat a typed amount with thousands separators, "" if unreadable"""
    amount = parse_amount_input(value)
    if amount == 0 and value != "0":
        return ""
    return format_grouped(amount, 0)
