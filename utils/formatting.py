# tailor/utils/formatting.py

def format_rupee(n: float) -> str:
    """
    Format an amount with a rupee sign and ',' thousands separator.
    Example: 1700 -> "₹1,700", 99.5 -> "₹99.50"
    """
    if float(n).is_integer():
        return f"₹{n:,.0f}"
    return f"₹{n:,.2f}"


def format_label(value: str) -> str:
    """
    Turn a stored enum value into display text.
    Example: "partial_payment" -> "Partial Payment"
    """
    return value.replace("_", " ").title()
