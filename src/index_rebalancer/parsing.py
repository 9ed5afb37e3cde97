from decimal import Decimal, InvalidOperation
from typing import Optional


def parse_decimal(text: Optional[str]) -> Optional[Decimal]:
    """Parse a scraped number such as "1,234.50"; None when it is not a finite number"""
    if text is None:
        return None
    try:
        value = Decimal(text.replace(",", "").strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_weight(text: Optional[str]) -> Optional[Decimal]:
    """
    Parse an index weight given in percent into a fraction.

    "9.57%" and "9.57" both give Decimal("0.0957"). Zero, negative and
    unparseable weights give None.
    """
    if text is None:
        return None
    value = parse_decimal(text.replace("%", ""))
    if value is None or value <= 0:
        return None
    return value / 100
