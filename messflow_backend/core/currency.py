# core/currency.py

"""
CURRENCY FORMATTING

Display format: "<CODE> <amount>"
- thousands separators
- between 0 and 2 fraction digits (trailing zeros dropped)

Examples:
    format_currency(1234.5, "SAR") -> "SAR 1,234.5"
    format_currency(450)          -> "AED 450"
"""

from __future__ import annotations

from django.conf import settings

from core.money import money

GCC_CURRENCIES = {
    "AED": "UAE Dirham",
    "SAR": "Saudi Riyal",
    "OMR": "Omani Rial",
    "KWD": "Kuwaiti Dinar",
    "BHD": "Bahraini Dinar",
    "QAR": "Qatari Riyal",
}


def default_currency() -> str:
    return getattr(settings, "DEFAULT_CURRENCY", "AED")


def is_supported_currency(code: str) -> bool:
    return (code or "").strip().upper() in GCC_CURRENCIES


def format_currency(amount, code: str | None = None) -> str:
    code = (code or default_currency()).strip().upper()
    text = f"{money(amount):,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{code} {text}"
