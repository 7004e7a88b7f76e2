"""
Invoice calculations - line items, tax and numbering.

Booking prices are tax-inclusive. For taxable gross T the embedded tax is
T - T / (1 + rate); the invoice total always equals the gross line total.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ...config import (
    DEFAULT_SERVICE_STATE,
    DISCRETIONARY_TAX_RATE,
    INVOICE_NUMBER_PREFIX,
    STATE_TAX_RATE,
)

COMBINED_TAX_RATE = round(STATE_TAX_RATE + DISCRETIONARY_TAX_RATE, 4)


@dataclass(frozen=True)
class LineItem:
    description: str
    quantity: float
    unit_price: float
    taxable: bool = True

    @property
    def total(self) -> float:
        return round(self.quantity * self.unit_price, 2)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    tax_rate: float
    tax_amount: float
    total_amount: float


def default_line_item(service_name: str, service_address: Optional[str], gross: float) -> LineItem:
    """Single synthesized item when the caller supplies none"""
    description = service_name
    if service_address:
        description = f"{service_name} - {service_address}"
    return LineItem(description=description, quantity=1, unit_price=gross, taxable=True)


def compute_totals(items: list[LineItem], tax_exempt: bool = False) -> InvoiceTotals:
    """Back out the embedded tax from tax-inclusive line totals"""
    gross = round(sum(item.total for item in items), 2)
    if tax_exempt:
        return InvoiceTotals(subtotal=gross, tax_rate=0.0, tax_amount=0.0, total_amount=gross)

    taxable_gross = sum(item.total for item in items if item.taxable)
    tax_amount = round(taxable_gross - taxable_gross / (1 + COMBINED_TAX_RATE), 2)
    return InvoiceTotals(
        subtotal=round(gross - tax_amount, 2),
        tax_rate=COMBINED_TAX_RATE,
        tax_amount=tax_amount,
        total_amount=gross,
    )


def due_date_for(issue_date: datetime, net_days: int) -> datetime:
    return issue_date + timedelta(days=net_days)


def format_invoice_number(year: int, sequence: int, prefix: str = INVOICE_NUMBER_PREFIX) -> str:
    return f"{prefix}-{year}-{sequence:05d}"


def parse_invoice_sequence(
    invoice_number: str, year: int, prefix: str = INVOICE_NUMBER_PREFIX
) -> Optional[int]:
    """Sequence part of a number issued in ``year``; None for foreign formats"""
    match = re.fullmatch(rf"{re.escape(prefix)}-{year}-(\d+)", invoice_number or "")
    return int(match.group(1)) if match else None


def next_invoice_number(existing_numbers: list[str], year: int) -> str:
    """Highest sequence for the year plus one"""
    sequences = [parse_invoice_sequence(n, year) for n in existing_numbers]
    highest = max((s for s in sequences if s is not None), default=0)
    return format_invoice_number(year, highest + 1)


def parse_service_address(address: Optional[str]) -> tuple[str, str, str]:
    """
    Split "street, city, STATE ZIP" into (city, state, zip).

    City is the second-to-last comma part; state and zip are read from the
    last part. Missing pieces fall back to "Unknown", the default state and "".
    """
    if not address:
        return "Unknown", DEFAULT_SERVICE_STATE, ""

    parts = [p.strip() for p in address.split(",") if p.strip()]
    if len(parts) < 2:
        return "Unknown", DEFAULT_SERVICE_STATE, ""

    city = parts[-2]
    last = parts[-1].split()
    state = DEFAULT_SERVICE_STATE
    zip_code = ""
    if last:
        if last[0].isalpha():
            state = last[0].upper()
            if len(last) > 1:
                zip_code = last[1]
        else:
            zip_code = last[0]
    return city, state, zip_code
