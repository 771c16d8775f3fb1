# Overview: Invoice engine; writes an invoice, its lines and the matching stock decrements atomically.

from __future__ import annotations

import threading
import time
from datetime import date

from flask import current_app
from sqlalchemy.orm import selectinload

from ..extensions import db
from ..models import Invoice, InvoiceItem
from ..schemas import InvoiceRequest
from ..time_utils import day_bounds, local_now
from ..validation import NotFoundError, ValidationError
from . import stock_service
from .transactions import atomic

"""
Invoice Creation Invariants (authoritative)

- One transaction covers the Invoice row, every InvoiceItem, every stock
  decrement and every 'sale' movement. Any failure rolls all of it back.
- subtotal = sum(quantity * unit_price_cents) over the caller's lines. Prices
  are taken from the cart as captured at add-to-cart time, never re-read from
  the live Product row.
- total = subtotal + tax - discount. A discount larger than subtotal + tax
  yields a negative total; it is stored as given.
- invoice_number is "INV-<epoch millis>". A collision surfaces as a
  DuplicateKeyError; nothing retries.
"""

INVOICE_PREFIX = "INV-"

_number_lock = threading.Lock()
_last_millis = 0


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_invoice_number() -> str:
    """Millisecond timestamp, bumped forward when two sales land in the same millisecond."""
    global _last_millis
    with _number_lock:
        millis = _epoch_millis()
        if millis <= _last_millis:
            millis = _last_millis + 1
        _last_millis = millis
    return f"{INVOICE_PREFIX}{millis}"


def _check_request(request: InvoiceRequest) -> None:
    if not request.lines:
        raise ValidationError("Cannot create an invoice with an empty cart")
    for line in request.lines:
        if line.quantity < 1:
            raise ValidationError(f"quantity must be >= 1 for {line.product_name}")
        if line.unit_price_cents < 0:
            raise ValidationError(f"unit_price_cents must be >= 0 for {line.product_name}")
    if request.tax_amount_cents < 0:
        raise ValidationError("tax_amount_cents must be >= 0")
    if request.discount_amount_cents < 0:
        raise ValidationError("discount_amount_cents must be >= 0")


def create_invoice(request: InvoiceRequest) -> dict:
    _check_request(request)

    subtotal = sum(line.total_price_cents for line in request.lines)
    total = subtotal + request.tax_amount_cents - request.discount_amount_cents
    invoice_number = generate_invoice_number()
    now = local_now()

    with atomic(duplicate_message=f"Invoice number {invoice_number} already exists"):
        invoice = Invoice(
            invoice_number=invoice_number,
            customer_name=request.customer.name,
            customer_phone=request.customer.phone,
            customer_email=request.customer.email,
            subtotal_cents=subtotal,
            tax_amount_cents=request.tax_amount_cents,
            discount_amount_cents=request.discount_amount_cents,
            total_amount_cents=total,
            payment_method=request.payment_method,
            status="completed",
            created_at=now,
            updated_at=now,
        )
        db.session.add(invoice)
        db.session.flush()

        for line in request.lines:
            # Decrement first: an unknown product must fail as NotFoundError
            stock_service.decrement_for_sale(
                product_id=line.product_id,
                quantity=line.quantity,
                invoice_id=invoice.id,
            )
            db.session.add(
                InvoiceItem(
                    invoice_id=invoice.id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price_cents=line.unit_price_cents,
                    total_price_cents=line.total_price_cents,
                )
            )

        invoice_id = invoice.id

    current_app.logger.info(
        "Invoice created: %s id=%s lines=%d total_cents=%d",
        invoice_number, invoice_id, len(request.lines), total,
    )
    return {"id": invoice_id, "invoice_number": invoice_number}


def list_invoices(limit: int | None = None) -> list[Invoice]:
    """Most recent invoices first."""
    if limit is None:
        limit = current_app.config["INVOICE_LIST_LIMIT"]
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    return (
        db.session.query(Invoice)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .limit(limit)
        .all()
    )


def get_invoice(invoice_id: int) -> Invoice:
    invoice = (
        db.session.query(Invoice)
        .options(selectinload(Invoice.items))
        .filter(Invoice.id == invoice_id)
        .first()
    )
    if invoice is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return invoice


def get_invoices_by_date_range(start: date, end: date) -> list[Invoice]:
    """Invoices whose local calendar date falls within [start, end]."""
    if end < start:
        raise ValidationError("end date must not be before start date")
    lower, upper = day_bounds(start, end)
    return (
        db.session.query(Invoice)
        .filter(Invoice.created_at >= lower, Invoice.created_at < upper)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .all()
    )
