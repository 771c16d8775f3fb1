# Overview: Read-only sales, product and customer reports over invoices and invoice lines.

from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, timedelta

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Invoice, InvoiceItem, Product
from ..time_utils import day_bounds, format_date, format_local, local_now
from ..validation import ValidationError

"""
Reporting Invariants (authoritative)

- Reports never write.
- Days are local calendar days; a date filter covers [start 00:00, end+1 00:00).
- All money values are integer cents. Averages round half up to the cent.
- An empty window yields zeros and empty lists, never an error.
"""


def _top_n() -> int:
    return current_app.config["REPORT_TOP_N"]


def _average(total: int, count: int) -> int:
    if count <= 0:
        return 0
    return (total + count // 2) // count


def _window(lower: datetime, upper: datetime):
    return (Invoice.created_at >= lower, Invoice.created_at < upper)


def _summary(lower: datetime, upper: datetime) -> dict:
    row = db.session.query(
        func.count(Invoice.id),
        func.coalesce(func.sum(Invoice.total_amount_cents), 0),
        func.coalesce(func.sum(Invoice.subtotal_cents), 0),
        func.coalesce(func.sum(Invoice.tax_amount_cents), 0),
        func.coalesce(func.sum(Invoice.discount_amount_cents), 0),
    ).filter(*_window(lower, upper)).one()

    return {
        "total_invoices": int(row[0]),
        "total_revenue": int(row[1]),
        "total_subtotal": int(row[2]),
        "total_tax": int(row[3]),
        "total_discount": int(row[4]),
    }


def _top_products(lower: datetime, upper: datetime) -> list[dict]:
    revenue = func.sum(InvoiceItem.total_price_cents)
    rows = (
        db.session.query(
            InvoiceItem.product_name,
            func.sum(InvoiceItem.quantity),
            revenue,
        )
        .join(Invoice, Invoice.id == InvoiceItem.invoice_id)
        .filter(*_window(lower, upper))
        # Two products sharing a name stay separate rows
        .group_by(InvoiceItem.product_id, InvoiceItem.product_name)
        .order_by(revenue.desc(), InvoiceItem.product_name.asc(), InvoiceItem.product_id.asc())
        .limit(_top_n())
        .all()
    )
    return [
        {
            "product_name": name,
            "total_quantity": int(quantity),
            "total_revenue": int(total),
        }
        for name, quantity, total in rows
    ]


def daily_sales(day: date) -> dict:
    lower, upper = day_bounds(day)
    return {
        "date": format_date(day),
        "summary": _summary(lower, upper),
        "top_products": _top_products(lower, upper),
    }


def date_range_sales(start: date, end: date) -> dict:
    if end < start:
        raise ValidationError("end date must not be before start date")
    lower, upper = day_bounds(start, end)

    summary = _summary(lower, upper)
    summary["avg_invoice_value"] = _average(summary["total_revenue"], summary["total_invoices"])

    # Bucket in Python so the day boundary is the same one day_bounds uses
    by_day: "OrderedDict[date, dict]" = OrderedDict()
    rows = (
        db.session.query(Invoice.created_at, Invoice.total_amount_cents)
        .filter(*_window(lower, upper))
        .order_by(Invoice.created_at.asc(), Invoice.id.asc())
        .all()
    )
    for created_at, total in rows:
        bucket = by_day.setdefault(created_at.date(), {"invoices": 0, "revenue": 0})
        bucket["invoices"] += 1
        bucket["revenue"] += total

    method_total = func.sum(Invoice.total_amount_cents)
    methods = (
        db.session.query(Invoice.payment_method, func.count(Invoice.id), method_total)
        .filter(*_window(lower, upper))
        .group_by(Invoice.payment_method)
        .order_by(method_total.desc(), Invoice.payment_method.asc())
        .all()
    )

    return {
        "start": format_date(start),
        "end": format_date(end),
        "summary": summary,
        "daily_breakdown": [
            {"date": format_date(d), "invoices": v["invoices"], "revenue": v["revenue"]}
            for d, v in by_day.items()
        ],
        "top_products": _top_products(lower, upper),
        "payment_methods": [
            {"payment_method": method, "count": int(count), "total": int(total)}
            for method, count, total in methods
        ],
    }


def product_performance(as_of: datetime | None = None) -> dict:
    """
    Best sellers by units sold, and slow movers.

    A slow mover is a product with stock on hand that has not sold within
    SLOW_MOVER_DAYS of as_of, including products that never sold.
    """
    as_of = as_of or local_now()
    cutoff = as_of - timedelta(days=current_app.config["SLOW_MOVER_DAYS"])

    units = func.sum(InvoiceItem.quantity)
    best = (
        db.session.query(
            InvoiceItem.product_name,
            units,
            func.sum(InvoiceItem.total_price_cents),
            func.sum(InvoiceItem.unit_price_cents),
            func.count(InvoiceItem.id),
        )
        .group_by(InvoiceItem.product_id, InvoiceItem.product_name)
        .order_by(units.desc(), InvoiceItem.product_name.asc(), InvoiceItem.product_id.asc())
        .limit(_top_n())
        .all()
    )

    last_sales = (
        db.session.query(InvoiceItem.product_id, func.max(Invoice.created_at))
        .join(Invoice, Invoice.id == InvoiceItem.invoice_id)
        .filter(InvoiceItem.product_id.isnot(None))
        .group_by(InvoiceItem.product_id)
        .all()
    )
    last_sale_map = {product_id: last_sold for product_id, last_sold in last_sales}

    products = (
        db.session.query(Product)
        .filter(Product.stock_quantity > 0)
        .order_by(Product.stock_quantity.desc(), Product.name.asc())
        .all()
    )

    slow_movers = []
    for product in products:
        last_sold = last_sale_map.get(product.id)
        if last_sold is not None and last_sold >= cutoff:
            continue
        slow_movers.append(
            {
                "product_name": product.name,
                "stock_quantity": product.stock_quantity,
                "last_sold": format_local(last_sold),
            }
        )

    return {
        "as_of": format_local(as_of),
        "best_sellers": [
            {
                "product_name": name,
                "total_sold": int(sold),
                "total_revenue": int(revenue),
                "avg_price": _average(int(price_sum), int(line_count)),
            }
            for name, sold, revenue, price_sum, line_count in best
        ],
        "slow_movers": slow_movers,
    }


def customer_report() -> dict:
    """Named customers only; walk-in invoices without a name are not counted."""
    named = (Invoice.customer_name.isnot(None), func.trim(Invoice.customer_name) != "")

    spent = func.sum(Invoice.total_amount_cents)
    invoice_count = func.count(Invoice.id)
    rows = (
        db.session.query(Invoice.customer_name, invoice_count, spent)
        .filter(*named)
        .group_by(Invoice.customer_name)
        .order_by(spent.desc(), invoice_count.desc(), Invoice.customer_name.asc())
        .all()
    )

    total_spent = sum(int(row[2]) for row in rows)
    total_invoices = sum(int(row[1]) for row in rows)

    return {
        "total_customers": len(rows),
        "repeat_customers": sum(1 for row in rows if row[1] > 1),
        "avg_invoice_value": _average(total_spent, total_invoices),
        "top_customers": [
            {"customer_name": name, "invoice_count": int(count), "total_spent": int(total)}
            for name, count, total in rows[: _top_n()]
        ],
    }
