# ledger_api/utils/reporting.py
import csv
import io
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from babel.dates import format_date
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_api.core.config import settings
from ledger_api.crud.transaction import get_all_transactions
from ledger_api.models.transaction import Transaction, TransactionType

CSV_HEADER = ["Concepto", "Monto", "Fecha", "Tipo", "Usuario"]
TYPE_LABELS = {
    TransactionType.INCOME: "Ingreso",
    TransactionType.EXPENSE: "Egreso",
}
# Spreadsheet apps need the byte-order mark to pick UTF-8
UTF8_BOM = "\ufeff"


# ────────────────────────────────────────────────────────────────────────────────
# MAIN ENTRY
# ────────────────────────────────────────────────────────────────────────────────
async def build_report(db: AsyncSession, locale: Optional[str] = None) -> Dict[str, Any]:
    """
    Totals, balance and the per-month breakdown over the whole ledger.

    A single bulk read; rows written concurrently may show up in the listing
    but not in the totals or the other way round.
    """
    transactions = await get_all_transactions(db)
    report = summarize(transactions, locale)
    report["transactions"] = transactions
    return report


async def export_csv(db: AsyncSession, locale: Optional[str] = None) -> str:
    transactions = await get_all_transactions(db)
    summary = summarize(transactions, locale)
    return render_csv(transactions, summary, locale)


# ────────────────────────────────────────────────────────────────────────────────
# AGGREGATION
# ────────────────────────────────────────────────────────────────────────────────
def summarize(transactions: Iterable[Transaction], locale: Optional[str] = None) -> Dict[str, Any]:
    """
    Buckets come out in the order their month is first seen; with the
    date-descending listing that is newest month first.

    Totals are summed from the buckets, in bucket order, so they equal the
    sum of monthlyData exactly even after float rounding.
    """
    locale = locale or settings.REPORT_LOCALE
    buckets: Dict[str, Dict[str, Any]] = {}

    for tx in transactions:
        key = month_key(tx.date, locale)
        bucket = buckets.setdefault(key, {"month": key, "income": 0.0, "expense": 0.0})
        if tx.type == TransactionType.INCOME:
            bucket["income"] += tx.amount
        else:
            bucket["expense"] += tx.amount

    monthly_data = list(buckets.values())
    total_income = sum((b["income"] for b in monthly_data), 0.0)
    total_expense = sum((b["expense"] for b in monthly_data), 0.0)

    return {
        "total_income": total_income,
        "total_expense": total_expense,
        "balance": total_income - total_expense,
        "monthly_data": monthly_data,
    }


def month_key(value: datetime, locale: Optional[str] = None) -> str:
    """Short month name and year in the report locale, e.g. "ene 2025"."""
    return format_date(value, format="MMM y", locale=locale or settings.REPORT_LOCALE)


# ────────────────────────────────────────────────────────────────────────────────
# CSV RENDERING
# ────────────────────────────────────────────────────────────────────────────────
def format_csv_date(value: datetime, locale: Optional[str] = None) -> str:
    return format_date(value, format="d/M/y", locale=locale or settings.REPORT_LOCALE)


def format_number(value: float) -> Union[int, float]:
    """Print whole amounts without a trailing .0, the way a JSON number reads."""
    if float(value).is_integer():
        return int(value)
    return value


def render_csv(
    transactions: List[Transaction],
    summary: Dict[str, Any],
    locale: Optional[str] = None,
) -> str:
    buffer = io.StringIO()

    # Text cells are quoted, numbers are written raw
    rows = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    buffer.write(",".join(CSV_HEADER) + "\n")
    for tx in transactions:
        rows.writerow([
            tx.concept,
            format_number(tx.amount),
            format_csv_date(tx.date, locale),
            TYPE_LABELS[tx.type],
            tx.user.name if tx.user else "",
        ])

    totals = csv.writer(buffer, lineterminator="\n")
    buffer.write("\n")
    buffer.write("Resumen\n")
    totals.writerow(["Total Ingresos", format_number(summary["total_income"])])
    totals.writerow(["Total Egresos", format_number(summary["total_expense"])])
    totals.writerow(["Saldo", format_number(summary["balance"])])

    return UTF8_BOM + buffer.getvalue()
