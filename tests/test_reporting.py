from datetime import datetime
from types import SimpleNamespace

from ledger_api.models.transaction import TransactionType
from ledger_api.utils.reporting import (
    UTF8_BOM,
    format_csv_date,
    format_number,
    month_key,
    render_csv,
    summarize,
)


def _tx(concept, amount, date, tx_type, owner="Ana Admin"):
    return SimpleNamespace(
        concept=concept,
        amount=amount,
        date=date,
        type=tx_type,
        user=SimpleNamespace(name=owner, email="ana@example.com"),
    )


LEDGER = [
    _tx("Servicios", 45, datetime(2025, 3, 1), TransactionType.EXPENSE),
    _tx("Consultoría", 300, datetime(2025, 2, 20), TransactionType.INCOME),
    _tx("Alquiler", 80.5, datetime(2025, 2, 3), TransactionType.EXPENSE),
    _tx("Papelería", 19.5, datetime(2025, 1, 25), TransactionType.EXPENSE),
    _tx("Venta", 150, datetime(2025, 1, 10), TransactionType.INCOME),
]


def test_month_key_uses_short_spanish_month() -> None:
    assert month_key(datetime(2025, 1, 10), "es_ES") == "ene 2025"
    assert month_key(datetime(2025, 2, 28, 23, 59), "es_ES") == "feb 2025"


def test_csv_date_is_day_month_year_without_padding() -> None:
    assert format_csv_date(datetime(2025, 1, 10), "es_ES") == "10/1/2025"


def test_format_number_drops_trailing_zero() -> None:
    assert format_number(150.0) == 150
    assert isinstance(format_number(150.0), int)
    assert format_number(80.5) == 80.5


def test_summarize_totals_and_balance() -> None:
    summary = summarize(LEDGER, "es_ES")
    assert summary["total_income"] == 450
    assert summary["total_expense"] == 145
    assert summary["balance"] == summary["total_income"] - summary["total_expense"]


def test_monthly_buckets_add_up_to_totals() -> None:
    summary = summarize(LEDGER, "es_ES")
    buckets = summary["monthly_data"]

    assert sum(b["income"] for b in buckets) == summary["total_income"]
    assert sum(b["expense"] for b in buckets) == summary["total_expense"]

    by_month = {b["month"]: b for b in buckets}
    assert by_month["feb 2025"] == {"month": "feb 2025", "income": 300, "expense": 80.5}
    assert by_month["ene 2025"] == {"month": "ene 2025", "income": 150, "expense": 19.5}


def test_buckets_follow_first_seen_order() -> None:
    months = [b["month"] for b in summarize(LEDGER, "es_ES")["monthly_data"]]
    assert months == ["mar 2025", "feb 2025", "ene 2025"]


def test_summarize_empty_ledger() -> None:
    summary = summarize([], "es_ES")
    assert summary == {
        "total_income": 0.0,
        "total_expense": 0.0,
        "balance": 0.0,
        "monthly_data": [],
    }


def test_render_csv_layout() -> None:
    summary = summarize(LEDGER, "es_ES")
    payload = render_csv(LEDGER, summary, "es_ES")

    assert payload.startswith(UTF8_BOM)
    lines = payload[len(UTF8_BOM):].splitlines()

    assert lines[0] == "Concepto,Monto,Fecha,Tipo,Usuario"
    assert lines[1] == '"Servicios",45,"1/3/2025","Egreso","Ana Admin"'
    assert lines[3] == '"Alquiler",80.5,"3/2/2025","Egreso","Ana Admin"'
    assert lines[5] == '"Venta",150,"10/1/2025","Ingreso","Ana Admin"'
    assert lines[6:] == [
        "",
        "Resumen",
        "Total Ingresos,450",
        "Total Egresos,145",
        "Saldo,305",
    ]


def test_render_csv_escapes_quotes_in_concept() -> None:
    ledger = [_tx('Factura "A"', 10, datetime(2025, 1, 1), TransactionType.INCOME)]
    payload = render_csv(ledger, summarize(ledger, "es_ES"), "es_ES")
    assert '"Factura ""A""",10,' in payload


def test_totals_match_bucket_sums_with_inexact_amounts() -> None:
    # Months interleave in listing order
    ledger = [
        _tx("Cobro", 0.1, datetime(2025, 3, 20), TransactionType.INCOME),
        _tx("Cobro", 0.2, datetime(2025, 2, 14), TransactionType.INCOME),
        _tx("Cobro", 2.675, datetime(2025, 3, 2), TransactionType.INCOME),
        _tx("Gasto", 0.7, datetime(2025, 2, 11), TransactionType.EXPENSE),
        _tx("Gasto", 0.1, datetime(2025, 3, 1), TransactionType.EXPENSE),
        _tx("Gasto", 1.15, datetime(2025, 2, 9), TransactionType.EXPENSE),
    ]
    summary = summarize(ledger, "es_ES")
    buckets = summary["monthly_data"]

    assert sum(b["income"] for b in buckets) == summary["total_income"]
    assert sum(b["expense"] for b in buckets) == summary["total_expense"]
    assert summary["balance"] == summary["total_income"] - summary["total_expense"]
