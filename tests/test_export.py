from decimal import Decimal

from ledger_staging.models.staged_transaction import StagedTransaction, TransactionType
from ledger_staging.services.export_service import ExportService


def staged(**overrides):
    data = dict(
        id=1,
        batch_id="b" * 32,
        transaction_date="2024-03-15",
        transaction_type=TransactionType.PAYMENT,
        description="  NEFT to Global Supplies ",
        amount=Decimal("-150.00"),
        bank_account=" HDFC Current A/c 0042 ",
        assigned_ledger=" Global Supplies ",
    )
    data.update(overrides)
    return StagedTransaction(**data)


def test_format_company_name():
    """Test underscore-joined identifiers become Title Case words"""
    assert ExportService.format_company_name("northwind_traders") == "Northwind Traders"
    assert ExportService.format_company_name("ACME_trading_CO") == "Acme Trading Co"
    assert ExportService.format_company_name("contoso") == "Contoso"


def test_transform_uses_magnitude_and_lowercase_type():
    """Test negative amount is exported as its magnitude and type lower-cased"""
    row = ExportService.transform(staged())
    assert row.amount == Decimal("150.00")
    assert row.transaction_type == "payment"
    assert row.description == "NEFT to Global Supplies"
    assert row.bank_account == "HDFC Current A/c 0042"
    assert row.assigned_ledger == "Global Supplies"
    assert row.transaction_date == "2024-03-15"


def test_transform_unset_fields():
    """Test unset type becomes empty string and unparseable dates become null"""
    row = ExportService.transform(staged(transaction_type=None, transaction_date="not-a-date"))
    assert row.transaction_type == ""
    assert row.transaction_date is None

    row = ExportService.transform(staged(transaction_date=None))
    assert row.transaction_date is None


def test_missing_fields():
    """Test eligibility needs date, bank account, ledger and a non-zero amount"""
    eligible = ExportService.transform(staged())
    assert ExportService.is_eligible(eligible)

    row = ExportService.transform(
        staged(transaction_date=None, bank_account="  ", assigned_ledger="", amount=Decimal("0"))
    )
    assert ExportService.missing_fields(row) == [
        "transaction_date",
        "bank_account",
        "assigned_ledger",
        "amount",
    ]
    assert not ExportService.is_eligible(row)


def test_prepare_reports_ineligible_rows():
    """Test prepare lists each blocking row with the fields it is missing"""
    rows = [staged(id=1), staged(id=2, amount=Decimal("0.00"))]
    export_rows, ineligible = ExportService.prepare(rows)
    assert [r.id for r in export_rows] == [1, 2]
    assert len(ineligible) == 1
    assert ineligible[0].id == 2
    assert ineligible[0].missing_fields == ["amount"]


def test_export_row_json_amount_is_number():
    """Test the wire form of an export row carries the amount as a number"""
    row = ExportService.transform(staged())
    payload = row.model_dump(mode="json")
    assert payload["amount"] == 150.0
    assert payload["transaction_type"] == "payment"


def test_transform_accepts_only_dashed_iso_dates():
    """Test compact and week-based ISO forms are not treated as real dates"""
    assert ExportService.transform(staged(transaction_date="20240131")).transaction_date is None
    assert ExportService.transform(staged(transaction_date="2024-W05-3")).transaction_date is None
    assert ExportService.transform(staged(transaction_date="2024-02-30")).transaction_date is None
    assert ExportService.transform(staged(transaction_date=" 2024-01-31 ")).transaction_date == "2024-01-31"
