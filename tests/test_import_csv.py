import pandas as pd
import pytest

from database.models import Building, Client, Property
from services.imports.client_upserter import MergeStrategy
from services.imports.dto import ClientRecord
from services.imports.import_service import (
    CSV_COLUMNS,
    FailurePolicy,
    import_client_table,
    import_csv,
    load_client_table,
    parse_csv_text,
    process_csv_records,
    record_from_csv_row,
)

CSV_TEXT = (
    "Case Number,Client Name,Client Number,Client Address,Properties Management,"
    "County,Cell Number,Email,Comment,Rental Office Address,Rent Amount,County Amount,Notes\n"
    'C-1,Jane Doe,651-555-1234,1 Oak,Aeon,Hennepin,,jane@mail.org,call first,'
    '100 Main St,"$1,100.00",$300,new\n'
    "C-2,Mary Jane Watson,,,Aeon,Hennepin,6515550000,,,100 Main St,700,,\n"
)


def test_record_from_csv_row_maps_columns():
    row = dict.fromkeys(CSV_COLUMNS, "")
    row.update(
        {
            "Client Name": " Jane Doe ",
            "Cell Number": "6515551234",
            "Properties Management": "Aeon",
            "Comment": "hello",
        }
    )

    record = record_from_csv_row(row)

    assert (record.first_name, record.last_name) == ("Jane", "Doe")
    assert record.phone == "6515551234"
    assert record.management_name == "Aeon"
    assert record.comments == "hello"
    assert record.rent_amount is None


def test_parse_csv_text_success():
    parsed = parse_csv_text(CSV_TEXT)

    assert parsed.success
    assert len(parsed.records) == 2
    jane, mary = parsed.records
    assert jane.case_number == "C-1"
    assert jane.rent_amount == "$1,100.00"
    assert jane.phone == "651-555-1234"
    assert (mary.first_name, mary.last_name) == ("Mary", "Jane Watson")
    assert mary.phone == "6515550000"


def test_parse_csv_text_malformed_rows():
    text = "Client Name,County\nJane Doe,Ramsey\nMary Doe,Ramsey,extra,field\n"

    parsed = parse_csv_text(text)

    assert not parsed.success
    assert parsed.records == []
    assert parsed.error.startswith("CSV parsing errors")


def test_parse_csv_text_empty_and_missing_name_column():
    assert not parse_csv_text("").success
    assert not parse_csv_text("County,Email\nRamsey,a@b.c\n").success


def test_import_csv_creates_entities(company):
    summary = import_csv(CSV_TEXT, company.id)

    assert summary.success
    assert summary.clients_created == 2
    assert summary.buildings_created == 1
    assert summary.properties_created == 1
    client = Client.get(Client.first_name == "Jane")
    assert client.county == "Hennepin"
    assert client.phone == "(651) 555-1234"
    assert client.notes == "new; call first"
    assert client.email == "jane@mail.org"

    result = summary.to_dict()
    assert result["clientsCreated"] == 2
    assert result["propertiesCreated"] == 1
    assert result["buildingsCreated"] == 1
    assert result["errorDetails"] == []


def test_import_csv_is_idempotent(company):
    import_csv(CSV_TEXT, company.id)
    counts = (Building.select().count(), Property.select().count())

    summary = import_csv(CSV_TEXT, company.id)

    assert summary.updated == 2
    assert summary.created == 0
    assert (Building.select().count(), Property.select().count()) == counts
    assert Client.select().count() == 2


def test_import_csv_coalesces_by_default(company):
    import_csv(CSV_TEXT, company.id)
    text = "Client Name,County\nJane Doe,Hennepin\n"

    import_csv(text, company.id)

    assert Client.get(Client.first_name == "Jane").email == "jane@mail.org"


def test_import_csv_overwrite(company):
    import_csv(CSV_TEXT, company.id)
    text = "Client Name,County\nJane Doe,Hennepin\n"

    import_csv(text, company.id, merge_strategy=MergeStrategy.OVERWRITE)

    assert Client.get(Client.first_name == "Jane").email == "noemail@example.com"


def test_import_csv_parse_error_is_returned(company):
    summary = import_csv("Client Name\n\"unterminated\n", company.id)

    assert not summary.success
    assert Client.select().count() == 0


def test_process_records_aborts_on_first_failure(company, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    records = [
        ClientRecord.from_full_name("Jane Doe", management_name="Aeon"),
        ClientRecord.from_full_name("Bad Row", management_name="Aeon"),
        ClientRecord.from_full_name("Mary Doe", management_name="Aeon"),
    ]
    real_create = Client.create

    def create(**values):
        if values["last_name"] == "Row":
            boom()
        return real_create(**values)

    monkeypatch.setattr(Client, "create", create)

    summary = process_csv_records(records, company.id)

    assert not summary.success
    assert summary.error == "Database processing failed at row 2: boom"
    assert summary.created == 1
    assert summary.errors[0].data["first_name"] == "Bad"
    assert Client.select().count() == 1


def test_process_records_isolate_continues(company, monkeypatch):
    real_create = Client.create

    def create(**values):
        if values["last_name"] == "Row":
            raise RuntimeError("boom")
        return real_create(**values)

    monkeypatch.setattr(Client, "create", create)
    records = [
        ClientRecord.from_full_name("Bad Row"),
        ClientRecord.from_full_name("Mary Doe"),
    ]

    summary = process_csv_records(records, company.id, failure_policy=FailurePolicy.ISOLATE)

    assert summary.success
    assert summary.created == 1
    assert summary.skipped == 1
    assert summary.to_dict()["errorDetails"][0]["row"] == 1


def test_load_client_table_excel(company, tmp_path):
    path = tmp_path / "clients.xlsx"
    pd.DataFrame(
        [
            {"Client Name": "Jane Doe", "Properties Management": "Aeon", "Rent Amount": 950},
            {"Client Name": "Ann Lee", "Properties Management": None, "Rent Amount": None},
        ]
    ).to_excel(path, index=False)

    parsed = load_client_table(path)

    assert parsed.success
    assert [r.first_name for r in parsed.records] == ["Jane", "Ann"]
    assert parsed.records[1].management_name == ""

    summary = import_client_table(path, company.id)
    assert summary.clients_created == 2
    assert summary.properties_created == 1


def test_load_client_table_tsv(tmp_path):
    path = tmp_path / "clients.tsv"
    path.write_text(
        "Client Name\tProperties Management\tRent Amount\nJane Doe\tAeon\t$1,200\n",
        encoding="utf-8",
    )

    parsed = load_client_table(path)

    assert parsed.success
    assert parsed.records[0].rent_amount == "$1,200"


@pytest.mark.parametrize("suffix", [".csv", ".txt"])
def test_load_client_table_explicit_delimiter(tmp_path, suffix):
    path = tmp_path / f"clients{suffix}"
    path.write_text("Client Name;County\nJane Doe;Ramsey\n", encoding="utf-8")

    parsed = load_client_table(path, delimiter=";")

    assert parsed.success
    assert parsed.records[0].county == "Ramsey"


def test_import_csv_blank_notes_keep_inactive_status(company):
    import_csv("Client Name,Notes\nJane Doe,Case Inactive - moved out\n", company.id)
    import_csv("Client Name,Notes\nJane Doe,\n", company.id)

    client = Client.get(Client.first_name == "Jane")
    assert client.notes == "Case Inactive - moved out"
    assert client.is_active is False
