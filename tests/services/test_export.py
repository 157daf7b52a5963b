"""
Tests for JSON and CSV lead export.
"""
import csv
import io

from fdaleads.services.export import CSV_COLUMNS, export_csv, export_filename, export_json


def test_filenames():
    assert export_filename("csv") == "fda_leads.csv"
    assert export_filename("json") == "fda_leads.json"


def test_json_export(snapshot):
    leads = list(snapshot.leads)

    document = export_json(leads, {"priority": "CRITICAL"})

    assert document["total_leads"] == len(leads)
    assert document["filters"] == {"priority": "CRITICAL"}
    assert [lead["id"] for lead in document["leads"]] == [lead.id for lead in leads]


def test_csv_export(snapshot):
    leads = list(snapshot.leads)

    rows = list(csv.DictReader(io.StringIO(export_csv(leads))))

    assert len(rows) == len(leads)
    assert list(rows[0].keys()) == CSV_COLUMNS
    assert rows[0]["id"] == leads[0].id
    assert rows[0]["rank"] == "1"


def test_csv_export_of_nothing_is_header_only():
    assert export_csv([]).strip() == ",".join(f'"{column}"' for column in CSV_COLUMNS)
