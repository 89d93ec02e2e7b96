"""Tests for backup.py - JSON backup and restore."""

import json
from datetime import datetime

import pytest

import backup
from models import Customer, Rates


class TestBackupFilename:
    """Tests for backup_filename function."""

    def test_format(self):
        name = backup.backup_filename(datetime(2026, 3, 9, 14, 5, 7))
        assert name == "2026-03-09_ServiceQuoterBackup_2026-03-09T14-05-07.json"


class TestExportState:
    """Tests for writing backups."""

    def test_writes_all_sections(self, temp_database, sample_quote, tmp_path):
        temp_database.save_quote(sample_quote)
        temp_database.save_customer(Customer(id="c1", name="Acme"))
        temp_database.save_technician("Sam")

        path = backup.export_state(directory=tmp_path)

        assert path.parent == tmp_path
        assert "_ServiceQuoterBackup_" in path.name
        state = json.loads(path.read_text())
        assert [q["id"] for q in state["savedQuotes"]] == ["quote-1"]
        assert state["savedCustomers"][0]["name"] == "Acme"
        assert state["savedDefaultRates"]["siteNormal"] == 160.0
        assert state["savedTechnicians"] == ["Sam"]
        assert "exportDate" in state

    def test_explicit_path(self, temp_database, tmp_path):
        target = tmp_path / "backup.json"
        assert backup.export_state(path=target) == target
        assert json.loads(target.read_text())["savedQuotes"] == []


class TestImportState:
    """Tests for restoring backups."""

    def test_restores_quotes_rates_and_technicians(self, temp_database, sample_quote):
        state = {
            "savedQuotes": [sample_quote.to_dict()],
            "savedDefaultRates": Rates(site_normal=175.0).to_dict(),
            "savedTechnicians": ["Sam", "Alex"],
        }
        count = backup.import_state(json.dumps(state))

        assert count == 1
        assert temp_database.get_quote("quote-1") == sample_quote
        assert temp_database.get_default_rates().site_normal == 175.0
        assert temp_database.get_technicians() == ["Alex", "Sam"]

    def test_customers_not_restored(self, temp_database):
        temp_database.save_customer(Customer(id="c1", name="Current"))
        state = {"savedCustomers": [Customer(id="c1", name="Old").to_dict()]}

        backup.import_state(json.dumps(state))

        assert temp_database.get_customer("c1").name == "Current"

    def test_missing_sections_leave_data(self, temp_database):
        temp_database.save_technician("Sam")

        assert backup.import_state("{}") == 0
        assert temp_database.get_technicians() == ["Sam"]

    def test_invalid_json(self, temp_database):
        with pytest.raises(backup.BackupError):
            backup.import_state("{not json")

    def test_not_an_object(self, temp_database):
        with pytest.raises(backup.BackupError):
            backup.import_state("[1, 2, 3]")

    def test_wrong_section_types_use_defaults(self, temp_database):
        state = {"savedQuotes": [{"id": "q1", "jobDetails": "oops", "shifts": 5, "rates": []}]}

        assert backup.import_state(json.dumps(state)) == 1

        quote = temp_database.get_quote("q1")
        assert quote.job_details.customer == ""
        assert quote.shifts == []

    def test_unstorable_quote_imports_nothing(self, temp_database, sample_quote):
        state = {"savedQuotes": [sample_quote.to_dict(), {"id": "q2", "lastModified": 1e300}]}

        with pytest.raises(backup.BackupError):
            backup.import_state(json.dumps(state))

        assert temp_database.get_quote("quote-1") is None
        assert temp_database.get_all_quotes() == []

    def test_missing_file(self, temp_database, tmp_path):
        with pytest.raises(backup.BackupError):
            backup.import_file(tmp_path / "nope.json")

    def test_file_not_utf8(self, temp_database, tmp_path):
        path = tmp_path / "backup.json"
        path.write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(backup.BackupError):
            backup.import_file(path)

    def test_round_trip_through_file(self, temp_database, sample_quote, tmp_path):
        temp_database.save_quote(sample_quote)
        path = backup.export_state(directory=tmp_path)
        temp_database.delete_quote("quote-1")

        assert backup.import_file(path) == 1
        assert temp_database.get_quote("quote-1").quote_number == "0007"
