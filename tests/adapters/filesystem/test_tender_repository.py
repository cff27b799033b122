from __future__ import annotations

import json
from pathlib import Path

import pytest

from adapters.filesystem.json_utils import dump_json_bytes
from adapters.filesystem.tender_repository import FileSystemTenderRepository
from domain.errors import RecordStoreError
from domain.models import StatusRecord
from domain.sample_data import seed_tenders
from domain.services.manage_tenders import ManageTenders


def test_missing_file_is_empty(tmp_path: Path) -> None:
    assert FileSystemTenderRepository(tmp_path / "tenders.json").load_all() == []


def test_ensure_seeded_writes_once(tmp_path: Path) -> None:
    path = tmp_path / "data" / "tenders.json"
    repository = FileSystemTenderRepository(path)

    assert repository.ensure_seeded(seed_tenders())
    assert not repository.ensure_seeded([])

    records = repository.load_all()
    assert len(records) == 9
    assert records[0].district == "Kadıköy"
    assert records[0].attributes["rental_fee"] == "₺15,000/ay"
    # Non-ASCII text is stored as UTF-8, not escaped.
    assert "Kadıköy" in path.read_text(encoding="utf-8")


def test_save_all_keeps_extra_fields(tmp_path: Path) -> None:
    path = tmp_path / "tenders.json"
    repository = FileSystemTenderRepository(path)
    record = StatusRecord.model_validate(
        {
            "id": "tender_001",
            "districtId": 1971,
            "status": "won",
            "province": "İstanbul",
            "district": "Kadıköy",
            "title": "ATM",
            "cabin_count_total": 25,
        }
    )

    repository.save_all([record])

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload[0]["districtId"] == "1971"
    assert payload[0]["cabin_count_total"] == 25
    assert repository.load_all() == [record]
    assert not path.with_suffix(".json.tmp").exists()


def test_unreadable_file_is_an_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    not_a_list = tmp_path / "object.json"
    not_a_list.write_text('{"tenders": []}', encoding="utf-8")

    for path in (broken, not_a_list):
        with pytest.raises(RecordStoreError, match="unreadable"):
            FileSystemTenderRepository(path).load_all()


def test_unreadable_file_survives_a_write_attempt(tmp_path: Path) -> None:
    path = tmp_path / "tenders.json"
    path.write_text("{not json", encoding="utf-8")
    service = ManageTenders(FileSystemTenderRepository(path))

    with pytest.raises(RecordStoreError):
        service.create(
            {
                "districtId": "1",
                "status": "won",
                "province": "İstanbul",
                "district": "Üsküdar",
                "title": "Test",
            }
        )

    assert path.read_text(encoding="utf-8") == "{not json"


def test_malformed_entries_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "tenders.json"
    path.write_text(
        json.dumps([{"id": "tender_001", "status": "won"}, {"id": "broken"}, "junk"]),
        encoding="utf-8",
    )

    records = FileSystemTenderRepository(path).load_all()

    assert [record.id for record in records] == ["tender_001"]


def test_dump_json_bytes_falls_back_for_unknown_types() -> None:
    class Custom:
        def __str__(self) -> str:
            return "custom"

    assert json.loads(dump_json_bytes({"value": Custom()})) == {"value": "custom"}
