from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from domain.errors import TenderNotFoundError, TenderValidationError
from domain.models import REQUIRED_TENDER_FIELDS, StatusRecord
from domain.ports.repositories import TenderRepository
from domain.statuses import is_known_status, known_statuses

_TENDER_ID_RE = re.compile(r"^tender_(\d+)$")
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ManageTenders:
    def __init__(
        self,
        repository: TenderRepository,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self._repository = repository
        self._clock = clock

    def list_all(self) -> list[StatusRecord]:
        return self._repository.load_all()

    def get(self, tender_id: str) -> StatusRecord:
        for record in self._repository.load_all():
            if record.id == tender_id:
                return record
        raise TenderNotFoundError(tender_id)

    def for_district(self, district_id: str) -> list[StatusRecord]:
        return [
            record for record in self._repository.load_all() if record.district_id == district_id
        ]

    def create(self, fields: Mapping[str, Any]) -> StatusRecord:
        missing = [name for name in REQUIRED_TENDER_FIELDS if not fields.get(name)]
        if missing:
            msg = f"Missing required fields: {', '.join(REQUIRED_TENDER_FIELDS)}"
            raise TenderValidationError(msg)
        self._check_status(fields.get("status"))

        records = self._repository.load_all()
        now = self._clock()
        payload = {key: value for key, value in fields.items() if key not in _IMMUTABLE_FIELDS}
        payload.update({"id": self._next_id(records), "created_at": now, "updated_at": now})
        record = self._validate(payload)
        records.append(record)
        self._repository.save_all(records)
        return record

    def update(self, tender_id: str, fields: Mapping[str, Any]) -> StatusRecord:
        records = self._repository.load_all()
        for index, current in enumerate(records):
            if current.id != tender_id:
                continue
            changes = {
                key: value for key, value in fields.items() if key not in _IMMUTABLE_FIELDS
            }
            if not changes.get("status"):
                changes.pop("status", None)
            else:
                self._check_status(changes["status"])
            payload = current.to_payload()
            payload.update(changes)
            payload["updated_at"] = self._clock()
            updated = self._validate(payload)
            records[index] = updated
            self._repository.save_all(records)
            return updated
        raise TenderNotFoundError(tender_id)

    def delete(self, tender_id: str) -> StatusRecord:
        records = self._repository.load_all()
        for index, current in enumerate(records):
            if current.id == tender_id:
                del records[index]
                self._repository.save_all(records)
                return current
        raise TenderNotFoundError(tender_id)

    def _check_status(self, status: object) -> None:
        if not is_known_status(str(status or "")):
            msg = f"Unknown status '{status}', expected one of: {', '.join(known_statuses())}"
            raise TenderValidationError(msg)

    def _validate(self, payload: Mapping[str, Any]) -> StatusRecord:
        try:
            return StatusRecord.model_validate(dict(payload))
        except ValidationError as exc:
            raise TenderValidationError(str(exc)) from exc

    def _next_id(self, records: list[StatusRecord]) -> str:
        numbers = [
            int(match.group(1))
            for match in (_TENDER_ID_RE.match(record.id) for record in records)
            if match
        ]
        next_number = max(numbers, default=0) + 1
        return f"tender_{next_number:03d}"
