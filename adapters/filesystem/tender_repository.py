from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from filelock import FileLock
from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_list, write_json_atomic
from domain.errors import RecordStoreError
from domain.models import StatusRecord
from domain.ports.repositories import TenderRepository

logger = logging.getLogger(__name__)


class FileSystemTenderRepository(TenderRepository):
    def __init__(self, path: Path) -> None:
        self.path = path

    def load_all(self) -> list[StatusRecord]:
        try:
            payload = load_json_list(self.path)
        except FileNotFoundError:
            return []
        except ValueError as exc:
            # Never read as empty: every write starts from load_all().
            msg = f"Tender data file is unreadable: {self.path}: {exc}"
            raise RecordStoreError(msg) from exc
        records: list[StatusRecord] = []
        for item in payload:
            try:
                records.append(StatusRecord.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed tender entry %r in %s", item.get("id"), self.path)
        return records

    def save_all(self, records: Sequence[StatusRecord]) -> None:
        self._write([record.to_payload() for record in records])

    def ensure_seeded(self, seed: Iterable[dict[str, Any]]) -> bool:
        if self.path.exists():
            return False
        self._write(list(seed))
        logger.info("Initial tender data created at %s", self.path)
        return True

    def _write(self, payload: list[dict[str, Any]]) -> None:
        lock_path = self.path.with_suffix(f"{self.path.suffix}.lock")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(lock_path)):
            write_json_atomic(self.path, payload)
