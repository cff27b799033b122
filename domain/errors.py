from __future__ import annotations


class TenderNotFoundError(LookupError):
    def __init__(self, tender_id: str) -> None:
        super().__init__(f"Tender not found: {tender_id}")
        self.tender_id = tender_id


class TenderValidationError(ValueError):
    pass


class RecordStoreError(RuntimeError):
    pass


class MapGeometryError(RuntimeError):
    pass
