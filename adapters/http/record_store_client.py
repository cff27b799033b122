from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from domain.errors import RecordStoreError
from domain.models import RegionSummary, StatusRecord
from domain.ports.repositories import RecordStore


class HttpRecordStore(RecordStore):
    """Client for the tender API; every response is a ``{success, data}`` envelope.

    A transport failure, a non-2xx status or ``success: false`` all raise
    ``RecordStoreError``: partial success is never assumed.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @classmethod
    def from_base_url(
        cls,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> HttpRecordStore:
        client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )
        return cls(client)

    def close(self) -> None:
        self._client.close()

    def list_records(self) -> list[StatusRecord]:
        data = self._request("GET", "/tenders")
        return [self._record(item) for item in self._as_list(data)]

    def create_record(self, fields: Mapping[str, Any]) -> StatusRecord:
        return self._record(self._request("POST", "/tenders", json=dict(fields)))

    def update_record(self, record_id: str, fields: Mapping[str, Any]) -> StatusRecord:
        return self._record(self._request("PUT", f"/tenders/{record_id}", json=dict(fields)))

    def aggregated_by_region(self) -> list[RegionSummary]:
        data = self._request("GET", "/districts")
        summaries: list[RegionSummary] = []
        for item in self._as_list(data):
            details = item.get("details") or {}
            latest = details.get("latest_tender")
            summaries.append(
                RegionSummary(
                    district_id=str(item.get("districtId", "")),
                    status=str(item.get("status", "")),
                    province=str(details.get("province", "")),
                    district=str(details.get("district", "")),
                    tender_count=int(details.get("tender_count", 0) or 0),
                    total_value=int(details.get("total_value", 0) or 0),
                    latest_tender=self._record(latest) if isinstance(latest, dict) else None,
                )
            )
        return summaries

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            msg = f"{method} {url} failed: {exc}"
            raise RecordStoreError(msg) from exc
        try:
            envelope = response.json()
        except ValueError:
            envelope = {}
        if not isinstance(envelope, dict):
            envelope = {}
        if response.is_error or not envelope.get("success"):
            message = envelope.get("message") or f"HTTP error! status: {response.status_code}"
            raise RecordStoreError(str(message))
        return envelope.get("data")

    def _as_list(self, data: Any) -> list[dict[str, Any]]:
        if not isinstance(data, list):
            msg = "Record store returned a non-list payload"
            raise RecordStoreError(msg)
        return [item for item in data if isinstance(item, dict)]

    def _record(self, data: Any) -> StatusRecord:
        try:
            return StatusRecord.model_validate(data)
        except ValidationError as exc:
            msg = f"Record store returned an invalid record: {exc}"
            raise RecordStoreError(msg) from exc
