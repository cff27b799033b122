from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from domain.models import RegionSummary, StatusRecord, TenderStats
from domain.statuses import NO_TENDER_STATUS, is_known_status, known_statuses, status_rank

_DIGITS_RE = re.compile(r"[^0-9]")


def aggregate_status(statuses: Iterable[str | None]) -> str | None:
    present = [status for status in statuses if status]
    if not present:
        return None
    return min(present, key=status_rank)


def aggregate_records(records: Iterable[StatusRecord]) -> str | None:
    return aggregate_status(record.status for record in records)


class StatusAggregator:
    def aggregate(self, records: Iterable[StatusRecord]) -> str | None:
        return aggregate_records(records)

    def summarize_districts(self, records: Sequence[StatusRecord]) -> list[RegionSummary]:
        grouped: dict[tuple[str, str], list[StatusRecord]] = {}
        for record in records:
            grouped.setdefault(record.region_key, []).append(record)

        summaries: list[RegionSummary] = []
        for (province, district), tenders in grouped.items():
            status = aggregate_records(
                tender for tender in tenders if is_known_status(tender.status)
            )
            latest = max(tenders, key=lambda tender: tender.updated_at)
            summaries.append(
                RegionSummary(
                    district_id=tenders[0].district_id,
                    status=status or NO_TENDER_STATUS,
                    province=province,
                    district=district,
                    tender_count=len(tenders),
                    total_value=sum(parse_rental_fee(tender) for tender in tenders),
                    latest_tender=latest,
                )
            )
        return summaries

    def stats(self, records: Sequence[StatusRecord]) -> TenderStats:
        by_status = {
            status: sum(1 for record in records if record.status == status)
            for status in known_statuses()
        }
        summaries = self.summarize_districts(records)
        # "won" outranks every status, so a district holding one aggregates to it.
        return TenderStats(
            total_tenders=len(records),
            by_status=by_status,
            total_districts=len(summaries),
            districts_with_won=sum(1 for summary in summaries if summary.status == "won"),
        )


def parse_rental_fee(record: StatusRecord) -> int:
    digits = _DIGITS_RE.sub("", str(record.attributes.get("rental_fee") or ""))
    return int(digits) if digits else 0
