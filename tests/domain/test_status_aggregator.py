from __future__ import annotations

from collections.abc import Callable

from domain.models import StatusRecord
from domain.sample_data import SEED_TENDERS
from domain.services.status_aggregator import (
    StatusAggregator,
    aggregate_status,
    parse_rental_fee,
)
from domain.statuses import (
    NO_DATA_COLOR,
    humanize_status,
    known_statuses,
    status_color,
    status_rank,
)

RecordFactory = Callable[..., StatusRecord]


def test_priority_order() -> None:
    assert known_statuses() == [
        "won",
        "negotiating",
        "upcoming",
        "competitor",
        "lost",
        "terminated",
    ]
    assert status_rank("won") < status_rank("terminated")
    assert status_rank("mystery") > status_rank("terminated")


def test_aggregate_status_picks_highest_priority() -> None:
    assert aggregate_status(["lost", "won"]) == "won"
    assert aggregate_status(["terminated", "competitor", "upcoming"]) == "upcoming"
    assert aggregate_status(["lost"]) == "lost"


def test_aggregate_status_is_order_independent() -> None:
    statuses = ["lost", "negotiating", "terminated"]
    assert aggregate_status(statuses) == aggregate_status(list(reversed(statuses)))


def test_aggregate_status_empty_is_none() -> None:
    assert aggregate_status([]) is None
    assert aggregate_status([None, ""]) is None


def test_unknown_status_ranks_last() -> None:
    assert aggregate_status(["mystery", "terminated"]) == "terminated"
    assert aggregate_status(["mystery"]) == "mystery"


def test_status_color_and_display() -> None:
    assert status_color("won") == "#10b981"
    assert status_color("negotiating") == "#fbbf24"
    assert status_color("mystery") == NO_DATA_COLOR
    assert humanize_status("lost") == "Olumsuz"
    assert humanize_status(" custom ") == "custom"


def test_summarize_districts_groups_by_province_and_district(
    record_factory: RecordFactory,
) -> None:
    records = [
        record_factory(
            id="tender_001",
            status="lost",
            rental_fee="₺15,000/ay",
            updated_at="2024-01-01T00:00:00.000Z",
        ),
        record_factory(
            id="tender_002",
            status="won",
            rental_fee="₺8,000/ay",
            updated_at="2024-05-01T00:00:00.000Z",
        ),
        record_factory(id="tender_003", district="Kadıköy", status="upcoming"),
    ]

    summaries = StatusAggregator().summarize_districts(records)

    assert len(summaries) == 2
    uskudar = summaries[0]
    assert uskudar.status == "won"
    assert uskudar.tender_count == 2
    assert uskudar.total_value == 23000
    assert uskudar.latest_tender is not None
    assert uskudar.latest_tender.id == "tender_002"
    payload = uskudar.to_dict()
    assert payload["districtId"] == "1"
    assert payload["details"]["tender_count"] == 2
    assert payload["details"]["latest_tender"]["id"] == "tender_002"


def test_summary_without_known_status_is_no_tender(record_factory: RecordFactory) -> None:
    summaries = StatusAggregator().summarize_districts([record_factory(status="archived")])
    assert summaries[0].status == "no_tender"


def test_stats_on_seed_data() -> None:
    records = [StatusRecord.model_validate(item) for item in SEED_TENDERS]

    stats = StatusAggregator().stats(records).to_dict()

    assert stats["total_tenders"] == 9
    assert stats["won"] == 3
    assert stats["negotiating"] == 3
    assert stats["upcoming"] == 2
    assert stats["lost"] == 1
    assert stats["competitor"] == 0
    assert stats["total_districts"] == 8
    assert stats["districts_with_won"] == 3


def test_parse_rental_fee(record_factory: RecordFactory) -> None:
    assert parse_rental_fee(record_factory(rental_fee="₺22,000/ay")) == 22000
    assert parse_rental_fee(record_factory()) == 0
    assert parse_rental_fee(record_factory(rental_fee="yok")) == 0
