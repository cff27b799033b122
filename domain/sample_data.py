from __future__ import annotations

from typing import Any

from domain.models import StatusRecord

# Written to the data file when the record store starts without one.
SEED_TENDERS: tuple[dict[str, Any], ...] = (
    {
        "id": "tender_001",
        "districtId": "1971",
        "status": "won",
        "province": "İstanbul",
        "district": "Kadıköy",
        "title": "ATM Kabinleri Projesi",
        "tender_duration": "36 ay",
        "cabin_count_total": 25,
        "cabin_count_full": 18,
        "rental_fee": "₺15,000/ay",
        "last_meeting_date": "2024-07-15",
        "meeting_notes": "Sözleşme imzalandı, kurulum başlatıldı.",
        "created_at": "2024-01-15T00:00:00.000Z",
        "updated_at": "2024-07-15T00:00:00.000Z",
    },
    {
        "id": "tender_002",
        "districtId": "1971",
        "status": "upcoming",
        "province": "İstanbul",
        "district": "Kadıköy",
        "title": "Ek Lokasyon Projesi",
        "tender_duration": "24 ay",
        "cabin_count_total": 10,
        "cabin_count_full": 0,
        "rental_fee": "₺8,000/ay",
        "foreseen_tender_date": "2024-10-01",
        "meeting_notes": "Mevcut projenin genişletilmesi planlanıyor.",
        "created_at": "2024-07-20T00:00:00.000Z",
        "updated_at": "2024-07-20T00:00:00.000Z",
    },
    {
        "id": "tender_003",
        "districtId": "1972",
        "status": "negotiating",
        "province": "İstanbul",
        "district": "Üsküdar",
        "title": "Ana İhale Projesi",
        "tender_duration": "24 ay",
        "cabin_count_total": 20,
        "cabin_count_full": 0,
        "rental_fee": "₺12,000/ay",
        "last_meeting_date": "2024-07-25",
        "meeting_notes": "Fiyat görüşmeleri devam ediyor.",
        "created_at": "2024-05-10T00:00:00.000Z",
        "updated_at": "2024-07-25T00:00:00.000Z",
    },
    {
        "id": "tender_004",
        "districtId": "1973",
        "status": "upcoming",
        "province": "İstanbul",
        "district": "Beşiktaş",
        "title": "Merkezi Lokasyonlar Projesi",
        "tender_duration": "30 ay",
        "cabin_count_total": 15,
        "cabin_count_full": 0,
        "rental_fee": "₺18,000/ay",
        "foreseen_tender_date": "2024-09-15",
        "meeting_notes": "İhale dosyaları hazırlanıyor.",
        "created_at": "2024-06-01T00:00:00.000Z",
        "updated_at": "2024-08-01T00:00:00.000Z",
    },
    {
        "id": "tender_005",
        "districtId": "1974",
        "status": "lost",
        "province": "İstanbul",
        "district": "Şişli",
        "title": "Premium Lokasyonlar",
        "tender_duration": "24 ay",
        "cabin_count_total": 30,
        "cabin_count_full": 0,
        "rental_fee": "₺20,000/ay",
        "reason_for_loss": "Fiyat rekabeti nedeniyle kaybedildi",
        "meeting_notes": "Rakip firma %15 daha düşük teklif verdi.",
        "created_at": "2024-03-15T00:00:00.000Z",
        "updated_at": "2024-06-20T00:00:00.000Z",
    },
    {
        "id": "tender_006",
        "districtId": "798",
        "status": "won",
        "province": "Ankara",
        "district": "Çankaya",
        "title": "Başkent ATM Projesi",
        "tender_duration": "48 ay",
        "cabin_count_total": 40,
        "cabin_count_full": 35,
        "rental_fee": "₺22,000/ay",
        "last_meeting_date": "2024-06-10",
        "meeting_notes": "Başarılı proje, ek lokasyonlar için görüşme planlanıyor.",
        "created_at": "2023-12-01T00:00:00.000Z",
        "updated_at": "2024-06-10T00:00:00.000Z",
    },
    {
        "id": "tender_007",
        "districtId": "799",
        "status": "negotiating",
        "province": "Ankara",
        "district": "Keçiören",
        "title": "Sosyal Konut Projesi",
        "tender_duration": "36 ay",
        "cabin_count_total": 22,
        "cabin_count_full": 0,
        "rental_fee": "₺14,000/ay",
        "last_meeting_date": "2024-07-30",
        "meeting_notes": "Teknik şartname değişiklikleri görüşülüyor.",
        "created_at": "2024-04-01T00:00:00.000Z",
        "updated_at": "2024-07-30T00:00:00.000Z",
    },
    {
        "id": "tender_008",
        "districtId": "1158",
        "status": "won",
        "province": "İzmir",
        "district": "Konak",
        "title": "Liman Bölgesi Projesi",
        "tender_duration": "42 ay",
        "cabin_count_total": 32,
        "cabin_count_full": 28,
        "rental_fee": "₺19,000/ay",
        "last_meeting_date": "2024-05-20",
        "meeting_notes": "Mükemmel performans, yenileme sözleşmesi görüşülüyor.",
        "created_at": "2023-11-01T00:00:00.000Z",
        "updated_at": "2024-05-20T00:00:00.000Z",
    },
    {
        "id": "tender_009",
        "districtId": "1159",
        "status": "negotiating",
        "province": "İzmir",
        "district": "Bornova",
        "title": "Üniversite Kampüsü",
        "tender_duration": "30 ay",
        "cabin_count_total": 26,
        "cabin_count_full": 0,
        "rental_fee": "₺17,000/ay",
        "last_meeting_date": "2024-07-28",
        "meeting_notes": "Ödeme şartları ve garanti koşulları müzakere ediliyor.",
        "created_at": "2024-05-01T00:00:00.000Z",
        "updated_at": "2024-07-28T00:00:00.000Z",
    },
)

# Keeps the map renderable when the record store cannot be reached.
_FALLBACK_IDS = ("tender_001", "tender_003", "tender_006", "tender_008")


def seed_tenders() -> list[dict[str, Any]]:
    return [dict(item) for item in SEED_TENDERS]


def fallback_records() -> list[StatusRecord]:
    return [
        StatusRecord.model_validate(item) for item in SEED_TENDERS if item["id"] in _FALLBACK_IDS
    ]
