from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from domain.models import StatusRecord
from domain.services.normalize_name import normalize_name

UNKNOWN_PROVINCE = "Bilinmiyor"

PROVINCE_BY_CODE: dict[str, str] = {
    "01": "Adana",
    "06": "Ankara",
    "07": "Antalya",
    "16": "Bursa",
    "34": "İstanbul",
    "35": "İzmir",
    "41": "Kocaeli",
}


@dataclass(frozen=True)
class ShapeKey:
    code: str
    province: str
    district_fragment: str
    normalized_province: str
    normalized_district: str


def parse_shape_id(
    shape_id: str,
    province_by_code: Mapping[str, str] | None = None,
) -> ShapeKey:
    table = PROVINCE_BY_CODE if province_by_code is None else province_by_code
    code, _, rest = str(shape_id or "").partition("-")
    province = table.get(code, UNKNOWN_PROVINCE)
    return ShapeKey(
        code=code,
        province=province,
        district_fragment=rest,
        normalized_province=normalize_name(province),
        normalized_district=normalize_name(rest),
    )


def district_display_name(shape_id: str) -> str:
    """Human label for a shape without a record: the first slug segment."""
    parts = str(shape_id or "").split("-")
    return parts[1] if len(parts) > 1 and parts[1] else str(shape_id or "")


def names_overlap(left: str, right: str) -> bool:
    if not left or not right:
        return False
    return left in right or right in left


class RegionMatcher:
    """Resolves an SVG shape id such as ``34-uskudar`` to tender records.

    Shape ids and tender records come from unrelated sources, so the bridge is
    textual: the province code prefix is looked up in a fixed table and the
    remaining slug is compared with the record's district name by
    bidirectional substring containment on normalized text. A strict pass also
    requires the province to match; when it finds nothing, a loose pass drops
    the province constraint. The first record in iteration order wins.

    Containment is best-effort: a district whose name is contained in a
    sibling's name can be claimed by the wrong shape. Matches are not
    disambiguated further.

    Unlike a bare substring test, an empty name never matches: a shape id
    without a district fragment and a record without a district name both
    resolve to nothing, although the empty string is contained in every
    name.
    """

    def __init__(self, province_by_code: Mapping[str, str] | None = None) -> None:
        self._province_by_code = dict(
            PROVINCE_BY_CODE if province_by_code is None else province_by_code
        )

    def parse(self, shape_id: str) -> ShapeKey:
        return parse_shape_id(shape_id, self._province_by_code)

    def resolve(self, shape_id: str, records: Iterable[StatusRecord]) -> StatusRecord | None:
        matches = self.resolve_all(shape_id, records)
        return matches[0] if matches else None

    def resolve_all(
        self, shape_id: str, records: Iterable[StatusRecord]
    ) -> list[StatusRecord]:
        key = self.parse(shape_id)
        candidates: Sequence[StatusRecord] = list(records)
        if not key.normalized_district:
            return []

        strict = self._select(
            candidates,
            lambda record: normalize_name(record.province) == key.normalized_province
            and names_overlap(key.normalized_district, normalize_name(record.district)),
        )
        if strict:
            return strict
        return self._select(
            candidates,
            lambda record: names_overlap(key.normalized_district, normalize_name(record.district)),
        )

    def province_name(self, shape_id: str) -> str:
        """Province-level shapes carry either a plate code or the province name."""
        raw = str(shape_id or "").strip()
        code, _, rest = raw.partition("-")
        province = self._province_by_code.get(code)
        if province is not None:
            return province
        return rest if code.isdigit() else raw

    def resolve_province(
        self, shape_id: str, records: Iterable[StatusRecord]
    ) -> list[StatusRecord]:
        normalized_province = normalize_name(self.province_name(shape_id))
        if not normalized_province:
            return []
        return self._select(
            list(records),
            lambda record: normalize_name(record.province) == normalized_province,
        )

    def _select(
        self,
        records: Sequence[StatusRecord],
        predicate: Callable[[StatusRecord], bool],
    ) -> list[StatusRecord]:
        return [record for record in records if predicate(record)]
