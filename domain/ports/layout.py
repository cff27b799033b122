from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import LabelCandidate, PlacedLabel
from domain.services.viewport import ViewportTransform


class LabelPlacer(Protocol):
    def place(
        self,
        candidates: Sequence[LabelCandidate],
        transform: ViewportTransform,
        zoom_threshold: float | None = None,
    ) -> list[PlacedLabel]: ...

    def reposition(
        self, labels: Sequence[PlacedLabel], transform: ViewportTransform
    ) -> list[PlacedLabel]: ...
