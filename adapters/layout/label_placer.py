from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.models import LabelCandidate, PlacedLabel
from domain.ports.layout import LabelPlacer
from domain.services.viewport import ViewportTransform


@dataclass(frozen=True)
class LabelPlacerConfig:
    zoom_threshold: float = 3.0
    min_region_size: float = 2.0
    gap_x: float = 10.0
    gap_y: float = 5.0


class GreedyLabelPlacer(LabelPlacer):
    """Single-pass greedy packing of region labels in screen space.

    Candidates are visited by descending priority; each one is accepted when
    its box clears every already accepted box and rejected for good
    otherwise. Pairwise checks make a pass quadratic in the candidate count.
    """

    def __init__(self, config: LabelPlacerConfig | None = None) -> None:
        self.config = config or LabelPlacerConfig()

    def place(
        self,
        candidates: Sequence[LabelCandidate],
        transform: ViewportTransform,
        zoom_threshold: float | None = None,
    ) -> list[PlacedLabel]:
        threshold = self.config.zoom_threshold if zoom_threshold is None else zoom_threshold
        if transform.zoom_level <= threshold:
            return []

        eligible = [
            candidate
            for candidate in candidates
            if candidate.region_size > self.config.min_region_size
        ]
        # sorted() is stable: equal priorities keep their input order.
        eligible = sorted(eligible, key=lambda candidate: -candidate.priority)

        placed: list[PlacedLabel] = []
        for candidate in eligible:
            screen = transform.to_screen(candidate.anchor.x, candidate.anchor.y)
            if not screen.visible:
                continue
            label = PlacedLabel(candidate, screen.screen_x, screen.screen_y)
            if any(self._collides(label, other) for other in placed):
                continue
            placed.append(label)
        return placed

    def reposition(
        self, labels: Sequence[PlacedLabel], transform: ViewportTransform
    ) -> list[PlacedLabel]:
        repositioned: list[PlacedLabel] = []
        for label in labels:
            anchor = label.candidate.anchor
            screen = transform.to_screen(anchor.x, anchor.y)
            repositioned.append(
                PlacedLabel(label.candidate, screen.screen_x, screen.screen_y, screen.visible)
            )
        return repositioned

    def _collides(self, label: PlacedLabel, other: PlacedLabel) -> bool:
        dx = abs(label.screen_x - other.screen_x)
        dy = abs(label.screen_y - other.screen_y)
        limit_x = (label.candidate.size.width + other.candidate.size.width) / 2 + self.config.gap_x
        limit_y = (
            label.candidate.size.height + other.candidate.size.height
        ) / 2 + self.config.gap_y
        return dx < limit_x and dy < limit_y
