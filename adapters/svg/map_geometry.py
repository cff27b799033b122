from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from pathlib import Path

from adapters.svg.svg_utils import element_bbox, iter_elements, parse_svg, parse_view_box
from domain.errors import MapGeometryError
from domain.models import MapShape, ViewBox
from domain.ports.repositories import MapGeometrySource, MapLevel

logger = logging.getLogger(__name__)


class SvgMapGeometrySource(MapGeometrySource):
    """Reads identified ``<g>`` groups out of the district/province SVG maps.

    Only leaf groups count: a group enclosing another identified group with
    paths is a layer, not a region. District groups are recognised by a dash
    in their id (``34-uskudar``).
    """

    def __init__(self, documents: Mapping[str, Path]) -> None:
        self._documents = dict(documents)

    def document_path(self, level: MapLevel) -> Path:
        path = self._documents.get(level)
        if path is None:
            msg = f"No map document configured for level '{level}'"
            raise MapGeometryError(msg)
        return path

    def load(self, level: MapLevel) -> Sequence[MapShape]:
        path = self.document_path(level)
        root = parse_svg(path)
        shapes: list[MapShape] = []
        seen: set[str] = set()
        for group in iter_elements(root, "g"):
            shape_id = (group.get("id") or "").strip()
            if not shape_id or shape_id in seen:
                continue
            if level == "district" and "-" not in shape_id:
                continue
            if _wraps_identified_group(group):
                continue
            bbox = element_bbox(group)
            if bbox is None:
                continue
            seen.add(shape_id)
            shapes.append(MapShape(shape_id=shape_id, bbox=bbox))
        logger.info("Loaded %d %s shapes from %s", len(shapes), level, path)
        return shapes

    def declared_view_box(self, level: MapLevel) -> ViewBox | None:
        return parse_view_box(parse_svg(self.document_path(level)))


def _wraps_identified_group(group: ET.Element) -> bool:
    # Layer groups such as Inkscape's "layer1" enclose the real regions.
    for child in iter_elements(group, "g"):
        if child is group or not (child.get("id") or "").strip():
            continue
        if any(True for _ in iter_elements(child, "path")):
            return True
    return False
