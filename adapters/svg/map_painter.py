from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from pathlib import Path

from adapters.svg.svg_utils import SVG_NS, iter_elements, parse_svg
from domain.models import Region

STROKE_COLOR = "#374151"


class SvgMapPainter:
    """Writes region fills into a copy of the source SVG document."""

    def paint(self, document: Path, regions: Sequence[Region]) -> str:
        ET.register_namespace("", SVG_NS)
        root = parse_svg(document)
        by_id = {region.shape_id: region for region in regions}
        for group in iter_elements(root, "g"):
            region = by_id.get(group.get("id") or "")
            if region is None:
                continue
            for path in iter_elements(group, "path"):
                path.set("class", "district-path")
                path.set("data-district-group-id", region.shape_id)
                path.set("data-status", region.status or "none")
                path.set(
                    "style",
                    f"fill:{region.color};stroke:{STROKE_COLOR};stroke-width:1;"
                    f"opacity:{region.opacity:g};cursor:pointer",
                )
        root.set("width", "100%")
        root.set("height", "100%")
        return ET.tostring(root, encoding="unicode")
