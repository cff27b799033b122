from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from pathlib import Path

from domain.errors import MapGeometryError
from domain.models import BoundingBox, ViewBox

SVG_NS = "http://www.w3.org/2000/svg"

_TOKEN_RE = re.compile(
    r"[MmLlHhVvCcSsQqTtAaZz]|[-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?"
)
# Number of arguments consumed per command repetition.
_ARITY = {"m": 2, "l": 2, "h": 1, "v": 1, "c": 6, "s": 4, "q": 4, "t": 2, "a": 7, "z": 0}


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_svg(path: Path) -> ET.Element:
    try:
        tree = ET.parse(path)
    except FileNotFoundError as exc:
        msg = f"Map document not found: {path}"
        raise MapGeometryError(msg) from exc
    except ET.ParseError as exc:
        msg = f"Map document is not valid SVG: {path}: {exc}"
        raise MapGeometryError(msg) from exc
    root = tree.getroot()
    if local_name(root.tag) != "svg":
        msg = f"Map document root is not <svg>: {path}"
        raise MapGeometryError(msg)
    return root


def iter_elements(root: ET.Element, name: str) -> Iterator[ET.Element]:
    for element in root.iter():
        if local_name(element.tag) == name:
            yield element


def parse_view_box(root: ET.Element) -> ViewBox | None:
    raw = root.get("viewBox")
    if not raw:
        return None
    parts = raw.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        x, y, width, height = (float(part) for part in parts)
    except ValueError:
        return None
    box = ViewBox(x, y, width, height)
    return None if box.is_degenerate else box


def path_points(d: str) -> list[tuple[float, float]]:
    """Absolute vertex and control points of an SVG path ``d`` attribute.

    Control points are kept, so the bounding box of the result may be a bit
    larger than the drawn curve; arcs contribute their end points only.
    """
    tokens = _TOKEN_RE.findall(d or "")
    points: list[tuple[float, float]] = []
    x = y = 0.0
    start_x = start_y = 0.0
    command = ""
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.isalpha():
            command = token
            index += 1
            if command in "Zz":
                x, y = start_x, start_y
            continue
        if not command or command in "Zz":
            index += 1
            continue
        arity = _ARITY[command.lower()]
        args = tokens[index : index + arity]
        if len(args) < arity or any(arg.isalpha() for arg in args):
            break
        values = [float(arg) for arg in args]
        index += arity
        relative = command.islower()
        lower = command.lower()
        if lower == "h":
            x = x + values[0] if relative else values[0]
            points.append((x, y))
            continue
        if lower == "v":
            y = y + values[0] if relative else values[0]
            points.append((x, y))
            continue
        if lower == "a":
            end_x, end_y = values[5], values[6]
            x, y = (x + end_x, y + end_y) if relative else (end_x, end_y)
            points.append((x, y))
            continue
        base_x, base_y = (x, y) if relative else (0.0, 0.0)
        pairs = [
            (base_x + values[offset], base_y + values[offset + 1])
            for offset in range(0, arity, 2)
        ]
        points.extend(pairs)
        x, y = pairs[-1]
        if lower == "m":
            start_x, start_y = x, y
            # Extra coordinate pairs after a moveto are implicit linetos.
            command = "l" if relative else "L"
    return points


def element_bbox(element: ET.Element) -> BoundingBox | None:
    boxes = [
        box
        for box in (
            BoundingBox.from_points(path_points(path.get("d", "")))
            for path in iter_elements(element, "path")
        )
        if box is not None
    ]
    if not boxes:
        return None
    result = boxes[0]
    for box in boxes[1:]:
        result = result.union(box)
    return result
