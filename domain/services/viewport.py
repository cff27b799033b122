from __future__ import annotations

from dataclasses import dataclass

from domain.models import BoundingBox, Point, ScreenPoint, Size, ViewBox

ZOOM_IN_FACTOR = 0.8
ZOOM_OUT_FACTOR = 1.25


@dataclass(frozen=True)
class ViewportConfig:
    reference_width: float = 1000.0
    visible_padding: float = 50.0


class ViewportTransform:
    """Pan/zoom state of the map: a model-space view box drawn onto a canvas.

    The canvas is ``canvas.width x canvas.height`` pixels. Screen coordinates
    are relative to the canvas' top-left corner.
    """

    def __init__(
        self,
        canvas: Size,
        view_box: ViewBox | None = None,
        config: ViewportConfig | None = None,
    ) -> None:
        if canvas.width <= 0 or canvas.height <= 0:
            msg = f"Canvas size must be positive, got {canvas.width}x{canvas.height}"
            raise ValueError(msg)
        self.canvas = canvas
        self.view_box = view_box or ViewBox(0.0, 0.0, 0.0, 0.0)
        self.config = config or ViewportConfig()

    def ensure_view_box(self, content: BoundingBox | None) -> ViewBox:
        if self.view_box.is_degenerate and content is not None:
            self.view_box = ViewBox(content.x, content.y, content.width, content.height)
        return self.view_box

    @property
    def zoom_level(self) -> float:
        if self.view_box.width <= 0:
            return 0.0
        return self.config.reference_width / self.view_box.width

    @property
    def scale(self) -> tuple[float, float]:
        return (
            self.canvas.width / self.view_box.width,
            self.canvas.height / self.view_box.height,
        )

    def zoom(self, mouse_x: float, mouse_y: float, factor: float) -> ViewBox:
        if factor <= 0:
            msg = f"Zoom factor must be positive, got {factor}"
            raise ValueError(msg)
        box = self.view_box
        new_width = box.width * factor
        new_height = box.height * factor
        ratio_x = mouse_x / self.canvas.width
        ratio_y = mouse_y / self.canvas.height
        self.view_box = ViewBox(
            box.x + (box.width - new_width) * ratio_x,
            box.y + (box.height - new_height) * ratio_y,
            new_width,
            new_height,
        )
        return self.view_box

    def zoom_wheel(self, mouse_x: float, mouse_y: float, delta_y: float) -> ViewBox:
        factor = ZOOM_IN_FACTOR if delta_y < 0 else ZOOM_OUT_FACTOR
        return self.zoom(mouse_x, mouse_y, factor)

    def pan(self, dx_screen: float, dy_screen: float) -> ViewBox:
        box = self.view_box
        self.view_box = ViewBox(
            box.x - dx_screen / self.canvas.width * box.width,
            box.y - dy_screen / self.canvas.height * box.height,
            box.width,
            box.height,
        )
        return self.view_box

    def to_screen(self, model_x: float, model_y: float) -> ScreenPoint:
        if self.view_box.is_degenerate:
            return ScreenPoint(0.0, 0.0, False)
        scale_x, scale_y = self.scale
        screen_x = (model_x - self.view_box.x) * scale_x
        screen_y = (model_y - self.view_box.y) * scale_y
        padding = self.config.visible_padding
        visible = (
            -padding <= screen_x <= self.canvas.width + padding
            and -padding <= screen_y <= self.canvas.height + padding
        )
        return ScreenPoint(screen_x, screen_y, visible)

    def to_model(self, screen_x: float, screen_y: float) -> Point:
        if self.view_box.is_degenerate:
            return Point(self.view_box.x, self.view_box.y)
        scale_x, scale_y = self.scale
        return Point(
            self.view_box.x + screen_x / scale_x,
            self.view_box.y + screen_y / scale_y,
        )
