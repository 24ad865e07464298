"""
Preview renderer for computed diagram geometry.

Draws placements as boxes and routes as sampled bezier polylines with arrow
heads into a PNG, for inspecting layout and routing results by eye.
"""

import math
from typing import Dict, Mapping, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .geometry import bounding_box, sample_bezier
from .models import Placement, Point, Route


class PreviewRenderer:
    """Renders placements and routes as a PNG image."""

    def __init__(
        self,
        scale: float = 1.0,
        margin: int = 40,
        curve_samples: int = 32,
        arrow_size: int = 8,
        show_labels: bool = True,
    ):
        self.scale = scale
        self.margin = margin
        self.curve_samples = curve_samples
        self.arrow_size = arrow_size
        self.show_labels = show_labels

        # Colors
        self.bg_color = (255, 255, 255)
        self.box_fill = (245, 245, 245)
        self.box_outline = (0, 0, 0)
        self.text_color = (0, 0, 0)
        self.line_color = (40, 90, 200)

    def _to_canvas(self, point: Point, origin: Tuple[float, float]) -> Point:
        """Convert a diagram point to image pixel coordinates."""
        return (
            (point[0] - origin[0]) * self.scale + self.margin,
            (point[1] - origin[1]) * self.scale + self.margin,
        )

    def _draw_arrow_head(
        self, draw: ImageDraw.ImageDraw, tip: Point, tail: Point
    ) -> None:
        """Draw a filled arrow head at tip, pointing away from tail."""
        angle = math.atan2(tip[1] - tail[1], tip[0] - tail[0])
        size = self.arrow_size
        left = (
            tip[0] - size * math.cos(angle - math.pi / 6),
            tip[1] - size * math.sin(angle - math.pi / 6),
        )
        right = (
            tip[0] - size * math.cos(angle + math.pi / 6),
            tip[1] - size * math.sin(angle + math.pi / 6),
        )
        draw.polygon([tip, left, right], fill=self.line_color)

    def render(
        self,
        placements: Mapping[str, Placement],
        routes: Optional[Mapping[str, Route]] = None,
    ) -> Image.Image:
        """
        Render placements and routes to an image.

        Args:
            placements: Node rectangles keyed by node id
            routes: Optional edge routes keyed by edge id

        Returns:
            A new RGB image
        """
        routes = routes or {}
        bounds = bounding_box(placements.values())
        if bounds is None:
            size = self.margin * 2
            return Image.new("RGB", (size, size), self.bg_color)

        # Control points can reach outside the node bounds
        min_x, min_y, width, height = bounds
        max_x, max_y = min_x + width, min_y + height
        for r in routes.values():
            for x, y in (r.start, r.c1, r.c2, r.end):
                min_x, max_x = min(min_x, x), max(max_x, x)
                min_y, max_y = min(min_y, y), max(max_y, y)

        origin = (min_x, min_y)
        img_width = int(math.ceil((max_x - min_x) * self.scale)) + self.margin * 2
        img_height = int(math.ceil((max_y - min_y) * self.scale)) + self.margin * 2

        img = Image.new("RGB", (img_width, img_height), self.bg_color)
        draw = ImageDraw.Draw(img)
        font = ImageFont.load_default()

        for node_id in sorted(placements):
            p = placements[node_id]
            x1, y1 = self._to_canvas((p.x, p.y), origin)
            x2, y2 = self._to_canvas((p.x2, p.y2), origin)
            draw.rectangle(
                [x1, y1, x2, y2], fill=self.box_fill, outline=self.box_outline
            )
            if self.show_labels:
                cx, cy = self._to_canvas(p.center, origin)
                left, top, right, bottom = draw.textbbox((0, 0), node_id, font=font)
                draw.text(
                    (cx - (right - left) / 2, cy - (bottom - top) / 2),
                    node_id,
                    fill=self.text_color,
                    font=font,
                )

        for edge_id in sorted(routes):
            r = routes[edge_id]
            points = [
                self._to_canvas(
                    sample_bezier(r.start, r.c1, r.c2, r.end, i / self.curve_samples),
                    origin,
                )
                for i in range(self.curve_samples + 1)
            ]
            draw.line(points, fill=self.line_color, width=max(1, int(self.scale)))
            self._draw_arrow_head(draw, points[-1], points[-2])

        return img

    def save(
        self,
        placements: Mapping[str, Placement],
        routes: Optional[Mapping[str, Route]],
        output_path: str,
    ) -> str:
        """Render and write a PNG file, returning its path."""
        self.render(placements, routes).save(output_path, "PNG")
        return output_path


def render_to_png(
    placements: Dict[str, Placement],
    routes: Optional[Dict[str, Route]],
    output_path: str,
    scale: float = 1.0,
) -> str:
    """Convenience wrapper around PreviewRenderer.save."""
    return PreviewRenderer(scale=scale).save(placements, routes, output_path)
