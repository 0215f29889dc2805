"""Freehand scratch layer drawn over the quiz.

The canvas is pure state: the browser side only reports pointer positions and
repaints whatever `visible_paths()` returns. Erasing removes whole strokes that
pass within `threshold` pixels of the eraser.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class DrawingTool(str, Enum):
    CURSOR = "cursor"
    PENCIL = "pencil"
    ERASER = "eraser"

    @property
    def icon(self) -> str:
        return {"cursor": "↖", "pencil": "✎", "eraser": "⌫"}[self.value]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def pointer_cursor(self) -> str:
        return {"cursor": "default", "pencil": "crosshair", "eraser": "cell"}[self.value]


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class DrawingPath:
    points: list[Point] = field(default_factory=list)
    tool: DrawingTool = DrawingTool.PENCIL

    def to_dict(self) -> dict[str, Any]:
        return {"tool": self.tool.value, "points": [[p.x, p.y] for p in self.points]}


def distance_to_segment(point: Point, start: Point, end: Point) -> float:
    """Distance from `point` to the segment `start`-`end`."""

    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return math.hypot(point.x - start.x, point.y - start.y)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))

    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def is_point_near_path(point: Point, path: DrawingPath, threshold: float = 20.0) -> bool:
    points = path.points
    if len(points) == 1:
        return distance_to_segment(point, points[0], points[0]) <= threshold
    for start, end in zip(points, points[1:]):
        if distance_to_segment(point, start, end) <= threshold:
            return True
    return False


@dataclass
class AnnotationCanvas:
    """Pencil/eraser state machine driven by pointer events."""

    tool: DrawingTool = DrawingTool.CURSOR
    threshold: float = 20.0
    paths: list[DrawingPath] = field(default_factory=list)
    current_path: list[Point] = field(default_factory=list)
    is_drawing: bool = False
    last_clear_trigger: int = 0
    last_batch: tuple[Any, Any] | None = None

    def set_tool(self, tool: DrawingTool | str) -> None:
        # Switching tools mid-stroke drops the unfinished stroke.
        self.tool = DrawingTool(tool)
        self.is_drawing = False
        self.current_path = []

    def start(self, point: Point) -> None:
        if self.tool is DrawingTool.CURSOR:
            return
        self.is_drawing = True
        if self.tool is DrawingTool.ERASER:
            self.erase_at(point)
        else:
            self.current_path = [point]

    def move(self, point: Point) -> None:
        if not self.is_drawing or self.tool is DrawingTool.CURSOR:
            return
        if self.tool is DrawingTool.ERASER:
            self.erase_at(point)
        else:
            self.current_path.append(point)

    def stop(self) -> None:
        if not self.is_drawing:
            return
        if self.current_path and self.tool is DrawingTool.PENCIL:
            self.paths.append(DrawingPath(points=list(self.current_path), tool=self.tool))
        self.is_drawing = False
        self.current_path = []

    def erase_at(self, point: Point) -> int:
        """Drop every stroke near `point`; returns how many were removed."""

        kept = [p for p in self.paths if not is_point_near_path(point, p, self.threshold)]
        removed = len(self.paths) - len(kept)
        self.paths = kept
        return removed

    def clear(self) -> None:
        self.paths = []
        self.current_path = []
        self.is_drawing = False

    def sync_clear_trigger(self, value: int) -> bool:
        """Clear when the quiz reports a new question transition."""

        # Every value is recorded, so a session restarting its counter from 0
        # still clears on its first transition.
        if value == self.last_clear_trigger:
            return False
        self.last_clear_trigger = value
        if value > 0:
            self.clear()
            return True
        return False

    def visible_paths(self) -> list[DrawingPath]:
        return [p for p in self.paths if p.tool is DrawingTool.PENCIL and len(p.points) >= 2]

    def apply_events(self, events: Iterable[dict[str, Any]]) -> None:
        """Replay browser pointer events: `{"type": "down"|"move"|"up", "x": .., "y": ..}`."""

        for event in events:
            kind = event.get("type")
            if kind == "up":
                self.stop()
                continue
            point = Point(float(event.get("x", 0.0)), float(event.get("y", 0.0)))
            if kind == "down":
                self.start(point)
            elif kind == "move":
                self.move(point)

    def apply_batch(self, value: dict[str, Any] | None) -> bool:
        """Apply one browser batch `{"mount": .., "batch": .., "events": [..]}` once.

        A batch is identified by the component mount id plus its counter, so a
        remounted overlay restarting at 1 is not mistaken for a replay.
        """

        if not value:
            return False
        batch_id = (value.get("mount"), value.get("batch"))
        if batch_id == self.last_batch:
            return False
        self.last_batch = batch_id
        self.apply_events(value.get("events") or [])
        return True

    def to_svg(self, width: int, height: int, *, stroke: str = "#ffffff", stroke_width: int = 2) -> str:
        polylines = []
        for path in self.visible_paths():
            coords = " ".join(f"{p.x:g},{p.y:g}" for p in path.points)
            polylines.append(
                f'<polyline points="{coords}" fill="none" stroke="{stroke}" '
                f'stroke-width="{stroke_width}" stroke-linecap="round" stroke-linejoin="round"/>'
            )
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">{"".join(polylines)}</svg>'
        )
