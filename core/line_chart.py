from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

PADDING_RATIO = 0.1

Command = Tuple[str, float, float]


@dataclass(frozen=True)
class LinePoint:
    x: float
    y: float
    value: float
    label: str


@dataclass(frozen=True)
class LineLayout:
    points: List[LinePoint] = field(default_factory=list)
    commands: List[Command] = field(default_factory=list)
    adjusted_min: float = 0.0
    adjusted_max: float = 0.0

    @property
    def path_data(self) -> str:
        return " ".join(f"{cmd} {x} {y}" for cmd, x, y in self.commands)

    def axis_ticks(self) -> List[float]:
        """Y-axis labels, top to bottom."""
        top = self.adjusted_max
        return [top, top * 0.75, top * 0.5, top * 0.25, self.adjusted_min]


def padded_range(values: Sequence[float]) -> Tuple[float, float]:
    high, low = max(values), min(values)
    padding = (high - low) * PADDING_RATIO
    return max(0.0, low - padding), high + padding


def layout_line(
    values: Sequence[float],
    labels: Optional[Sequence[str]] = None,
    *,
    plot_width: float = 85.0,
    plot_height: float = 220.0,
    left: float = 10.0,
    top: float = 40.0,
) -> LineLayout:
    """Polyline geometry for an ordered series.

    Points are evenly spaced on x. y is inverted (larger values sit higher)
    inside a range padded by 10% on both sides and never below zero.
    """
    if not values:
        return LineLayout()
    labels = list(labels) if labels is not None else [str(i) for i in range(len(values))]

    adjusted_min, adjusted_max = padded_range(values)
    span = max(adjusted_max - adjusted_min, 1)
    steps = max(len(values) - 1, 1)

    points: List[LinePoint] = []
    commands: List[Command] = []
    for i, value in enumerate(values):
        x = left + (i / steps) * plot_width
        y = top + plot_height - ((value - adjusted_min) / span) * plot_height
        points.append(LinePoint(x=x, y=y, value=float(value), label=labels[i] if i < len(labels) else str(i)))
        commands.append(("M" if i == 0 else "L", x, y))

    return LineLayout(points=points, commands=commands, adjusted_min=adjusted_min, adjusted_max=adjusted_max)
