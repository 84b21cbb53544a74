"""Terminal chart rendering.

Hides how chart descriptors become Rich renderables: bar charts as
horizontal bars scaled to the largest value, line charts as a point
grid with a labelled y axis and the point names underneath.
"""

from collections.abc import Sequence

from rich.console import Console, ConsoleOptions, RenderResult
from rich.text import Text

from ..ai.models import ChartData, ChartKind, ChartPoint
from .config import CHART_BAR_WIDTH, CHART_LINE_HEIGHT

BAR_CHAR = "█"
POINT_CHAR = "●"


def format_value(value: float) -> str:
    """Compact numeric label: integers without decimals, others to 4 digits."""
    return f"{value:.4g}"


class BarChart:
    """Horizontal bar chart.

    Each bar's length is proportional to ``abs(value)`` relative to the
    largest absolute value; negative values are drawn in the error color.
    """

    def __init__(
        self,
        points: Sequence[ChartPoint],
        width: int = CHART_BAR_WIDTH,
        style: str = "#60a5fa",
    ) -> None:
        self.points = list(points)
        self.width = width
        self.style = style

    def bar_lengths(self, width: int | None = None) -> list[int]:
        """Bar lengths in cells for the given width."""
        width = self.width if width is None else width
        peak = max((abs(p.value) for p in self.points), default=0.0)
        if peak == 0:
            return [0 for _ in self.points]
        return [round(abs(p.value) / peak * width) for p in self.points]

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        if not self.points:
            return
        label_width = max(len(p.name) for p in self.points)
        value_width = max(len(format_value(p.value)) for p in self.points)
        width = max(1, min(self.width, options.max_width - label_width - value_width - 2))

        for point, length in zip(self.points, self.bar_lengths(width), strict=True):
            style = "#f87171" if point.value < 0 else self.style
            yield Text.assemble(
                (point.name.rjust(label_width), "bold"),
                " ",
                (BAR_CHAR * length, style),
                " ",
                (format_value(point.value), "dim"),
            )


class LineChart:
    """Line chart drawn as a grid of points, one column per data point."""

    def __init__(
        self,
        points: Sequence[ChartPoint],
        height: int = CHART_LINE_HEIGHT,
        style: str = "#a78bfa",
    ) -> None:
        self.points = list(points)
        self.height = max(2, height)
        self.style = style

    @property
    def column_width(self) -> int:
        longest = max((len(p.name) for p in self.points), default=1)
        return max(3, min(10, longest + 1))

    def rows(self) -> list[str]:
        """Grid rows, top (maximum) to bottom (minimum)."""
        col = self.column_width
        grid = [[" "] * (len(self.points) * col) for _ in range(self.height)]
        if not self.points:
            return ["".join(row) for row in grid]

        values = [p.value for p in self.points]
        low, high = min(values), max(values)
        for index, value in enumerate(values):
            if high == low:
                level = (self.height - 1) // 2
            else:
                level = round((value - low) / (high - low) * (self.height - 1))
            grid[self.height - 1 - level][index * col + col // 2] = POINT_CHAR
        return ["".join(row) for row in grid]

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        if not self.points:
            return
        values = [p.value for p in self.points]
        top, bottom = format_value(max(values)), format_value(min(values))
        axis_width = max(len(top), len(bottom))
        col = self.column_width

        for index, row in enumerate(self.rows()):
            if index == 0:
                label = top
            elif index == self.height - 1:
                label = bottom
            else:
                label = ""
            text = Text(label.rjust(axis_width) + " │", style="dim")
            text.append(row, style=self.style)
            yield text

        yield Text(" " * axis_width + " └" + "─" * (len(self.points) * col), style="dim")
        names = "".join(p.name[:col - 1].center(col) for p in self.points)
        yield Text(" " * (axis_width + 2) + names, style="bold")


def build_chart(chart: ChartData) -> BarChart | LineChart:
    """Pick the renderable matching the descriptor's declared kind."""
    if chart.type is ChartKind.LINE:
        return LineChart(chart.data)
    return BarChart(chart.data)
