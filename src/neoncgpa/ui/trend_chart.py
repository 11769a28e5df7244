from typing import List

import flet as ft
import flet.canvas as cv

from neoncgpa.core.gpa import TREND_HEIGHT, TREND_WIDTH, trend_points


def build_trend_chart(trend: List[float]) -> ft.Control:
    """GPA line chart; an empty container until two semesters have data."""
    points = trend_points(trend)
    if not points:
        return ft.Container(height=TREND_HEIGHT)

    line_paint = ft.Paint(color=ft.Colors.CYAN_300, stroke_width=2, style=ft.PaintingStyle.STROKE)
    dot_paint = ft.Paint(color=ft.Colors.PINK_300, style=ft.PaintingStyle.FILL)

    shapes: List[cv.Shape] = [
        cv.Line(x1, y1, x2, y2, paint=line_paint)
        for (x1, y1), (x2, y2) in zip(points, points[1:])
    ]
    shapes.extend(cv.Circle(x, y, 3, paint=dot_paint) for x, y in points)

    return ft.Container(
        padding=ft.padding.symmetric(vertical=6),
        content=cv.Canvas(shapes=shapes, width=TREND_WIDTH, height=TREND_HEIGHT),
    )
