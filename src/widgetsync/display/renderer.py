"""PIL-based rendering of widget view models.

Renderers are pure: a view model in, a new image out.
"""

import logging
import textwrap

from PIL import Image

from ..widgets.calendar import GRID_COLUMNS, WEEKDAY_LABELS, DayCell, rows
from ..widgets.views import (
    CalendarView,
    HabitProgressView,
    SnippetView,
    StatsView,
    ViewModel,
)
from .graphics import (
    Color,
    Colors,
    draw_centered_text,
    draw_line,
    draw_progress_ring,
    draw_rect,
    draw_text,
)

logger = logging.getLogger(__name__)

ACCENT_STRIP_WIDTH = 6
CALENDAR_LEFT = ACCENT_STRIP_WIDTH + 6
CALENDAR_HEADER_HEIGHT = 34


def render_ring(size: int, stroke: int, percent: int, accent: Color) -> Image.Image:
    """Render a standalone progress ring.

    Args:
        size: Image edge length in pixels
        stroke: Ring stroke width in pixels
        percent: Progress 0-100 (clamped)
        accent: Arc color

    Returns:
        Square RGBA image with transparent background
    """
    size = max(1, size)
    stroke = max(1, stroke)
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    pad = stroke / 2
    draw_progress_ring(
        image,
        (pad, pad, size - 1 - pad, size - 1 - pad),
        percent,
        color_fg=accent,
        color_bg=Colors.RING_TRACK,
        width=stroke,
    )
    return image


def render_day_cell(size: int, cell: DayCell, accent: Color) -> Image.Image:
    """Render one calendar slot.

    Empty slots render as a fully transparent image. Day slots get a
    progress ring, the centered day number and a diagonal slash when the
    day has a journal entry.
    """
    size = max(1, size)
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    if cell.is_empty:
        return image

    center = size / 2
    radius = size * 0.42
    stroke = max(1, round(size * 0.12))
    draw_progress_ring(
        image,
        (center - radius, center - radius, center + radius, center + radius),
        cell.progress_percent,
        color_fg=accent,
        color_bg=Colors.CELL_TRACK,
        width=stroke,
    )

    draw_centered_text(
        image,
        str(cell.day_number),
        center,
        center,
        color=Colors.TEXT,
        font_size=max(6, round(size * 0.32)),
    )

    if cell.has_entry:
        slash = radius * 0.6
        draw_line(
            image,
            center + slash,
            center - slash,
            center - slash,
            center + slash,
            color=accent,
            width=max(1, round(size * 0.06)),
        )

    return image


def _canvas(width: int, height: int, accent: Color) -> Image.Image:
    image = Image.new("RGBA", (width, height), Colors.BACKGROUND.to_tuple() + (255,))
    draw_rect(image, 0, 0, ACCENT_STRIP_WIDTH, height, accent)
    return image


def _render_habit_progress(view: HabitProgressView, width: int, height: int) -> Image.Image:
    image = _canvas(width, height, view.accent)
    ring_size = min(height - 20, width // 2)
    ring = render_ring(ring_size, max(2, ring_size // 10), view.percent, view.accent)
    ring_x = ACCENT_STRIP_WIDTH + 12
    ring_y = (height - ring_size) // 2
    image.alpha_composite(ring, (ring_x, ring_y))
    draw_centered_text(
        image,
        f"{view.percent}%",
        ring_x + ring_size / 2,
        ring_y + ring_size / 2,
        font_size=max(8, ring_size // 5),
    )

    text_x = ring_x + ring_size + 16
    draw_text(image, view.label, text_x, height // 2 - 22, font_size=24)
    draw_text(image, "habits today", text_x, height // 2 + 8, Colors.TEXT_DIM, font_size=12)
    return image


def _render_stats(view: StatsView, width: int, height: int) -> Image.Image:
    image = _canvas(width, height, view.accent)
    columns = (
        (str(view.entries), "entries"),
        (str(view.streak), "streak"),
        (str(view.words), "words"),
    )
    column_width = (width - ACCENT_STRIP_WIDTH) / len(columns)
    for i, (value, label) in enumerate(columns):
        center_x = ACCENT_STRIP_WIDTH + column_width * (i + 0.5)
        draw_centered_text(image, value, center_x, height * 0.42, font_size=22)
        draw_centered_text(image, label, center_x, height * 0.68, Colors.TEXT_DIM, font_size=11)
    return image


def _render_snippet(view: SnippetView, width: int, height: int) -> Image.Image:
    image = _canvas(width, height, view.accent)
    x = ACCENT_STRIP_WIDTH + 10
    draw_text(image, view.date_label, x, 10, Colors.TEXT_DIM, font_size=11)

    # ~7px per glyph at 13px
    chars_per_line = max(8, (width - x - 10) // 7)
    color = Colors.TEXT_DIM if view.is_prompt else Colors.TEXT
    y = 34
    for line in textwrap.wrap(view.text, chars_per_line)[: max(1, (height - y) // 18)]:
        draw_text(image, line, x, y, color, font_size=13)
        y += 18
    return image


def _render_calendar(view: CalendarView, width: int, height: int, cell_size: int) -> Image.Image:
    image = _canvas(width, height, view.accent)
    x0 = CALENDAR_LEFT
    draw_text(image, view.month_label, x0, 4, font_size=12)
    draw_text(image, view.date_label, x0 + 40, 4, Colors.TEXT_DIM, font_size=10)
    draw_text(image, f"streak {view.streak}", width - 64, 4, view.accent, font_size=10)

    header_height = CALENDAR_HEADER_HEIGHT

    for col, label in enumerate(WEEKDAY_LABELS):
        draw_centered_text(
            image, label, x0 + col * cell_size + cell_size / 2, 24, Colors.TEXT_DIM, font_size=9
        )

    for row_index, row in enumerate(rows(list(view.cells))):
        for col, cell in enumerate(row):
            tile = render_day_cell(cell_size, cell, view.accent)
            image.alpha_composite(tile, (x0 + col * cell_size, header_height + row_index * cell_size))
            if cell.is_today:
                draw_rect(
                    image,
                    x0 + col * cell_size,
                    header_height + row_index * cell_size,
                    cell_size,
                    cell_size,
                    view.accent,
                    filled=False,
                    border_radius=3,
                )
    return image


def render_view(view: ViewModel, width: int, height: int, cell_size: int | None = None) -> Image.Image:
    """Render a view model to an RGB image.

    Args:
        view: Any widget view model
        width: Image width in pixels
        height: Image height in pixels
        cell_size: Calendar cell size; the image grows to fit the grid

    Returns:
        RGB image ready to be saved
    """
    if isinstance(view, HabitProgressView):
        image = _render_habit_progress(view, width, height)
    elif isinstance(view, StatsView):
        image = _render_stats(view, width, height)
    elif isinstance(view, SnippetView):
        image = _render_snippet(view, width, height)
    elif isinstance(view, CalendarView):
        week_rows = max(1, len(view.cells) // GRID_COLUMNS)
        if cell_size is None:
            cell_size = min(
                (width - CALENDAR_LEFT - 4) // GRID_COLUMNS,
                (height - CALENDAR_HEADER_HEIGHT) // week_rows,
            )
        cell_size = max(8, cell_size)
        # Grow the canvas so the whole grid fits
        width = max(width, CALENDAR_LEFT + 4 + cell_size * GRID_COLUMNS)
        height = max(height, CALENDAR_HEADER_HEIGHT + cell_size * week_rows)
        image = _render_calendar(view, width, height, cell_size)
    else:
        raise TypeError(f"Unsupported view model: {type(view).__name__}")

    return image.convert("RGB")
