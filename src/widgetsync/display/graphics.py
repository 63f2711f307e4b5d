"""Graphics utilities for widget rendering.

Provides colors and drawing primitives shared by the widget renderers.
"""

import re
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from .fonts import get_default_font

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# Names accepted by the app's own color parser
_NAMED_COLORS = {
    "black": "000000",
    "darkgray": "444444",
    "darkgrey": "444444",
    "gray": "888888",
    "grey": "888888",
    "lightgray": "CCCCCC",
    "lightgrey": "CCCCCC",
    "white": "FFFFFF",
    "red": "FF0000",
    "green": "00FF00",
    "blue": "0000FF",
    "yellow": "FFFF00",
    "cyan": "00FFFF",
    "magenta": "FF00FF",
    "aqua": "00FFFF",
    "fuchsia": "FF00FF",
    "lime": "00FF00",
    "maroon": "800000",
    "navy": "000080",
    "olive": "808000",
    "purple": "800080",
    "silver": "C0C0C0",
    "teal": "008080",
}


@dataclass(frozen=True)
class Color:
    """RGB color with utility methods."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        # Clamp values
        object.__setattr__(self, "r", max(0, min(255, self.r)))
        object.__setattr__(self, "g", max(0, min(255, self.g)))
        object.__setattr__(self, "b", max(0, min(255, self.b)))

    @classmethod
    def from_hex(cls, hex_color: str) -> "Color":
        """Create color from a hex string or a basic color name.

        Accepts '#RRGGBB' and '#AARRGGBB' (alpha is dropped), the short
        '#RGB' form, and case-insensitive names such as 'red' or 'grey'.
        The leading '#' is optional.

        Raises:
            ValueError: If the string is not a recognized color
        """
        text = hex_color.strip()
        named = _NAMED_COLORS.get(text.lower())
        if named is not None:
            text = named

        match = _HEX_COLOR.match(text)
        if not match:
            raise ValueError(f"Invalid hex color: {hex_color!r}")

        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        elif len(digits) == 8:
            digits = digits[2:]

        return cls(
            r=int(digits[0:2], 16),
            g=int(digits[2:4], 16),
            b=int(digits[4:6], 16),
        )

    def to_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to hex string."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class Colors:
    """Widget palette."""

    WHITE = Color(255, 255, 255)

    # Surfaces
    BACKGROUND = Color(24, 24, 27)
    RING_TRACK = Color(42, 42, 42)
    CELL_TRACK = Color(58, 58, 58)

    # Text
    TEXT = Color(224, 224, 224)
    TEXT_DIM = Color(150, 150, 160)

    # Fallback theme accent (violet)
    DEFAULT_ACCENT = Color(124, 58, 237)


def draw_text(
    image: Image.Image,
    text: str,
    x: int,
    y: int,
    color: Color = Colors.TEXT,
    font_size: int = 10,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None,
) -> None:
    """Draw text on an image.

    Args:
        image: Target image
        text: Text to draw
        x: X position
        y: Y position
        color: Text color
        font_size: Font size (ignored if font provided)
        font: Optional font override
    """
    draw = ImageDraw.Draw(image)
    if font is None:
        font = get_default_font(font_size)
    draw.text((x, y), text, font=font, fill=color.to_tuple())


def draw_centered_text(
    image: Image.Image,
    text: str,
    center_x: float,
    center_y: float,
    color: Color = Colors.TEXT,
    font_size: int = 10,
) -> None:
    """Draw text centered on a point."""
    draw = ImageDraw.Draw(image)
    font = get_default_font(font_size)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = center_x - (right - left) / 2 - left
    y = center_y - (bottom - top) / 2 - top
    draw.text((x, y), text, font=font, fill=color.to_tuple())


def draw_rect(
    image: Image.Image,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color = Colors.WHITE,
    filled: bool = True,
    border_radius: int = 0,
) -> None:
    """Draw a rectangle on an image.

    Args:
        image: Target image
        x: X position
        y: Y position
        width: Rectangle width
        height: Rectangle height
        color: Fill/outline color
        filled: Whether to fill the rectangle
        border_radius: Corner radius for rounded rectangles
    """
    draw = ImageDraw.Draw(image)
    box = [(x, y), (x + width - 1, y + height - 1)]

    if border_radius > 0:
        draw.rounded_rectangle(
            box,
            radius=border_radius,
            fill=color.to_tuple() if filled else None,
            outline=color.to_tuple() if not filled else None,
        )
    elif filled:
        draw.rectangle(box, fill=color.to_tuple())
    else:
        draw.rectangle(box, outline=color.to_tuple())


def draw_line(
    image: Image.Image,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    color: Color = Colors.WHITE,
    width: int = 1,
) -> None:
    """Draw a line on an image."""
    draw = ImageDraw.Draw(image)
    draw.line([(x1, y1), (x2, y2)], fill=color.to_tuple(), width=width)


def draw_progress_ring(
    image: Image.Image,
    box: tuple[float, float, float, float],
    percent: int,
    color_fg: Color,
    color_bg: Color = Colors.RING_TRACK,
    width: int = 2,
) -> None:
    """Draw a circular progress ring inside a bounding box.

    The foreground arc starts at 12 o'clock and runs clockwise.

    Args:
        image: Target image
        box: (left, top, right, bottom) of the ring
        percent: Progress 0-100 (clamped)
        color_fg: Arc color
        color_bg: Track color
        width: Stroke width in pixels
    """
    draw = ImageDraw.Draw(image)
    draw.ellipse(box, outline=color_bg.to_tuple(), width=width)

    clamped = max(0, min(100, percent))
    if clamped <= 0:
        return

    sweep = 360.0 * clamped / 100.0
    # PIL angles are clockwise from 3 o'clock
    draw.arc(box, start=-90, end=-90 + sweep, fill=color_fg.to_tuple(), width=width)
