"""Font lookup with caching."""

import logging
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Default font paths to search
FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/System/Library/Fonts/Helvetica.ttc",  # macOS
    "/System/Library/Fonts/SFCompact.ttf",  # macOS
]


@lru_cache(maxsize=32)
def get_font(path: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Get a font from path with caching.

    Args:
        path: Path to font file
        size: Font size in pixels

    Returns:
        PIL Font object
    """
    try:
        return ImageFont.truetype(path, size)
    except OSError as e:
        logger.warning("Failed to load font %s: %s", path, e)
        return ImageFont.load_default(size)


@lru_cache(maxsize=32)
def get_default_font(size: int = 10) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Get the default system font.

    Args:
        size: Font size in pixels

    Returns:
        PIL Font object
    """
    for font_path in FONT_PATHS:
        if Path(font_path).exists():
            return get_font(font_path, size)

    logger.warning("No system fonts found, using PIL default")
    return ImageFont.load_default(size)
